"""Pytest fixtures for the simulator tests"""

from decimal import Decimal

import pytest

from finance_sim.data_models import GracePeriodParameters, LeasingParameters, LoanParameters


@pytest.fixture
def vehicle_loan() -> LoanParameters:
    """40 000 financed at 1.5 % a month over 48 months, no fee or tax"""
    return LoanParameters(principal=Decimal("40000"), periodic_rate=Decimal("0.015"), number_of_periods=48)


@pytest.fixture
def vehicle_loan_2025() -> LoanParameters:
    """50 000 vehicle, 10 000 down, 800 opening fee, IOF financed"""
    return LoanParameters(
        principal=Decimal("50000"),
        down_payment=Decimal("10000"),
        opening_fee=Decimal("800"),
        include_tax=True,
        periodic_rate=Decimal("0.015"),
        number_of_periods=48,
    )


@pytest.fixture
def student_loan() -> GracePeriodParameters:
    return GracePeriodParameters(
        monthly_tuition=Decimal("1200"),
        financed_percentage=Decimal("100"),
        course_duration_semesters=8,
        annual_rate=Decimal("0.06"),
    )


@pytest.fixture
def leasing_offer() -> LeasingParameters:
    return LeasingParameters(
        vehicle_price=Decimal("100000"),
        down_payment_percentage=Decimal("20"),
        financing_rate=Decimal("0.018"),
        leasing_rate=Decimal("0.015"),
        number_of_periods=36,
        residual_percentage=Decimal("20"),
    )
