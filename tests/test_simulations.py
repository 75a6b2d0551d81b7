"""Unit tests for the product simulations"""

from dataclasses import replace
from decimal import Decimal

import pytest

from finance_sim.data_models import GracePeriodParameters, LoanParameters
from finance_sim.engine import calculate_installment
from finance_sim.errors import InvalidParameter
from finance_sim.simulations import (
    FINANCING,
    LEASING,
    TIE,
    _winner,
    amortization_periods,
    compare_leasing,
    simulate_balloon,
    simulate_financing,
    simulate_grace_period,
)
from finance_sim.tax import compute_transaction_tax


# --- plain financing -------------------------------------------------------


def test_plain_financing_without_tax(vehicle_loan):
    result = simulate_financing(vehicle_loan)

    assert float(result.installment_amount) == pytest.approx(1175.00, abs=0.01)
    assert result.total_paid == result.installment_amount * 48
    assert float(result.total_interest) == pytest.approx(16400.0, abs=0.5)
    assert result.tax is None
    assert result.tax_amount is None
    assert result.effective_rate is None
    assert result.number_of_periods == 48
    assert result.financed_amount == result.net_amount == Decimal("40000")


def test_zero_rate_financing_has_no_interest():
    params = LoanParameters(principal=Decimal("10000"), periodic_rate=Decimal("0"), number_of_periods=10)

    result = simulate_financing(params)

    assert result.installment_amount == Decimal("1000")
    assert result.total_interest == 0


def test_fee_and_tax_are_financed_and_show_in_cet(vehicle_loan_2025):
    result = simulate_financing(vehicle_loan_2025, with_effective_rate=True)

    assert result.net_amount == Decimal("40000")
    assert result.tax_amount == Decimal("1376.184")
    assert result.financed_amount == Decimal("40800") + Decimal("1376.184")
    assert result.installment_amount == calculate_installment(result.financed_amount, Decimal("0.015"), 48)
    assert result.total_interest == result.total_paid - result.financed_amount
    assert result.effective_rate.converged
    assert result.effective_rate.monthly_rate > Decimal("1.5")


def test_principal_portions_sum_to_financed_amount(vehicle_loan_2025):
    result = simulate_financing(vehicle_loan_2025)

    total_principal = sum(r.principal_portion for r in result.schedule)
    assert abs(total_principal - result.financed_amount) < Decimal("1e-6")


def test_sac_financing_totals_follow_schedule():
    params = LoanParameters(principal=Decimal("12000"), periodic_rate=Decimal("0.01"), number_of_periods=12)

    result = simulate_financing(params, system="sac", with_effective_rate=True)

    assert result.system == "sac"
    assert result.installment_amount == Decimal("1120")
    assert result.total_paid == Decimal("12780")
    assert result.total_interest == Decimal("780")
    assert result.effective_rate.converged
    assert float(result.effective_rate.monthly_rate) == pytest.approx(1.0, abs=1e-3)


def test_sac_cet_rises_with_financed_fee():
    params = LoanParameters(
        principal=Decimal("12000"), periodic_rate=Decimal("0.01"), number_of_periods=12, opening_fee=Decimal("500")
    )

    result = simulate_financing(params, system="sac", with_effective_rate=True)

    assert result.effective_rate.converged
    assert result.effective_rate.monthly_rate > Decimal("1.0")


@pytest.mark.parametrize(
    "changes",
    [
        {"down_payment": Decimal("40000")},
        {"down_payment": Decimal("-1")},
        {"opening_fee": Decimal("-100")},
        {"number_of_periods": 0},
    ],
)
def test_invalid_financing_inputs_are_rejected(vehicle_loan, changes):
    with pytest.raises(InvalidParameter):
        simulate_financing(replace(vehicle_loan, **changes))


# --- balloon ---------------------------------------------------------------


@pytest.fixture
def balloon_loan() -> LoanParameters:
    return LoanParameters(principal=Decimal("80000"), periodic_rate=Decimal("0.0159"), number_of_periods=36)


def test_balloon_defers_share_of_principal(balloon_loan):
    result = simulate_balloon(balloon_loan, Decimal("30"))

    assert result.balloon_installment_amount == Decimal("24000")
    assert result.balloon_percentage == Decimal("30")
    assert result.installment_amount == calculate_installment(Decimal("56000"), Decimal("0.0159"), 36)
    assert len(result.schedule) == 37

    last = result.schedule[-1]
    assert last.index == 37
    assert last.payment_amount == Decimal("24000")
    assert last.interest_portion == 0
    assert last.remaining_balance == 0
    assert result.schedule[-2].remaining_balance == Decimal("24000")


def test_balloon_schedule_repays_everything(balloon_loan):
    result = simulate_balloon(balloon_loan, Decimal("30"))

    balances = [r.remaining_balance for r in result.schedule]
    assert balances == sorted(balances, reverse=True)
    total_principal = sum(r.principal_portion for r in result.schedule)
    assert abs(total_principal - Decimal("80000")) < Decimal("1e-6")
    assert result.total_paid == result.installment_amount * 36 + Decimal("24000")
    assert abs(result.total_interest - (result.installment_amount * 36 - Decimal("56000"))) < Decimal("1e-12")


def test_balloon_lowers_installment_compared_to_plain_financing(balloon_loan):
    plain = simulate_financing(balloon_loan)
    balloon = simulate_balloon(balloon_loan, Decimal("30"))

    assert balloon.installment_amount < plain.installment_amount


def test_balloon_tax_counts_the_balloon_as_an_extra_period(balloon_loan):
    params = replace(balloon_loan, include_tax=True)

    result = simulate_balloon(params, Decimal("30"))

    expected_tax = compute_transaction_tax(Decimal("80000"), 37)
    assert result.tax == expected_tax
    assert result.installment_amount == calculate_installment(
        Decimal("56000") + expected_tax.amount, Decimal("0.0159"), 36
    )
    assert result.balloon_installment_amount == Decimal("24000")


def test_balloon_cet_includes_final_payment(balloon_loan):
    params = replace(balloon_loan, opening_fee=Decimal("1000"), include_tax=True)

    result = simulate_balloon(params, Decimal("30"), with_effective_rate=True)

    assert result.effective_rate.converged
    assert result.effective_rate.monthly_rate > 0


@pytest.mark.parametrize("percentage", ["0", "100", "-5", "120"])
def test_balloon_percentage_must_be_a_proper_share(balloon_loan, percentage):
    with pytest.raises(InvalidParameter):
        simulate_balloon(balloon_loan, Decimal(percentage))


# --- grace period ------------------------------------------------------------


def test_grace_period_phases(student_loan):
    result = simulate_grace_period(student_loan)

    assert result.co_participation == 0
    assert result.financed_total == Decimal("57600")
    assert result.course_total == Decimal("57600")
    assert result.monthly_rate == Decimal("0.005")

    assert (result.utilization.periods, result.grace.periods, result.amortization.periods) == (48, 18, 48)
    assert result.grace.payment == Decimal("288.000")
    assert result.amortization.payment == calculate_installment(Decimal("57600"), Decimal("0.005"), 48)
    assert result.total_periods == 114
    assert len(result.schedule) == 48


def test_grace_period_totals(student_loan):
    result = simulate_grace_period(student_loan)

    expected_paid = result.grace.payment * 18 + result.amortization.payment * 48
    assert result.total_paid == expected_paid
    assert result.total_interest == expected_paid - Decimal("57600")
    assert result.income_commitment is None


def test_partial_financing_charges_co_participation(student_loan):
    params = replace(student_loan, financed_percentage=Decimal("50"), monthly_income=Decimal("2000"))

    result = simulate_grace_period(params)

    assert result.financed_per_month == Decimal("600")
    assert result.co_participation == Decimal("600")
    assert result.utilization.total == Decimal("600") * 48
    assert result.income_commitment == result.amortization.payment / Decimal("2000") * 100


def test_zero_rate_grace_period_costs_nothing_extra(student_loan):
    result = simulate_grace_period(replace(student_loan, annual_rate=Decimal("0")))

    assert result.grace.payment == 0
    assert result.amortization.payment == Decimal("1200")
    assert result.total_interest == 0


@pytest.mark.parametrize(
    "semesters, multiplier, expected",
    [(8, "1", 48), (6, "1.5", 54), (10, "2", 120), (12, "3", 216)],
)
def test_amortization_periods(semesters, multiplier, expected):
    assert amortization_periods(semesters, Decimal(multiplier)) == expected


@pytest.mark.parametrize(
    "changes",
    [
        {"monthly_tuition": Decimal("0")},
        {"financed_percentage": Decimal("0")},
        {"financed_percentage": Decimal("101")},
        {"course_duration_semesters": 0},
        {"amortization_multiplier": Decimal("0")},
        {"annual_rate": Decimal("-0.01")},
        {"monthly_income": Decimal("0")},
    ],
)
def test_invalid_grace_period_inputs_are_rejected(student_loan, changes):
    with pytest.raises(InvalidParameter):
        simulate_grace_period(replace(student_loan, **changes))


# --- leasing -------------------------------------------------------------------


def test_leasing_comparison_amounts(leasing_offer):
    result = compare_leasing(leasing_offer)

    assert result.down_payment == Decimal("20000")
    assert result.residual_value == Decimal("20000")
    assert result.financing.net_amount == Decimal("80000")
    assert result.financing.tax is not None
    assert result.leasing.net_amount == Decimal("60000")
    assert result.leasing.tax is None
    assert result.leasing_total_cost == Decimal("40000") + result.leasing.total_paid
    assert result.financing_total_cost == Decimal("20000") + result.financing.total_paid
    assert result.tax_deduction == 0
    assert result.leasing_net_cost == result.leasing_total_cost


def test_cheaper_lease_wins_both_comparisons(leasing_offer):
    result = compare_leasing(leasing_offer)

    assert result.gross_winner == LEASING
    assert result.net_winner == LEASING
    expected = abs(result.leasing_total_cost - result.financing_total_cost) / result.financing_total_cost * 100
    assert result.difference_percentage == expected


def test_business_deduction_reduces_lease_cost(leasing_offer):
    result = compare_leasing(replace(leasing_offer, business_filer=True))

    assert result.tax_deduction == result.leasing.total_paid * Decimal("0.25")
    assert result.leasing_net_cost == result.leasing_total_cost - result.tax_deduction


def test_expensive_lease_loses_to_financing(leasing_offer):
    params = replace(
        leasing_offer,
        financing_rate=Decimal("0.005"),
        leasing_rate=Decimal("0.035"),
        residual_percentage=Decimal("10"),
    )

    result = compare_leasing(params)

    assert result.gross_winner == FINANCING
    assert result.net_winner == FINANCING


def test_equal_costs_are_a_tie():
    assert _winner(Decimal("100"), Decimal("100")) == TIE
    assert _winner(Decimal("99"), Decimal("100")) == LEASING
    assert _winner(Decimal("101"), Decimal("100")) == FINANCING


def test_leasing_rejects_non_positive_price(leasing_offer):
    with pytest.raises(InvalidParameter):
        compare_leasing(replace(leasing_offer, vehicle_price=Decimal("0")))
