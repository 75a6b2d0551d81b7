"""Data models for the financing simulator.

This module defines the dataclasses exchanged between the calculators and the
presentation layer: the loan inputs, the tax and effective-rate figures, the
rows of an amortization schedule and the result of each product simulation.
Results are frozen; a new simulation always produces a new object.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple

ZERO = Decimal("0")


@dataclass(frozen=True)
class LoanParameters:
    """Inputs shared by the plain and balloon financing simulations.

    Attributes
    ----------
    principal: Decimal
        Price of the asset (or amount requested) before the down payment.
    periodic_rate: Decimal
        Interest rate per period as a fraction, e.g. ``Decimal("0.015")`` for
        1.5 % a month.
    number_of_periods: int
        Number of regular installments.
    opening_fee: Decimal
        Flat credit-opening fee (TAC) added to the financed amount.
    include_tax: bool
        Whether IOF is computed and financed together with the principal.
    down_payment: Decimal
        Amount paid upfront; it reduces the amount actually financed.
    """

    principal: Decimal
    periodic_rate: Decimal
    number_of_periods: int
    opening_fee: Decimal = ZERO
    include_tax: bool = False
    down_payment: Decimal = ZERO


@dataclass(frozen=True)
class GracePeriodParameters:
    """Inputs of a FIES-style student loan."""

    monthly_tuition: Decimal
    financed_percentage: Decimal  # share of the tuition financed, in percent
    course_duration_semesters: int
    annual_rate: Decimal  # nominal annual rate as a fraction
    amortization_multiplier: Decimal = Decimal("1")
    monthly_income: Optional[Decimal] = None
    grace_periods: int = 18


@dataclass(frozen=True)
class LeasingParameters:
    """Inputs of the leasing versus financing comparison.

    Percentages (down payment, residual value) are expressed in percent of
    the vehicle price; rates are monthly fractions.
    """

    vehicle_price: Decimal
    down_payment_percentage: Decimal
    financing_rate: Decimal
    leasing_rate: Decimal
    number_of_periods: int
    residual_percentage: Decimal
    business_filer: bool = False
    tax_deduction_rate: Decimal = Decimal("0.25")


@dataclass(frozen=True)
class TaxResult:
    """IOF charged on a financing operation.

    ``amount`` is the sum of the daily accrual and the flat component; every
    field is zero when the tax was not requested.
    """

    amount: Decimal = ZERO
    daily_component: Decimal = ZERO
    fixed_component: Decimal = ZERO
    days: int = 0


@dataclass(frozen=True)
class EffectiveRate:
    """Effective total cost (CET) of an operation, in percent."""

    monthly_rate: Decimal
    annual_rate: Decimal
    converged: bool
    iterations: int


@dataclass(frozen=True)
class InstallmentRecord:
    """A row of the amortization schedule.

    ``payment_amount`` always equals ``interest_portion + principal_portion``
    and ``remaining_balance`` is never negative.
    """

    index: int
    payment_amount: Decimal
    interest_portion: Decimal
    principal_portion: Decimal
    remaining_balance: Decimal


AmortizationSchedule = Tuple[InstallmentRecord, ...]


@dataclass(frozen=True)
class SimulationResult:
    """Outcome of a plain financing simulation.

    ``financed_amount`` is the amount the installments are computed on
    (principal net of down payment, plus fee and tax), while ``net_amount``
    is what the borrower actually receives.
    """

    installment_amount: Decimal
    total_paid: Decimal
    total_interest: Decimal
    financed_amount: Decimal
    net_amount: Decimal
    schedule: AmortizationSchedule
    system: str = "price"
    tax: Optional[TaxResult] = None
    effective_rate: Optional[EffectiveRate] = None

    @property
    def tax_amount(self) -> Optional[Decimal]:
        return self.tax.amount if self.tax is not None else None

    @property
    def number_of_periods(self) -> int:
        return len(self.schedule)


@dataclass(frozen=True)
class BalloonSimulationResult(SimulationResult):
    """Financing where part of the principal is deferred to a final payment.

    The last record of ``schedule`` is the balloon payoff, not an ordinary
    installment.
    """

    balloon_installment_amount: Decimal = ZERO
    balloon_percentage: Decimal = ZERO


@dataclass(frozen=True)
class PaymentPhase:
    """A span of periods during which the same amount is paid each period."""

    name: str
    periods: int
    payment: Decimal

    @property
    def total(self) -> Decimal:
        return self.payment * self.periods


@dataclass(frozen=True)
class GracePeriodSimulationResult:
    """Outcome of a FIES-style simulation.

    The loan runs through three phases: utilization (the student pays only
    the co-participation), grace (interest only, balance unchanged) and
    amortization (a regular Price schedule).
    """

    co_participation: Decimal
    financed_per_month: Decimal
    financed_total: Decimal
    course_total: Decimal
    monthly_rate: Decimal
    utilization: PaymentPhase
    grace: PaymentPhase
    amortization: PaymentPhase
    schedule: AmortizationSchedule
    total_paid: Decimal
    total_interest: Decimal
    income_commitment: Optional[Decimal] = None

    @property
    def phases(self) -> Tuple[PaymentPhase, PaymentPhase, PaymentPhase]:
        return (self.utilization, self.grace, self.amortization)

    @property
    def total_periods(self) -> int:
        return sum(phase.periods for phase in self.phases)


@dataclass(frozen=True)
class LeasingComparisonResult:
    """Side-by-side cost of leasing and financing the same vehicle."""

    leasing: SimulationResult
    financing: SimulationResult
    down_payment: Decimal
    residual_value: Decimal
    leasing_total_cost: Decimal
    financing_total_cost: Decimal
    tax_deduction: Decimal
    leasing_net_cost: Decimal
    gross_winner: str  # "leasing", "financing" or "tie"
    net_winner: str
    difference_percentage: Decimal
