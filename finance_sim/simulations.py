"""Product simulations built on the tax, amortization and CET calculators.

Each public function takes validated numeric inputs and returns a frozen
result object: plain financing, balloon (VFG) financing, FIES-style student
loans with a grace period, and a leasing versus financing comparison.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal, getcontext
from typing import List

from .cet import solve_cash_flow_rate, solve_effective_rate
from .data_models import (
    BalloonSimulationResult,
    GracePeriodParameters,
    GracePeriodSimulationResult,
    InstallmentRecord,
    LeasingComparisonResult,
    LeasingParameters,
    LoanParameters,
    PaymentPhase,
    SimulationResult,
)
from .engine import PRICE, build_schedule, generate_schedule, schedule_totals
from .errors import InvalidParameter
from .tax import compute_transaction_tax

getcontext().prec = 28

logger = logging.getLogger(__name__)

MONTHS_PER_SEMESTER = 6
HUNDRED = Decimal("100")

LEASING = "leasing"
FINANCING = "financing"
TIE = "tie"


def _net_amount(params: LoanParameters) -> Decimal:
    """Amount effectively borrowed: principal less the down payment."""
    if params.opening_fee < 0:
        raise InvalidParameter(f"Opening fee cannot be negative; got {params.opening_fee}")
    if params.down_payment < 0:
        raise InvalidParameter(f"Down payment cannot be negative; got {params.down_payment}")
    net = params.principal - params.down_payment
    if net <= 0:
        raise InvalidParameter("Financed principal must be positive after down payment")
    return net


def simulate_financing(
    params: LoanParameters, *, system: str = PRICE, with_effective_rate: bool = False
) -> SimulationResult:
    """Simulate a plain financing.

    The opening fee and, when requested, the IOF are added to the financed
    amount before the schedule is built. The CET compares the installments
    with the net amount received, exposing the cost of fee and tax.
    """
    net = _net_amount(params)
    financed = net + params.opening_fee
    tax = compute_transaction_tax(financed, params.number_of_periods, params.include_tax)
    financed += tax.amount

    installment, schedule = build_schedule(financed, params.periodic_rate, params.number_of_periods, system)
    if system.lower() == PRICE:
        total_paid = installment * params.number_of_periods
    else:
        total_paid, _ = schedule_totals(schedule)
    total_interest = total_paid - financed

    effective_rate = None
    if with_effective_rate and system.lower() == PRICE:
        effective_rate = solve_effective_rate(net, installment, params.number_of_periods)
    elif with_effective_rate:
        # SAC payments decrease, so the CET is solved over the actual schedule
        effective_rate = solve_cash_flow_rate(net, [r.payment_amount for r in schedule])

    logger.debug(
        "Simulated %s financing of %s over %d periods: installment %s",
        system, financed, params.number_of_periods, installment,
    )
    return SimulationResult(
        installment_amount=installment,
        total_paid=total_paid,
        total_interest=total_interest,
        financed_amount=financed,
        net_amount=net,
        schedule=schedule,
        system=system.lower(),
        tax=tax if params.include_tax else None,
        effective_rate=effective_rate,
    )


def simulate_balloon(
    params: LoanParameters, balloon_percentage: Decimal, *, with_effective_rate: bool = False
) -> BalloonSimulationResult:
    """Simulate a financing with a deferred final (balloon) installment.

    ``balloon_percentage`` of the net principal is held back and repaid as a
    bullet after the last ordinary installment; the ordinary installments
    amortize only the remainder plus fee and tax. The IOF counts the balloon
    as one more period. The remaining balance of each ordinary record
    includes the held-back amount, which the final record clears.
    """
    if not 0 < balloon_percentage < 100:
        raise InvalidParameter(f"Balloon percentage must be between 0 and 100; got {balloon_percentage}")
    net = _net_amount(params)
    n = params.number_of_periods
    balloon = net * balloon_percentage / HUNDRED
    tax = compute_transaction_tax(net + params.opening_fee, n + 1, params.include_tax)
    amortizing = net - balloon + params.opening_fee + tax.amount

    installment, ordinary = generate_schedule(amortizing, params.periodic_rate, n)
    records: List[InstallmentRecord] = [
        InstallmentRecord(
            index=r.index,
            payment_amount=r.payment_amount,
            interest_portion=r.interest_portion,
            principal_portion=r.principal_portion,
            remaining_balance=r.remaining_balance + balloon,
        )
        for r in ordinary
    ]
    records.append(
        InstallmentRecord(
            index=n + 1,
            payment_amount=balloon,
            interest_portion=Decimal("0"),
            principal_portion=balloon,
            remaining_balance=Decimal("0"),
        )
    )

    total_paid = installment * n + balloon
    financed = amortizing + balloon
    effective_rate = None
    if with_effective_rate:
        effective_rate = solve_effective_rate(net, installment, n, final_payment=balloon)

    return BalloonSimulationResult(
        installment_amount=installment,
        total_paid=total_paid,
        total_interest=total_paid - financed,
        financed_amount=financed,
        net_amount=net,
        schedule=tuple(records),
        tax=tax if params.include_tax else None,
        effective_rate=effective_rate,
        balloon_installment_amount=balloon,
        balloon_percentage=balloon_percentage,
    )


def amortization_periods(course_duration_semesters: int, multiplier: Decimal) -> int:
    """Number of amortization installments: course months times ``multiplier``, rounded."""
    months = Decimal(course_duration_semesters * MONTHS_PER_SEMESTER) * multiplier
    return int(months.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def simulate_grace_period(params: GracePeriodParameters) -> GracePeriodSimulationResult:
    """Simulate a FIES-style student loan.

    During the course the student pays the co-participation (the share of
    the tuition not financed). After graduation comes a grace phase where
    only the interest on the financed total is paid, followed by a Price
    schedule over the financed total.
    """
    if params.monthly_tuition <= 0:
        raise InvalidParameter(f"Monthly tuition must be positive; got {params.monthly_tuition}")
    if not 0 < params.financed_percentage <= 100:
        raise InvalidParameter(f"Financed percentage must be in (0, 100]; got {params.financed_percentage}")
    if params.course_duration_semesters < 1:
        raise InvalidParameter("Course duration must be at least one semester")
    if params.amortization_multiplier <= 0:
        raise InvalidParameter("Amortization multiplier must be positive")
    if params.annual_rate < 0:
        raise InvalidParameter(f"Annual rate cannot be negative; got {params.annual_rate}")
    if params.grace_periods < 0:
        raise InvalidParameter("Grace period cannot be negative")

    financed_per_month = params.monthly_tuition * params.financed_percentage / HUNDRED
    co_participation = params.monthly_tuition - financed_per_month
    course_months = params.course_duration_semesters * MONTHS_PER_SEMESTER
    financed_total = financed_per_month * course_months
    course_total = params.monthly_tuition * course_months
    monthly_rate = params.annual_rate / 12

    n = amortization_periods(params.course_duration_semesters, params.amortization_multiplier)
    installment, schedule = generate_schedule(financed_total, monthly_rate, n)

    utilization = PaymentPhase("utilization", course_months, co_participation)
    grace = PaymentPhase("grace", params.grace_periods, financed_total * monthly_rate)
    amortization = PaymentPhase("amortization", n, installment)
    total_paid = utilization.total + grace.total + amortization.total

    income_commitment = None
    if params.monthly_income is not None:
        if params.monthly_income <= 0:
            raise InvalidParameter("Monthly income must be positive")
        income_commitment = installment / params.monthly_income * HUNDRED

    return GracePeriodSimulationResult(
        co_participation=co_participation,
        financed_per_month=financed_per_month,
        financed_total=financed_total,
        course_total=course_total,
        monthly_rate=monthly_rate,
        utilization=utilization,
        grace=grace,
        amortization=amortization,
        schedule=schedule,
        total_paid=total_paid,
        total_interest=total_paid - course_total,
        income_commitment=income_commitment,
    )


def _winner(leasing_cost: Decimal, financing_cost: Decimal) -> str:
    if leasing_cost < financing_cost:
        return LEASING
    if leasing_cost > financing_cost:
        return FINANCING
    return TIE


def compare_leasing(params: LeasingParameters) -> LeasingComparisonResult:
    """Compare leasing a vehicle with financing it.

    Financing carries IOF on the price net of the down payment. Leasing
    finances the price net of both the down payment and the residual value,
    without IOF, and the residual is paid at the end. Business filers may
    deduct ``tax_deduction_rate`` of the lease installments.
    """
    price = params.vehicle_price
    if price <= 0:
        raise InvalidParameter(f"Vehicle price must be positive; got {price}")
    if params.down_payment_percentage < 0 or params.residual_percentage < 0:
        raise InvalidParameter("Down payment and residual percentages cannot be negative")
    down_payment = price * params.down_payment_percentage / HUNDRED
    residual = price * params.residual_percentage / HUNDRED

    financing = simulate_financing(
        LoanParameters(
            principal=price,
            down_payment=down_payment,
            periodic_rate=params.financing_rate,
            number_of_periods=params.number_of_periods,
            include_tax=True,
        )
    )
    leasing = simulate_financing(
        LoanParameters(
            principal=price,
            down_payment=down_payment + residual,
            periodic_rate=params.leasing_rate,
            number_of_periods=params.number_of_periods,
        )
    )

    leasing_total = down_payment + leasing.total_paid + residual
    financing_total = down_payment + financing.total_paid
    deduction = leasing.total_paid * params.tax_deduction_rate if params.business_filer else Decimal("0")
    leasing_net = leasing_total - deduction

    return LeasingComparisonResult(
        leasing=leasing,
        financing=financing,
        down_payment=down_payment,
        residual_value=residual,
        leasing_total_cost=leasing_total,
        financing_total_cost=financing_total,
        tax_deduction=deduction,
        leasing_net_cost=leasing_net,
        gross_winner=_winner(leasing_total, financing_total),
        net_winner=_winner(leasing_net, financing_total),
        difference_percentage=abs(leasing_total - financing_total) / financing_total * HUNDRED,
    )
