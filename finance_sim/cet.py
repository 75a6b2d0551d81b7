"""Effective total cost (CET) solver.

The CET is the periodic rate that equates the present value of the
contracted installments to the amount the borrower actually receives. When
fees or IOF are financed on top of the principal, the borrower receives less
than the amount the installments were computed on, and the CET is higher than
the nominal rate.

The rate is found with Newton-Raphson iteration starting from 2 % a period.
The solver is best-effort: when it does not converge within the iteration
budget it returns the last estimate flagged as ``converged=False``.
"""

from __future__ import annotations

import logging
from decimal import Decimal, getcontext
from typing import List, Sequence, Tuple

from .data_models import EffectiveRate
from .errors import InvalidParameter, NumericalNonConvergence

getcontext().prec = 28

logger = logging.getLogger(__name__)

INITIAL_GUESS = Decimal("0.02")
TOLERANCE = Decimal("0.0001")
MAX_ITERATIONS = 100
RATE_FLOOR = Decimal("0.001")


def _present_value(rate: Decimal, payments: Sequence[Decimal]) -> Tuple[Decimal, Decimal]:
    """Return the present value of ``payments`` (one per period) and its derivative."""
    base = 1 + rate
    value = Decimal("0")
    derivative = Decimal("0")
    factor = Decimal("1")
    for k, payment in enumerate(payments, start=1):
        factor *= base
        value += payment / factor
        derivative -= k * payment / (factor * base)
    return value, derivative


def annualize(rate: Decimal, periods_per_year: int = 12) -> Decimal:
    """Compound a periodic rate (fraction) into an annual one (fraction)."""
    return (1 + rate) ** periods_per_year - 1


def solve_effective_rate(
    net_amount_received: Decimal,
    installment_amount: Decimal,
    number_of_periods: int,
    *,
    final_payment: Decimal = Decimal("0"),
    periods_per_year: int = 12,
    strict: bool = False,
) -> EffectiveRate:
    """Solve the CET of a stream of equal installments.

    Parameters
    ----------
    net_amount_received: Decimal
        Amount actually disbursed to the borrower.
    installment_amount: Decimal
        Fixed installment paid each period.
    number_of_periods: int
        Number of installments.
    final_payment: Decimal
        Optional extra payment one period after the last installment, used
        for balloon contracts.
    periods_per_year: int
        Exponent used to annualize the periodic rate. Monthly compounding is
        assumed unless the product has a different period length.
    strict: bool
        Raise ``NumericalNonConvergence`` instead of returning an
        approximate estimate.

    Returns
    -------
    EffectiveRate
        Monthly and annual rates in percent.
    """
    if installment_amount <= 0:
        raise InvalidParameter(f"Installment amount must be positive; got {installment_amount}")
    if number_of_periods < 1:
        raise InvalidParameter(f"Number of periods must be positive; got {number_of_periods}")
    if final_payment < 0:
        raise InvalidParameter(f"Final payment cannot be negative; got {final_payment}")

    payments: List[Decimal] = [installment_amount] * number_of_periods
    if final_payment:
        payments.append(final_payment)
    return solve_cash_flow_rate(net_amount_received, payments, periods_per_year=periods_per_year, strict=strict)


def solve_cash_flow_rate(
    net_amount_received: Decimal,
    payments: Sequence[Decimal],
    *,
    periods_per_year: int = 12,
    strict: bool = False,
) -> EffectiveRate:
    """Solve the CET of an arbitrary payment stream, one payment per period.

    Used directly for schedules whose payments vary, such as SAC.
    """
    if net_amount_received <= 0:
        raise InvalidParameter(f"Net amount received must be positive; got {net_amount_received}")
    if not payments:
        raise InvalidParameter("At least one payment is required")
    if any(payment < 0 for payment in payments):
        raise InvalidParameter("Payments cannot be negative")

    rate = INITIAL_GUESS
    converged = False
    iterations = 0
    while iterations < MAX_ITERATIONS:
        value, derivative = _present_value(rate, payments)
        f = value - net_amount_received
        if abs(f) < TOLERANCE:
            converged = True
            break
        if derivative == 0:
            break
        rate = rate - f / derivative
        if rate < 0:
            rate = RATE_FLOOR
        iterations += 1

    if converged:
        logger.debug("CET converged to %s after %d iterations", rate, iterations)
    else:
        if strict:
            raise NumericalNonConvergence(
                f"CET did not converge after {iterations} iterations", estimate=rate, iterations=iterations
            )
        logger.warning("CET did not converge after %d iterations; returning estimate %s", iterations, rate)

    return EffectiveRate(
        monthly_rate=rate * 100,
        annual_rate=annualize(rate, periods_per_year) * 100,
        converged=converged,
        iterations=iterations,
    )
