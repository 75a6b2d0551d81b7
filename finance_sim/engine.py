"""Core amortization engine.

This module builds amortization schedules for the two systems used in
Brazilian consumer credit: the Price (French) system, where every installment
is equal, and the SAC system, where the principal portion is constant and the
installments decrease. Schedules are returned as tuples of
``InstallmentRecord`` together with the installment amount.
"""

from __future__ import annotations

import logging
from decimal import Decimal, getcontext
from typing import List, Tuple

from .data_models import AmortizationSchedule, InstallmentRecord
from .errors import InvalidParameter

getcontext().prec = 28  # increase precision for financial calculations

logger = logging.getLogger(__name__)

PRICE = "price"
SAC = "sac"
SYSTEMS = (PRICE, SAC)


def _validate(total_financed: Decimal, periodic_rate: Decimal, number_of_periods: int) -> None:
    if number_of_periods < 1:
        raise InvalidParameter(f"Number of periods must be positive; got {number_of_periods}")
    if total_financed <= 0:
        raise InvalidParameter(f"Financed amount must be positive; got {total_financed}")
    if periodic_rate < 0:
        raise InvalidParameter(f"Periodic rate cannot be negative; got {periodic_rate}")


def calculate_installment(total_financed: Decimal, periodic_rate: Decimal, number_of_periods: int) -> Decimal:
    """Return the fixed (Price) installment for a loan.

    The formula is:

        payment = P * (i * (1 + i)^n) / ((1 + i)^n - 1)

    where ``P`` is the financed amount, ``i`` the periodic rate and ``n`` the
    number of installments. When the rate is zero the formula degenerates and
    the payment is simply ``P / n``.
    """
    _validate(total_financed, periodic_rate, number_of_periods)
    if periodic_rate == 0:
        logger.debug("Zero periodic rate; splitting %s evenly over %d periods", total_financed, number_of_periods)
        return total_financed / Decimal(number_of_periods)
    factor = (1 + periodic_rate) ** number_of_periods
    if factor == 1:
        logger.debug("Periodic rate %s vanishes at working precision; splitting evenly", periodic_rate)
        return total_financed / Decimal(number_of_periods)
    return total_financed * (periodic_rate * factor) / (factor - 1)


def generate_schedule(
    total_financed: Decimal, periodic_rate: Decimal, number_of_periods: int
) -> Tuple[Decimal, AmortizationSchedule]:
    """Compute the Price amortization schedule.

    Parameters
    ----------
    total_financed: Decimal
        Amount the installments are computed on (fees and tax included).
    periodic_rate: Decimal
        Interest rate per period as a fraction.
    number_of_periods: int
        Number of installments.

    Returns
    -------
    installment: Decimal
        The fixed installment amount.
    schedule: AmortizationSchedule
        One record per period. The last period absorbs any residual left by
        rounding, so the balance ends at exactly zero.
    """
    installment = calculate_installment(total_financed, periodic_rate, number_of_periods)
    balance = total_financed
    records: List[InstallmentRecord] = []
    for index in range(1, number_of_periods + 1):
        interest = balance * periodic_rate
        if index == number_of_periods:
            principal = balance
            payment = interest + principal
        else:
            principal = installment - interest
            payment = installment
        balance -= principal
        records.append(
            InstallmentRecord(
                index=index,
                payment_amount=payment,
                interest_portion=interest,
                principal_portion=principal,
                remaining_balance=max(balance, Decimal("0")),
            )
        )
    return installment, tuple(records)


def generate_sac_schedule(
    total_financed: Decimal, periodic_rate: Decimal, number_of_periods: int
) -> Tuple[Decimal, AmortizationSchedule]:
    """Compute a constant-amortization (SAC) schedule.

    Every record repays ``total_financed / n`` of principal plus the interest
    on the outstanding balance, so payments decrease over time. The first
    (highest) payment is returned as the installment amount.
    """
    _validate(total_financed, periodic_rate, number_of_periods)
    constant_principal = total_financed / Decimal(number_of_periods)
    balance = total_financed
    records: List[InstallmentRecord] = []
    for index in range(1, number_of_periods + 1):
        interest = balance * periodic_rate
        principal = balance if index == number_of_periods else constant_principal
        balance -= principal
        records.append(
            InstallmentRecord(
                index=index,
                payment_amount=interest + principal,
                interest_portion=interest,
                principal_portion=principal,
                remaining_balance=max(balance, Decimal("0")),
            )
        )
    return records[0].payment_amount, tuple(records)


def build_schedule(
    total_financed: Decimal, periodic_rate: Decimal, number_of_periods: int, system: str = PRICE
) -> Tuple[Decimal, AmortizationSchedule]:
    """Dispatch to the generator for ``system`` (``"price"`` or ``"sac"``)."""
    system = system.lower()
    if system == PRICE:
        return generate_schedule(total_financed, periodic_rate, number_of_periods)
    if system == SAC:
        return generate_sac_schedule(total_financed, periodic_rate, number_of_periods)
    raise InvalidParameter(f"Amortization system must be 'price' or 'sac'; got {system}")


def schedule_totals(schedule: AmortizationSchedule) -> Tuple[Decimal, Decimal]:
    """Return ``(total_paid, total_interest)`` summed over a schedule."""
    total_paid = sum((r.payment_amount for r in schedule), Decimal("0"))
    total_interest = sum((r.interest_portion for r in schedule), Decimal("0"))
    return total_paid, total_interest
