"""IOF (imposto sobre operações financeiras) for consumer credit.

The tax has two parts: a daily accrual of 0.0082 % on the financed amount,
counted over at most 365 days, and a flat 0.38 % charged once. Periods are
treated as 30-day months.
"""

from __future__ import annotations

from decimal import Decimal, getcontext

from .data_models import TaxResult

getcontext().prec = 28

IOF_DAILY_RATE = Decimal("0.000082")
IOF_FIXED_RATE = Decimal("0.0038")
DAYS_PER_PERIOD = 30
MAX_TAXED_DAYS = 365


def compute_transaction_tax(financed_amount: Decimal, term_in_periods: int, enabled: bool = True) -> TaxResult:
    """Return the IOF due on ``financed_amount`` over ``term_in_periods``.

    No validation happens here: a zero amount yields a zero tax and a
    negative amount a negative one. Callers are expected to pass validated
    inputs.
    """
    if not enabled:
        return TaxResult()
    days = min(term_in_periods * DAYS_PER_PERIOD, MAX_TAXED_DAYS)
    daily_component = financed_amount * IOF_DAILY_RATE * days
    fixed_component = financed_amount * IOF_FIXED_RATE
    return TaxResult(
        amount=daily_component + fixed_component,
        daily_component=daily_component,
        fixed_component=fixed_component,
        days=days,
    )
