"""Utility functions for turning user input into ``Decimal`` values.

Amounts may carry thousands separators and ``k``/``m`` suffixes; rates are
entered in percent (``1.5`` or ``1.5%``) and converted to fractions.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, getcontext

getcontext().prec = 28  # increase decimal precision to avoid rounding errors

SUFFIXES = {"k": Decimal("1000"), "m": Decimal("1000000")}


def decimal_from_str(value: str) -> Decimal:
    """Convert a numeric string into a ``Decimal``.

    The function strips any commas and handles both integer and float-like
    strings. It raises ``ValueError`` if conversion fails.
    """
    try:
        cleaned = value.strip().replace(",", "")
        result = Decimal(cleaned)
    except (InvalidOperation, AttributeError) as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc
    if not result.is_finite():
        raise ValueError(f"Invalid numeric value: {value}")
    return result


def parse_amount(value: str) -> Decimal:
    """Parse a currency amount with optional suffixes.

    Accepts plain numbers ("40000") and shorthand with ``k``/``m`` suffixes
    (e.g. "40k" meaning 40 000).
    """
    text = value.strip().lower()
    factor = Decimal("1")
    if text and text[-1] in SUFFIXES:
        factor = SUFFIXES[text[-1]]
        text = text[:-1]
    return decimal_from_str(text) * factor


def parse_percent(value: str) -> Decimal:
    """Parse a percentage string (e.g. "1.5" or "1.5%") into a fraction."""
    text = value.strip()
    if text.endswith("%"):
        text = text[:-1]
    return decimal_from_str(text) / Decimal("100")
