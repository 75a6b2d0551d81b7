"""Reference monthly rates per vehicle type and category adjustments.

Rates here are monthly fractions. Offsets are expressed in the same unit, so
``Decimal("-0.0005")`` is -0.05 percentage points.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict

from .errors import InvalidParameter

DEFAULT_RATES: Dict[str, Decimal] = {
    "car": Decimal("0.0159"),
    "motorcycle": Decimal("0.0185"),
    "truck": Decimal("0.0158"),
}

CATEGORY_OFFSETS: Dict[str, Decimal] = {
    # motorcycles, by engine displacement
    "motorcycle-up-to-150": Decimal("-0.0005"),
    "motorcycle-150-500": Decimal("0"),
    "motorcycle-above-500": Decimal("-0.0010"),
    # trucks, by weight class
    "truck-light": Decimal("-0.0003"),
    "truck-medium": Decimal("-0.0001"),
    "truck-heavy": Decimal("0"),
    "truck-extra-heavy": Decimal("0.0005"),
    "truck-implement": Decimal("0.0002"),
}

USED_VEHICLE_SURCHARGE = Decimal("0.0035")


def default_rate(vehicle_type: str) -> Decimal:
    """Return the reference monthly rate for ``car``, ``motorcycle`` or ``truck``."""
    try:
        return DEFAULT_RATES[vehicle_type.lower()]
    except KeyError:
        raise InvalidParameter(f"Unknown vehicle type: {vehicle_type}") from None


def adjusted_rate(category: str, is_used: bool, base_rate: Decimal) -> Decimal:
    """Apply the category offset and the used-vehicle surcharge to ``base_rate``.

    Callers recompute this whenever the category or condition changes; the
    result is a plain value with no link to the inputs.
    """
    try:
        offset = CATEGORY_OFFSETS[category.lower()]
    except KeyError:
        raise InvalidParameter(f"Unknown vehicle category: {category}") from None
    rate = base_rate + offset
    if is_used:
        rate += USED_VEHICLE_SURCHARGE
    if rate < 0:
        raise InvalidParameter(f"Adjusted rate for {category} is negative: {rate}")
    return rate
