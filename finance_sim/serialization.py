"""Conversion of simulation results into JSON-serializable structures."""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any


def _plain(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def to_dict(result: Any) -> dict:
    """Return ``result`` (any result dataclass) as nested dicts of floats.

    Phase totals of a student-loan result are added next to the phases since
    they are properties rather than fields.
    """
    if not is_dataclass(result):
        raise TypeError(f"Expected a result dataclass; got {type(result).__name__}")
    data = asdict(result)
    for name in ("utilization", "grace", "amortization"):
        if name in data:
            data[name]["total"] = getattr(result, name).total
    return _plain(data)


def export_to_json(path: Path, result: Any) -> None:
    """Write ``result`` to a JSON file."""
    with path.open("w", encoding="utf-8") as f:
        json.dump(to_dict(result), f, indent=2)
