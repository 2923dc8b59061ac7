"""Shared utility functions — date parsing, numeric coercion, rounding."""

from __future__ import annotations

import math
import sys
from datetime import date, datetime
from typing import Optional

# ── Supported date formats (most specific first) ─────────────────────────
_DATE_FORMATS = [
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M",
]

CANONICAL_DATE_FORMAT = "%Y-%m-%d"


def parse_date(value: str) -> date:
    """Parse a transaction date, ignoring any time component.

    Raises ``ValueError`` if the string cannot be parsed.
    """
    value = value.strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    raise ValueError(
        f"Invalid date format: '{value}'. Expected YYYY-MM-DD."
    )


def normalise_date_str(value: str) -> str:
    """Parse then re-format to guarantee canonical ``YYYY-MM-DD`` output."""
    return parse_date(value).strftime(CANONICAL_DATE_FORMAT)


# ── Numeric helpers ───────────────────────────────────────────────────────

def finite_or_zero(value: Optional[float]) -> float:
    """Return *value* as a float, or ``0.0`` when missing, NaN or infinite."""
    if value is None:
        return 0.0
    value = float(value)
    return value if math.isfinite(value) else 0.0


def clamp_finite(value: float) -> float:
    """Clamp an intermediate result to the finite float range.

    Overflow to ``±inf`` saturates at ``±sys.float_info.max``; NaN becomes 0.
    """
    if math.isnan(value):
        return 0.0
    return max(-sys.float_info.max, min(value, sys.float_info.max))


def upper_bound_or_none(value: Optional[float]) -> Optional[float]:
    """Coerce an optional upper bound.

    ``None`` and ``+inf`` both mean "no bound" and map to ``None``;
    ``NaN`` and ``-inf`` collapse to ``0.0``.
    """
    if value is None:
        return None
    value = float(value)
    if math.isfinite(value):
        return value
    if value > 0:
        return None
    return 0.0


def round_currency(value: float, decimals: int = 2) -> float:
    """Round to *decimals* places."""
    return round(value, decimals)
