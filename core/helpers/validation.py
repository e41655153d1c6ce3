"""Validation helpers to keep numeric inputs finite and well-shaped."""

import math
from typing import Any


def is_finite_positive(value: Any) -> bool:
    """True for real numbers that are finite and > 0."""
    if isinstance(value, bool):
        return False
    try:
        fval = float(value)
    except (TypeError, ValueError):
        return False
    return math.isfinite(fval) and fval > 0
