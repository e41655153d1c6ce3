"""Shared helper utilities for consistency across the engine."""

from .validation import is_finite_positive
from .reasons import GateReason
from .rest_validation import validate_candles
from . import trail

__all__ = [
    "is_finite_positive",
    "GateReason",
    "validate_candles",
    "trail",
]
