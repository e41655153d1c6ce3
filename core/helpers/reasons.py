"""Standardized gate reasons for consistency across logging and results."""

from enum import Enum


class GateReason(str, Enum):
    ADMISSION = "admission"
    ALLOWLIST = "allowlist"
    FETCH = "fetch"
    STRUCTURE = "structure"
    CHOP = "chop"
    PULLBACK = "pullback"
    TRIGGER = "trigger"
    LEVELS = "levels"
    SIZING = "sizing"
    INTERNAL = "internal"

