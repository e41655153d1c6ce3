"""Diagnostic trail lines shown alongside every result."""

OK = "✔"
FAIL = "✖"
WAIT = "⏳"
NOTE = "✱"


def ok(message: str) -> str:
    return f"{OK} {message}"


def fail(message: str) -> str:
    return f"{FAIL} {message}"


def wait(message: str) -> str:
    return f"{WAIT} {message}"


def note(message: str) -> str:
    return f"{NOTE} {message}"


def fmt_price(value: float, digits: int = 4) -> str:
    """Round for display only; analytics keep full precision."""
    if abs(value) < 1:
        return f"{value:.8g}"
    return f"{value:.{digits}f}".rstrip("0").rstrip(".")
