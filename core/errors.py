"""Engine exceptions.

Raised inside collaborators and translated into result states at the
pipeline boundary. Nothing here escapes ``SignalPipeline``.
"""


class EngineError(Exception):
    """Base exception for engine errors."""
    pass


class FetchError(EngineError):
    """Candle or reference data could not be fetched or parsed."""

    def __init__(self, message: str, status_code: int | None = None, retryable: bool = False):
        super().__init__(message)
        self.status_code = status_code
        self.retryable = retryable
