"""Error types surfaced to the UI as displayable messages."""

from __future__ import annotations


class DigitPredictorError(Exception):
    """Base error for known, user-facing failures."""


class EmptyCanvasError(DigitPredictorError):
    """Raised when the drawing contains no ink, so there is nothing to classify."""

    def __init__(self, message: str = "Draw a digit first, then press Predict.") -> None:
        super().__init__(message)


class TransportError(DigitPredictorError):
    """Raised when the classification service is unreachable or answers non-2xx."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(DigitPredictorError):
    """Raised when the service answered but no prediction could be read."""


class PredictionInProgressError(DigitPredictorError):
    """Raised when a prediction is requested while another one is in flight."""

    def __init__(self, message: str = "A prediction is already running.") -> None:
        super().__init__(message)
