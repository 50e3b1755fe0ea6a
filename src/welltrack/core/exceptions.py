"""Custom exceptions for WellTrack."""


class WellTrackException(Exception):
    """Base exception for all WellTrack-specific exceptions."""

    pass


class TransportError(WellTrackException):
    """Raised when the inference service is unreachable or returns an unusable body."""

    pass


class PersistenceError(WellTrackException):
    """Raised when a data-store operation fails."""

    pass


class ValidationError(WellTrackException):
    """Raised when an uploaded image is rejected before it reaches the queue."""

    pass


class QueueFullError(WellTrackException):
    """Raised when the analysis queue has reached its configured depth."""

    def __init__(self, max_depth: int):
        self.max_depth = max_depth
        super().__init__(f"Analysis queue is full (max depth {max_depth})")


class UnsupportedImageTypeError(ValidationError):
    """Raised when an upload is not a JPEG or PNG image."""

    pass
