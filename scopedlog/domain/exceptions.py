"""Base exception classes for the scopedlog domain layer."""


class ScopedLogError(Exception):
    """Base exception for all scopedlog errors.

    All package-specific exceptions MUST inherit from this class so callers
    can catch logging-subsystem failures in one place.
    """

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)
