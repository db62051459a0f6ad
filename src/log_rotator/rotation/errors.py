"""Exception hierarchy for the rotation engine."""


class RotationError(Exception):
    """Base exception for rotation errors."""

    pass


class InvalidPatternError(RotationError, ValueError):
    """Raised when a global rule is built from a malformed job-name pattern."""

    def __init__(self, pattern: str, reason: str) -> None:
        """Initialize with the offending pattern and the regex compiler's message."""
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid job name pattern {pattern!r}: {reason}")


class UnsupportedPolicyModeError(RotationError, ValueError):
    """Raised when a policy mode value cannot be parsed or is not allowed."""

    pass


class ApplyFailedError(RotationError):
    """Raised by a discard policy when it could not discard records for a job."""

    def __init__(self, reason: str) -> None:
        """Initialize with a human-readable failure reason."""
        self.reason = reason
        super().__init__(reason)
