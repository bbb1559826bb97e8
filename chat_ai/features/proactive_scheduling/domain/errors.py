"""Exceptions raised by the proactive scheduling feature."""


class SchedulingError(Exception):
    """Base exception for proactive scheduling failures."""

    def __init__(self, message: str, recoverable: bool = False):
        super().__init__(message)
        self.recoverable = recoverable


class InputError(SchedulingError, ValueError):
    """The message window is missing or malformed."""


class PatternResolutionFailure(SchedulingError, ValueError):
    """A pattern matched but its resolver could not build a value."""

    def __init__(self, message: str, pattern: str | None = None):
        super().__init__(message, recoverable=True)
        self.pattern = pattern
