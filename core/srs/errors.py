"""
Exceptions raised by the SRS package.
"""


class SrsError(Exception):
    """Base class for SRS errors."""


class InvalidGradeError(SrsError, ValueError):
    """A grade value outside Again/Hard/Good/Easy reached the boundary."""


class CorruptStateError(SrsError, ValueError):
    """Persisted card state could not be turned back into a CardState."""
