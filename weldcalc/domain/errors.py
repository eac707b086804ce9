"""
Exception hierarchy for the welding consumables calculator.

Every user-facing failure derives from `WeldCalcError`, so the CLI can catch a
single type at each command boundary and print the message.
"""
from __future__ import annotations


class WeldCalcError(Exception):
    """Base class for all calculator errors."""


class DataUnavailableError(WeldCalcError):
    """The pipe dataset could not be read or parsed."""


class InvalidSelectionError(WeldCalcError, ValueError):
    """A required field is missing or a value is out of range."""


class RecordNotFoundError(WeldCalcError):
    """No pipe record matches the selected joint type, size and thickness."""

    def __init__(self, joint_type: str | None, size: str, thickness: str) -> None:
        self.joint_type = joint_type
        self.size = size
        self.thickness = thickness
        super().__init__("No pipe found with selected specifications")


class UnknownGradeError(WeldCalcError, LookupError):
    """The grade is not in the electrode/filler table."""

    def __init__(self, grade: str) -> None:
        self.grade = grade
        super().__init__(f"Unknown grade '{grade}'")


class EmptyHistoryError(WeldCalcError):
    """Nothing to export or share."""

    def __init__(self, message: str = "No history to export") -> None:
        super().__init__(message)


class ShareError(WeldCalcError):
    """The platform share handler failed."""


__all__ = [
    "WeldCalcError",
    "DataUnavailableError",
    "InvalidSelectionError",
    "RecordNotFoundError",
    "UnknownGradeError",
    "EmptyHistoryError",
    "ShareError",
]
