"""
Boundary validation for grade input.

The scheduler trusts its Grade argument; anything coming from a user, a form
or a wire format goes through parse_grade first.
"""

from __future__ import annotations

from core.srs.constants import Grade
from core.srs.errors import InvalidGradeError


_GRADE_NAMES = {grade.name.lower(): grade for grade in Grade}


def parse_grade(value: object) -> Grade:
    """
    Convert a raw grade value into a Grade.

    Accepts Grade members, the integers 0-3 and the names
    again/hard/good/easy (case-insensitive, surrounding whitespace ignored).

    Raises:
        InvalidGradeError: for any other value
    """
    if isinstance(value, Grade):
        return value

    # bool is an int subclass; True/False are never grades
    if isinstance(value, bool):
        raise InvalidGradeError(f"Invalid grade: {value!r}")

    if isinstance(value, int):
        try:
            return Grade(value)
        except ValueError:
            raise InvalidGradeError(f"Grade must be between 0 and 3, got {value}") from None

    if isinstance(value, str):
        key = value.strip().lower()
        if key in _GRADE_NAMES:
            return _GRADE_NAMES[key]
        if key.isdigit():
            return parse_grade(int(key))

    raise InvalidGradeError(
        f"Invalid grade: {value!r} (expected one of again, hard, good, easy or 0-3)"
    )
