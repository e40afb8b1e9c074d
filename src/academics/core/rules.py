"""Enrollment and grading rules.

Single home for the invariant checks used by both the entity methods
(Student.add_grade, Student.get_grade, ...) and the records service use
cases, so the two paths cannot drift apart.

Functions take plain collections of registrations/grades so they work on
store query results as well as on in-memory associations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Sequence

from academics.core.errors import ErrorKind, Result

if TYPE_CHECKING:
    from academics.core.models import Grade, Registration


def is_registered(registrations: Iterable[Registration], module_code: str) -> bool:
    """Check whether any registration points at module_code."""
    return any(r.module_code == module_code for r in registrations)


def find_registration(
    registrations: Iterable[Registration],
    student_id: int,
) -> Registration | None:
    """Find the registration held by student_id, if any."""
    for registration in registrations:
        if registration.student_id == student_id:
            return registration
    return None


def has_capacity(max_seats: int, enrolled_count: int) -> bool:
    """A module accepts a new registration while enrolled < max_seats."""
    return enrolled_count < max_seats


def first_grade_for(
    grades: Iterable[Grade],
    module_code: str | None = None,
    student_id: int | None = None,
) -> Grade | None:
    """Return the first grade matching the given module and/or student."""
    for grade in grades:
        if module_code is not None and grade.module_code != module_code:
            continue
        if student_id is not None and grade.student_id != student_id:
            continue
        return grade
    return None


def check_registered(
    registrations: Iterable[Registration],
    module_code: str,
) -> Result[None]:
    """Result form of is_registered, failing with NOT_REGISTERED."""
    if not is_registered(registrations, module_code):
        return Result.fail(
            ErrorKind.NOT_REGISTERED,
            f"Not registered for module '{module_code}'",
        )
    return Result.ok()


def compute_average(grades: Sequence[Grade] | None) -> Result[float]:
    """Average score of grades.

    Args:
        grades: Grades to average (may be None)

    Returns:
        Result with the mean score as a float, or NO_GRADE_AVAILABLE
        when there is nothing to average.
    """
    if not grades:
        return Result.fail(ErrorKind.NO_GRADE_AVAILABLE, "No grades available")

    total = sum(g.score for g in grades)
    return Result.ok(total / len(grades))
