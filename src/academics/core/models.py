"""Entity model for academic records.

Entities reference each other one way only, by foreign key:
- Registration -> (student_id, module_code)
- Grade -> (student_id, module_code)

The `registrations` and `grades` lists on Student and Module are query
results loaded from the store for the duration of one operation. They are
not owned by the entity and are never persisted through it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from academics.core import rules
from academics.core.errors import ErrorKind, Result


@dataclass
class Registration:
    """Enrollment of one student in one module."""

    student_id: int
    module_code: str
    id: int | None = None

    def __str__(self) -> str:
        return (
            f"Registration(id={self.id}, student_id={self.student_id}, "
            f"module_code={self.module_code!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "student_id": self.student_id,
            "module_code": self.module_code,
        }


@dataclass
class Grade:
    """Score awarded to a student for a module in an academic year."""

    score: int
    academic_year: str
    student_id: int | None = None
    module_code: str | None = None
    id: int | None = None

    def __str__(self) -> str:
        return (
            f"Grade(id={self.id}, score={self.score}, "
            f"academic_year={self.academic_year!r}, "
            f"module_code={self.module_code!r}, student_id={self.student_id})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "score": self.score,
            "academic_year": self.academic_year,
            "student_id": self.student_id,
            "module_code": self.module_code,
        }


@dataclass
class Module:
    """A taught module, identified by its code."""

    code: str
    name: str = ""
    mnc: bool = False  # mandatory non-condonable
    max_seats: int = 0
    registrations: list[Registration] = field(default_factory=list, compare=False)
    grades: list[Grade] = field(default_factory=list, compare=False)

    def compute_average_grade(self, grades: Sequence[Grade] | None) -> Result[float]:
        """Average an externally supplied grade list (e.g. one academic year)."""
        return rules.compute_average(grades)

    def __str__(self) -> str:
        return (
            f"Module(code={self.code!r}, name={self.name!r}, mnc={self.mnc}, "
            f"max_seats={self.max_seats}, grades={len(self.grades)}, "
            f"registrations={len(self.registrations)})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "code": self.code,
            "name": self.name,
            "mnc": self.mnc,
            "max_seats": self.max_seats,
        }


@dataclass
class Student:
    """A student with an externally assigned numeric id."""

    id: int
    first_name: str | None = None
    last_name: str | None = None
    username: str | None = None
    email: str | None = None
    registrations: list[Registration] = field(default_factory=list, compare=False)
    grades: list[Grade] = field(default_factory=list, compare=False)

    @property
    def full_name(self) -> str:
        """Get full name (first + last)."""
        return " ".join(p for p in (self.first_name, self.last_name) if p)

    def register_module(self, module: Module) -> Registration:
        """Attach a new registration for module.

        No duplicate or capacity check happens here; the records service
        owns those rules.
        """
        registration = Registration(student_id=self.id, module_code=module.code)
        self.registrations.append(registration)
        module.registrations.append(registration)
        return registration

    def add_grade(self, grade: Grade) -> Result[Grade]:
        """Attach grade if the student is registered for its module.

        Returns:
            Result with the grade, or NOT_REGISTERED
        """
        check = rules.check_registered(self.registrations, grade.module_code)
        if not check.success:
            return check

        grade.student_id = self.id
        self.grades.append(grade)
        return Result.ok(grade)

    def get_grade(self, module: Module) -> Result[Grade]:
        """Get this student's grade for module.

        Returns:
            Result with the first matching grade, NOT_REGISTERED when the
            student is not registered for module, or NO_GRADE_AVAILABLE.
        """
        check = rules.check_registered(self.registrations, module.code)
        if not check.success:
            return check

        grade = rules.first_grade_for(self.grades, module_code=module.code)
        if grade is None:
            return Result.fail(
                ErrorKind.NO_GRADE_AVAILABLE,
                f"No grade available for module '{module.code}'",
            )
        return Result.ok(grade)

    def compute_average(self) -> Result[float]:
        """Average over all of this student's grades."""
        return rules.compute_average(self.grades)

    def __str__(self) -> str:
        return (
            f"Student(id={self.id}, first_name={self.first_name!r}, "
            f"last_name={self.last_name!r}, username={self.username!r}, "
            f"email={self.email!r}, grades={len(self.grades)}, "
            f"registrations={len(self.registrations)})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "username": self.username,
            "email": self.email,
        }
