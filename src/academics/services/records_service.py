"""Records service: the use cases behind the HTTP API and CLI.

Each use case resolves entities through the store, checks the enrollment
and grading rules from academics.core.rules, and performs at most one write.
All checks run before the write, so a rejected request persists nothing.

Use cases return a Result; failures carry one of:
- ErrorKind.VALIDATION: required input missing or unparsable
- ErrorKind.NOT_FOUND: student, module or grade does not exist
- ErrorKind.BUSINESS_RULE: not enrolled, already registered,
  capacity reached, not registered for removal

Partial updates take a mapping holding only the fields the caller sent.
A field that is absent, or present with None, is left unchanged.
"""

from __future__ import annotations

import sqlite3
import threading
from dataclasses import dataclass
from typing import Any, Mapping

import structlog

from academics.core import rules
from academics.core.errors import ErrorKind, Result
from academics.core.models import Grade, Module, Registration, Student
from academics.db.repositories import RecordsStore

logger = structlog.get_logger(__name__)

STUDENT_PROFILE_FIELDS = ("first_name", "last_name", "username", "email")


@dataclass
class EnrolledStudent:
    """One row of a module's registration listing."""

    id: int
    first_name: str | None
    last_name: str | None
    email: str | None
    grade: int | None = None
    grade_id: int | None = None


# =============================================================================
# INPUT PARSING
# =============================================================================


def parse_int(value: Any, field_name: str) -> Result[int]:
    """Parse an int from an int or a numeric string."""
    if isinstance(value, bool):
        return Result.fail(ErrorKind.VALIDATION, f"'{field_name}' must be an integer")
    if isinstance(value, int):
        return Result.ok(value)
    if isinstance(value, str):
        try:
            return Result.ok(int(value.strip()))
        except ValueError:
            pass
    return Result.fail(ErrorKind.VALIDATION, f"'{field_name}' must be an integer")


def parse_bool(value: Any, field_name: str) -> Result[bool]:
    """Parse a bool from a bool or the strings "true"/"false" (any case)."""
    if isinstance(value, bool):
        return Result.ok(value)
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return Result.ok(value.strip().lower() == "true")
    return Result.fail(ErrorKind.VALIDATION, f"'{field_name}' must be a boolean")


def _not_found(entity: str, key: Any) -> Result:
    return Result.fail(ErrorKind.NOT_FOUND, f"{entity} '{key}' not found")


def _rejected(message: str) -> Result:
    return Result.fail(ErrorKind.BUSINESS_RULE, message)


# =============================================================================
# SERVICE
# =============================================================================


class RecordsService:
    """Use cases over students, modules, registrations and grades."""

    def __init__(self, store: RecordsStore | None = None):
        self.store = store or RecordsStore()
        # Registration check-then-insert is serialized per existing module code.
        self._module_locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _module_lock(self, module_code: str) -> threading.Lock:
        with self._locks_guard:
            if module_code not in self._module_locks:
                self._module_locks[module_code] = threading.Lock()
            return self._module_locks[module_code]

    # -------------------------------------------------------------------------
    # Loading with associations
    # -------------------------------------------------------------------------

    def _load_student(self, student_id: int) -> Student | None:
        student = self.store.students.find_by_id(student_id)
        if student is not None:
            student.registrations = self.store.registrations.find_by_student(student_id)
            student.grades = self.store.grades.find_by_student(student_id)
        return student

    def _load_module(self, module_code: str) -> Module | None:
        module = self.store.modules.find_by_code(module_code)
        if module is not None:
            module.registrations = self.store.registrations.find_by_module(module_code)
            module.grades = self.store.grades.find_by_module(module_code)
        return module

    # -------------------------------------------------------------------------
    # Grades
    # -------------------------------------------------------------------------

    def add_grade(
        self,
        student_id: Any,
        module_code: Any,
        score: Any,
        academic_year: Any,
    ) -> Result[Grade]:
        """Record a grade for a student registered in the module."""
        if student_id is None or module_code is None or score is None or academic_year is None:
            return Result.fail(
                ErrorKind.VALIDATION,
                "student_id, module_code, score and academic_year are required",
            )

        parsed_id = parse_int(student_id, "student_id")
        if not parsed_id.success:
            return parsed_id
        parsed_score = parse_int(score, "score")
        if not parsed_score.success:
            return parsed_score

        student = self._load_student(parsed_id.value)
        if student is None:
            return _not_found("Student", parsed_id.value)
        module = self.store.modules.find_by_code(str(module_code))
        if module is None:
            return _not_found("Module", module_code)

        if not rules.is_registered(student.registrations, module.code):
            logger.info(
                "grades.rejected",
                reason="not_enrolled",
                student_id=student.id,
                module_code=module.code,
            )
            return _rejected(
                f"Student {student.id} is not enrolled in module '{module.code}'"
            )

        grade = Grade(
            score=parsed_score.value,
            academic_year=str(academic_year),
            student_id=student.id,
            module_code=module.code,
        )
        self.store.grades.save(grade)

        logger.info(
            "grades.added",
            grade_id=grade.id,
            student_id=student.id,
            module_code=module.code,
            score=grade.score,
        )
        return Result.ok(grade)

    def update_grade(self, grade_id: int, changes: Mapping[str, Any]) -> Result[Grade]:
        """Apply score and/or academic_year changes to an existing grade.

        Registration state is not re-checked.
        """
        grade = self.store.grades.find_by_id(grade_id)
        if grade is None:
            return _not_found("Grade", grade_id)

        if changes.get("score") is not None:
            parsed_score = parse_int(changes["score"], "score")
            if not parsed_score.success:
                return parsed_score
            grade.score = parsed_score.value

        if changes.get("academic_year") is not None:
            grade.academic_year = str(changes["academic_year"])

        self.store.grades.save(grade)
        logger.info("grades.updated", grade_id=grade.id, score=grade.score)
        return Result.ok(grade)

    def get_grade(self, grade_id: int) -> Result[Grade]:
        grade = self.store.grades.find_by_id(grade_id)
        if grade is None:
            return _not_found("Grade", grade_id)
        return Result.ok(grade)

    def list_grades(self) -> list[Grade]:
        return self.store.grades.find_all()

    # -------------------------------------------------------------------------
    # Registrations
    # -------------------------------------------------------------------------

    def register_student(self, module_code: str, student_id: Any) -> Result[Registration]:
        """Register a student in a module with free seats."""
        if student_id is None:
            return Result.fail(ErrorKind.VALIDATION, "Missing 'studentId' parameter")

        parsed_id = parse_int(student_id, "studentId")
        if not parsed_id.success:
            return parsed_id

        if self.store.modules.find_by_code(module_code) is None:
            return _not_found("Module", module_code)

        with self._module_lock(module_code):
            module = self._load_module(module_code)
            if module is None:
                return _not_found("Module", module_code)
            student = self.store.students.find_by_id(parsed_id.value)
            if student is None:
                return _not_found("Student", parsed_id.value)

            enrolled_count = len(module.registrations)
            if not rules.has_capacity(module.max_seats, enrolled_count):
                logger.info(
                    "registrations.rejected",
                    reason="capacity_reached",
                    module_code=module.code,
                    enrolled=enrolled_count,
                    max_seats=module.max_seats,
                )
                return _rejected("Module capacity reached")

            if rules.find_registration(module.registrations, student.id) is not None:
                logger.info(
                    "registrations.rejected",
                    reason="already_registered",
                    module_code=module.code,
                    student_id=student.id,
                )
                return _rejected("Student already registered in this module")

            registration = Registration(student_id=student.id, module_code=module.code)
            try:
                self.store.registrations.save(registration)
            except sqlite3.IntegrityError:
                # Inserted concurrently by another service instance.
                return _rejected("Student already registered in this module")

        logger.info(
            "registrations.created",
            registration_id=registration.id,
            module_code=module.code,
            student_id=student.id,
        )
        return Result.ok(registration)

    def remove_student(self, module_code: str, student_id: int) -> Result[None]:
        """Delete the student's registration in the module."""
        module = self._load_module(module_code)
        student = self.store.students.find_by_id(student_id)
        if module is None:
            return _not_found("Module", module_code)
        if student is None:
            return _not_found("Student", student_id)

        registration = rules.find_registration(module.registrations, student.id)
        if registration is None:
            return _rejected("Student not registered in this module")

        self.store.registrations.delete(registration)
        logger.info(
            "registrations.removed",
            registration_id=registration.id,
            module_code=module.code,
            student_id=student.id,
        )
        return Result.ok()

    def list_module_registrations(self, module_code: str) -> Result[list[EnrolledStudent]]:
        """List the module's registered students with their grade, if any."""
        module = self._load_module(module_code)
        if module is None:
            return _not_found("Module", module_code)

        enrolled = []
        for registration in module.registrations:
            student = self.store.students.find_by_id(registration.student_id)
            if student is None:
                continue
            grade = rules.first_grade_for(module.grades, student_id=student.id)
            enrolled.append(
                EnrolledStudent(
                    id=student.id,
                    first_name=student.first_name,
                    last_name=student.last_name,
                    email=student.email,
                    grade=grade.score if grade else None,
                    grade_id=grade.id if grade else None,
                )
            )

        return Result.ok(enrolled)

    # -------------------------------------------------------------------------
    # Modules
    # -------------------------------------------------------------------------

    def create_module(self, data: Mapping[str, Any]) -> Result[Module]:
        code = data.get("code")
        if not code:
            return Result.fail(ErrorKind.VALIDATION, "'code' is required")
        if self.store.modules.find_by_code(code) is not None:
            return _rejected(f"Module '{code}' already exists")

        module = Module(code=code, name=data.get("name") or "")
        if data.get("mnc") is not None:
            parsed_mnc = parse_bool(data["mnc"], "mnc")
            if not parsed_mnc.success:
                return parsed_mnc
            module.mnc = parsed_mnc.value
        if data.get("max_seats") is not None:
            parsed_seats = parse_int(data["max_seats"], "maxSeats")
            if not parsed_seats.success:
                return parsed_seats
            module.max_seats = parsed_seats.value

        self.store.modules.save(module)
        logger.info("modules.created", module_code=module.code, max_seats=module.max_seats)
        return Result.ok(module)

    def get_module(self, module_code: str) -> Result[Module]:
        module = self._load_module(module_code)
        if module is None:
            return _not_found("Module", module_code)
        return Result.ok(module)

    def list_modules(self) -> list[Module]:
        return self.store.modules.find_all()

    def update_module(self, module_code: str, changes: Mapping[str, Any]) -> Result[Module]:
        """Apply name/mnc/max_seats changes.

        A max_seats value that is not strictly positive is ignored.
        """
        module = self.store.modules.find_by_code(module_code)
        if module is None:
            return _not_found("Module", module_code)

        if changes.get("name") is not None:
            module.name = changes["name"]

        if changes.get("mnc") is not None:
            parsed_mnc = parse_bool(changes["mnc"], "mnc")
            if not parsed_mnc.success:
                return parsed_mnc
            module.mnc = parsed_mnc.value

        if changes.get("max_seats") is not None:
            parsed_seats = parse_int(changes["max_seats"], "maxSeats")
            if not parsed_seats.success:
                return parsed_seats
            if parsed_seats.value > 0:
                module.max_seats = parsed_seats.value
            else:
                logger.debug(
                    "modules.max_seats_ignored",
                    module_code=module.code,
                    value=parsed_seats.value,
                )

        self.store.modules.save(module)
        logger.info("modules.updated", module_code=module.code)
        return Result.ok(module)

    def delete_module(self, module_code: str) -> Result[None]:
        module = self._load_module(module_code)
        if module is None:
            return _not_found("Module", module_code)
        if module.registrations or module.grades:
            return _rejected(f"Module '{module_code}' still has registrations or grades")

        self.store.modules.delete(module)
        with self._locks_guard:
            self._module_locks.pop(module_code, None)
        logger.info("modules.deleted", module_code=module_code)
        return Result.ok()

    def module_average(
        self, module_code: str, academic_year: str | None = None
    ) -> Result[float]:
        """Average grade of a module, optionally for one academic year."""
        module = self.store.modules.find_by_code(module_code)
        if module is None:
            return _not_found("Module", module_code)

        grades = self.store.grades.find_by_module(module_code, academic_year)
        return module.compute_average_grade(grades)

    # -------------------------------------------------------------------------
    # Students
    # -------------------------------------------------------------------------

    def create_student(self, data: Mapping[str, Any]) -> Result[Student]:
        """Create a student with a caller-assigned id."""
        if data.get("id") is None:
            return Result.fail(ErrorKind.VALIDATION, "'id' is required")
        parsed_id = parse_int(data["id"], "id")
        if not parsed_id.success:
            return parsed_id

        if self.store.students.find_by_id(parsed_id.value) is not None:
            return _rejected(f"Student {parsed_id.value} already exists")

        student = Student(
            id=parsed_id.value,
            **{name: data.get(name) for name in STUDENT_PROFILE_FIELDS},
        )
        self.store.students.save(student)
        logger.info("students.created", student_id=student.id)
        return Result.ok(student)

    def get_student(self, student_id: int) -> Result[Student]:
        student = self._load_student(student_id)
        if student is None:
            return _not_found("Student", student_id)
        return Result.ok(student)

    def list_students(self) -> list[Student]:
        return self.store.students.find_all()

    def update_student(self, student_id: int, changes: Mapping[str, Any]) -> Result[Student]:
        """Overwrite the profile fields present (and non-None) in changes."""
        student = self.store.students.find_by_id(student_id)
        if student is None:
            return _not_found("Student", student_id)

        applied = []
        for name in STUDENT_PROFILE_FIELDS:
            if changes.get(name) is not None:
                setattr(student, name, changes[name])
                applied.append(name)

        self.store.students.save(student)
        logger.info("students.updated", student_id=student.id, fields=applied)
        return Result.ok(student)

    def delete_student(self, student_id: int) -> Result[None]:
        student = self._load_student(student_id)
        if student is None:
            return _not_found("Student", student_id)
        if student.registrations or student.grades:
            return _rejected(f"Student {student_id} still has registrations or grades")

        self.store.students.delete(student)
        logger.info("students.deleted", student_id=student_id)
        return Result.ok()

    def student_average(self, student_id: int) -> Result[float]:
        """Average over all of the student's grades."""
        student = self._load_student(student_id)
        if student is None:
            return _not_found("Student", student_id)
        return student.compute_average()
