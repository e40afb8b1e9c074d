"""Repositories for students, modules, registrations and grades.

Each repository exposes the same primitives:
- find_by_id(id) -> entity | None
- find_all() -> list of entities
- save(entity) -> entity (insert or update)
- delete(entity) / delete_by_id(id) -> bool

Registration and grade repositories also answer foreign-key queries
(find_by_student, find_by_module, find_by_student_and_module).
Rows come back in insertion (primary key) order.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from academics.core.models import Grade, Module, Registration, Student
from academics.db.database import get_db

logger = structlog.get_logger(__name__)


class StudentRepository:
    """CRUD for the students table."""

    def find_by_id(self, student_id: int) -> Student | None:
        with get_db() as conn:
            row = conn.execute(
                "SELECT * FROM students WHERE id = ?", (student_id,)
            ).fetchone()

        if row is None:
            return None
        return _row_to_student(row)

    def find_all(self) -> list[Student]:
        with get_db() as conn:
            rows = conn.execute("SELECT * FROM students ORDER BY id").fetchall()
        return [_row_to_student(row) for row in rows]

    def exists(self, student_id: int) -> bool:
        return self.find_by_id(student_id) is not None

    def save(self, student: Student) -> Student:
        """Insert or update a student (ids are caller-assigned)."""
        with get_db() as conn:
            conn.execute(
                """
                INSERT INTO students (id, first_name, last_name, username, email)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    first_name = excluded.first_name,
                    last_name = excluded.last_name,
                    username = excluded.username,
                    email = excluded.email
                """,
                (
                    student.id,
                    student.first_name,
                    student.last_name,
                    student.username,
                    student.email,
                ),
            )

        logger.debug("students.saved", student_id=student.id)
        return student

    def delete(self, student: Student) -> bool:
        return self.delete_by_id(student.id)

    def delete_by_id(self, student_id: int) -> bool:
        with get_db() as conn:
            cursor = conn.execute("DELETE FROM students WHERE id = ?", (student_id,))

        deleted = cursor.rowcount > 0
        if deleted:
            logger.debug("students.deleted", student_id=student_id)
        return deleted


class ModuleRepository:
    """CRUD for the modules table, keyed by module code."""

    def find_by_id(self, code: str) -> Module | None:
        with get_db() as conn:
            row = conn.execute(
                "SELECT * FROM modules WHERE code = ?", (code,)
            ).fetchone()

        if row is None:
            return None
        return _row_to_module(row)

    # Modules are identified by code; both names resolve the same row.
    find_by_code = find_by_id

    def find_all(self) -> list[Module]:
        with get_db() as conn:
            rows = conn.execute("SELECT * FROM modules ORDER BY code").fetchall()
        return [_row_to_module(row) for row in rows]

    def save(self, module: Module) -> Module:
        """Insert or update a module."""
        with get_db() as conn:
            conn.execute(
                """
                INSERT INTO modules (code, name, mnc, max_seats)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(code) DO UPDATE SET
                    name = excluded.name,
                    mnc = excluded.mnc,
                    max_seats = excluded.max_seats
                """,
                (module.code, module.name, int(module.mnc), module.max_seats),
            )

        logger.debug("modules.saved", module_code=module.code)
        return module

    def delete(self, module: Module) -> bool:
        return self.delete_by_id(module.code)

    def delete_by_id(self, code: str) -> bool:
        with get_db() as conn:
            cursor = conn.execute("DELETE FROM modules WHERE code = ?", (code,))

        deleted = cursor.rowcount > 0
        if deleted:
            logger.debug("modules.deleted", module_code=code)
        return deleted


class RegistrationRepository:
    """CRUD and foreign-key queries for the registrations table."""

    def find_by_id(self, registration_id: int) -> Registration | None:
        with get_db() as conn:
            row = conn.execute(
                "SELECT * FROM registrations WHERE id = ?", (registration_id,)
            ).fetchone()

        if row is None:
            return None
        return _row_to_registration(row)

    def find_all(self) -> list[Registration]:
        with get_db() as conn:
            rows = conn.execute("SELECT * FROM registrations ORDER BY id").fetchall()
        return [_row_to_registration(row) for row in rows]

    def find_by_student(self, student_id: int) -> list[Registration]:
        with get_db() as conn:
            rows = conn.execute(
                "SELECT * FROM registrations WHERE student_id = ? ORDER BY id",
                (student_id,),
            ).fetchall()
        return [_row_to_registration(row) for row in rows]

    def find_by_module(self, module_code: str) -> list[Registration]:
        with get_db() as conn:
            rows = conn.execute(
                "SELECT * FROM registrations WHERE module_code = ? ORDER BY id",
                (module_code,),
            ).fetchall()
        return [_row_to_registration(row) for row in rows]

    def find_by_student_and_module(
        self, student_id: int, module_code: str
    ) -> Registration | None:
        with get_db() as conn:
            row = conn.execute(
                "SELECT * FROM registrations WHERE student_id = ? AND module_code = ?",
                (student_id, module_code),
            ).fetchone()

        if row is None:
            return None
        return _row_to_registration(row)

    def save(self, registration: Registration) -> Registration:
        """Insert a new registration or update an existing one.

        Raises:
            sqlite3.IntegrityError: If the (student, module) pair already
                exists or either reference does not resolve
        """
        with get_db() as conn:
            if registration.id is None:
                cursor = conn.execute(
                    "INSERT INTO registrations (student_id, module_code) VALUES (?, ?)",
                    (registration.student_id, registration.module_code),
                )
                registration.id = cursor.lastrowid
            else:
                conn.execute(
                    "UPDATE registrations SET student_id = ?, module_code = ? WHERE id = ?",
                    (registration.student_id, registration.module_code, registration.id),
                )

        logger.debug(
            "registrations.saved",
            registration_id=registration.id,
            student_id=registration.student_id,
            module_code=registration.module_code,
        )
        return registration

    def delete(self, registration: Registration) -> bool:
        return self.delete_by_id(registration.id)

    def delete_by_id(self, registration_id: int) -> bool:
        with get_db() as conn:
            cursor = conn.execute(
                "DELETE FROM registrations WHERE id = ?", (registration_id,)
            )

        deleted = cursor.rowcount > 0
        if deleted:
            logger.debug("registrations.deleted", registration_id=registration_id)
        return deleted


class GradeRepository:
    """CRUD and foreign-key queries for the grades table."""

    def find_by_id(self, grade_id: int) -> Grade | None:
        with get_db() as conn:
            row = conn.execute(
                "SELECT * FROM grades WHERE id = ?", (grade_id,)
            ).fetchone()

        if row is None:
            return None
        return _row_to_grade(row)

    def find_all(self) -> list[Grade]:
        with get_db() as conn:
            rows = conn.execute("SELECT * FROM grades ORDER BY id").fetchall()
        return [_row_to_grade(row) for row in rows]

    def find_by_student(self, student_id: int) -> list[Grade]:
        with get_db() as conn:
            rows = conn.execute(
                "SELECT * FROM grades WHERE student_id = ? ORDER BY id",
                (student_id,),
            ).fetchall()
        return [_row_to_grade(row) for row in rows]

    def find_by_module(
        self, module_code: str, academic_year: str | None = None
    ) -> list[Grade]:
        """Grades for a module, optionally limited to one academic year."""
        query = "SELECT * FROM grades WHERE module_code = ?"
        params: tuple = (module_code,)
        if academic_year is not None:
            query += " AND academic_year = ?"
            params += (academic_year,)

        with get_db() as conn:
            rows = conn.execute(query + " ORDER BY id", params).fetchall()
        return [_row_to_grade(row) for row in rows]

    def save(self, grade: Grade) -> Grade:
        """Insert a new grade or update an existing one."""
        with get_db() as conn:
            if grade.id is None:
                cursor = conn.execute(
                    """
                    INSERT INTO grades (score, academic_year, student_id, module_code)
                    VALUES (?, ?, ?, ?)
                    """,
                    (grade.score, grade.academic_year, grade.student_id, grade.module_code),
                )
                grade.id = cursor.lastrowid
            else:
                conn.execute(
                    """
                    UPDATE grades SET
                        score = ?,
                        academic_year = ?,
                        student_id = ?,
                        module_code = ?
                    WHERE id = ?
                    """,
                    (
                        grade.score,
                        grade.academic_year,
                        grade.student_id,
                        grade.module_code,
                        grade.id,
                    ),
                )

        logger.debug("grades.saved", grade_id=grade.id)
        return grade

    def delete(self, grade: Grade) -> bool:
        return self.delete_by_id(grade.id)

    def delete_by_id(self, grade_id: int) -> bool:
        with get_db() as conn:
            cursor = conn.execute("DELETE FROM grades WHERE id = ?", (grade_id,))

        deleted = cursor.rowcount > 0
        if deleted:
            logger.debug("grades.deleted", grade_id=grade_id)
        return deleted


@dataclass
class RecordsStore:
    """The four repositories the records service works against."""

    students: StudentRepository = field(default_factory=StudentRepository)
    modules: ModuleRepository = field(default_factory=ModuleRepository)
    registrations: RegistrationRepository = field(default_factory=RegistrationRepository)
    grades: GradeRepository = field(default_factory=GradeRepository)


def _row_to_student(row) -> Student:
    """Convert database row to Student."""
    return Student(
        id=row["id"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        username=row["username"],
        email=row["email"],
    )


def _row_to_module(row) -> Module:
    """Convert database row to Module."""
    return Module(
        code=row["code"],
        name=row["name"],
        mnc=bool(row["mnc"]),
        max_seats=row["max_seats"],
    )


def _row_to_registration(row) -> Registration:
    """Convert database row to Registration."""
    return Registration(
        id=row["id"],
        student_id=row["student_id"],
        module_code=row["module_code"],
    )


def _row_to_grade(row) -> Grade:
    """Convert database row to Grade."""
    return Grade(
        id=row["id"],
        score=row["score"],
        academic_year=row["academic_year"],
        student_id=row["student_id"],
        module_code=row["module_code"],
    )
