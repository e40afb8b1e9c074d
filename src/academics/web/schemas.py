"""Pydantic schemas for the records Web API.

Wire names are camelCase (firstName, maxSeats, academicYear), except the
grade endpoints' request bodies which use snake_case keys. Request models
accept both the wire name and the Python field name.

Update payloads are read with model_dump(exclude_unset=True), so only the
keys the client actually sent reach the service.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from academics import __version__

# Ids and numbers may arrive as JSON numbers or numeric strings.
IntLike = int | str


class _RequestModel(BaseModel):
    model_config = {"populate_by_name": True}


class _ResponseModel(BaseModel):
    model_config = {"populate_by_name": True, "from_attributes": True}


# =============================================================================
# STUDENT SCHEMAS
# =============================================================================


class StudentCreate(_RequestModel):
    """Request body for creating a student."""

    id: IntLike | None = None
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    username: str | None = None
    email: str | None = None


class StudentUpdate(_RequestModel):
    """Partial student profile update."""

    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    username: str | None = None
    email: str | None = None


class StudentResponse(_ResponseModel):
    """Response for a student."""

    id: int
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    username: str | None = None
    email: str | None = None


class StudentListResponse(BaseModel):
    """Response for list of students."""

    students: list[StudentResponse]
    count: int


class StudentAverageResponse(_ResponseModel):
    """Average grade of a student."""

    student_id: int = Field(alias="studentId")
    average: float


# =============================================================================
# MODULE SCHEMAS
# =============================================================================


class ModuleCreate(_RequestModel):
    """Request body for creating a module."""

    code: str | None = None
    name: str | None = None
    mnc: bool | str | None = None
    max_seats: IntLike | None = Field(default=None, alias="maxSeats")


class ModuleUpdate(_RequestModel):
    """Partial module update."""

    name: str | None = None
    mnc: bool | str | None = None
    max_seats: IntLike | None = Field(default=None, alias="maxSeats")


class ModuleResponse(_ResponseModel):
    """Response for a module."""

    code: str
    name: str | None = None
    mnc: bool = False
    max_seats: int = Field(default=0, alias="maxSeats")


class ModuleListResponse(BaseModel):
    """Response for list of modules."""

    modules: list[ModuleResponse]
    count: int


class ModuleAverageResponse(_ResponseModel):
    """Average grade of a module, optionally for one academic year."""

    module_code: str = Field(alias="moduleCode")
    academic_year: str | None = Field(default=None, alias="academicYear")
    average: float


class RegisterStudentRequest(_RequestModel):
    """Request body for registering a student in a module."""

    student_id: IntLike | None = Field(default=None, alias="studentId")


class EnrolledStudentResponse(_ResponseModel):
    """A registered student with their grade for the module, if any."""

    id: int
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    email: str | None = None
    grade: int | None = None
    grade_id: int | None = Field(default=None, alias="gradeId")


class ModuleRegistrationsResponse(_ResponseModel):
    """Registration listing for a module."""

    enrolled_students: list[EnrolledStudentResponse] = Field(alias="enrolledStudents")


# =============================================================================
# GRADE SCHEMAS
# =============================================================================


class AddGradeRequest(_RequestModel):
    """Request body for adding a grade (all fields required by the service)."""

    student_id: IntLike | None = None
    module_code: str | None = None
    score: IntLike | None = None
    academic_year: str | None = None


class GradeUpdate(_RequestModel):
    """Partial grade update."""

    score: IntLike | None = None
    academic_year: str | None = None


class GradeResponse(_ResponseModel):
    """Response for a grade."""

    id: int
    score: int
    academic_year: str = Field(alias="academicYear")
    student_id: int | None = Field(default=None, alias="studentId")
    module_code: str | None = Field(default=None, alias="moduleCode")


class GradeListResponse(BaseModel):
    """Response for list of grades."""

    grades: list[GradeResponse]
    count: int


# =============================================================================
# HEALTH SCHEMAS
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = __version__
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


def changes_of(payload: BaseModel) -> dict[str, Any]:
    """Fields explicitly sent in a partial update payload."""
    return payload.model_dump(exclude_unset=True)
