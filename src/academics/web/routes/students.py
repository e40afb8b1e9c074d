"""Student endpoints."""

from fastapi import APIRouter, Depends, Response, status

from academics.core.errors import ErrorKind
from academics.core.models import Student
from academics.services.records_service import RecordsService
from academics.web.dependencies import get_records_service
from academics.web.outcomes import unwrap_or_raise
from academics.web.schemas import (
    StudentAverageResponse,
    StudentCreate,
    StudentListResponse,
    StudentResponse,
    StudentUpdate,
    changes_of,
)

router = APIRouter(prefix="/students", tags=["students"])


def _to_response(student: Student) -> StudentResponse:
    return StudentResponse(
        id=student.id,
        first_name=student.first_name,
        last_name=student.last_name,
        username=student.username,
        email=student.email,
    )


@router.get("", response_model=StudentListResponse)
def list_students(
    service: RecordsService = Depends(get_records_service),
) -> StudentListResponse:
    """List all students."""
    students = [_to_response(s) for s in service.list_students()]
    return StudentListResponse(students=students, count=len(students))


@router.post("", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
def create_student(
    student_data: StudentCreate,
    service: RecordsService = Depends(get_records_service),
) -> StudentResponse:
    """Create a student with a caller-assigned id."""
    result = service.create_student(student_data.model_dump())
    student = unwrap_or_raise(
        result, overrides={ErrorKind.BUSINESS_RULE: status.HTTP_409_CONFLICT}
    )
    return _to_response(student)


@router.get("/{student_id}", response_model=StudentResponse)
def get_student(
    student_id: int,
    service: RecordsService = Depends(get_records_service),
) -> StudentResponse:
    """Get a specific student by ID."""
    return _to_response(unwrap_or_raise(service.get_student(student_id)))


@router.put("/{student_id}", response_model=StudentResponse)
def update_student(
    student_id: int,
    student_data: StudentUpdate,
    service: RecordsService = Depends(get_records_service),
) -> StudentResponse:
    """Update the profile fields sent in the body."""
    result = service.update_student(student_id, changes_of(student_data))
    return _to_response(unwrap_or_raise(result))


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_student(
    student_id: int,
    service: RecordsService = Depends(get_records_service),
) -> Response:
    """Delete a student without registrations or grades."""
    unwrap_or_raise(service.delete_student(student_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{student_id}/average", response_model=StudentAverageResponse)
def get_student_average(
    student_id: int,
    service: RecordsService = Depends(get_records_service),
) -> StudentAverageResponse:
    """Average over all of the student's grades."""
    average = unwrap_or_raise(service.student_average(student_id))
    return StudentAverageResponse(student_id=student_id, average=average)
