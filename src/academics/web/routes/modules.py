"""Module endpoints: CRUD, registrations and averages."""

from fastapi import APIRouter, Depends, Query, Response, status

from academics.core.errors import ErrorKind
from academics.core.models import Module
from academics.services.records_service import RecordsService
from academics.web.dependencies import get_records_service
from academics.web.outcomes import unwrap_or_raise
from academics.web.schemas import (
    EnrolledStudentResponse,
    ModuleAverageResponse,
    ModuleCreate,
    ModuleListResponse,
    ModuleRegistrationsResponse,
    ModuleResponse,
    ModuleUpdate,
    RegisterStudentRequest,
    changes_of,
)

router = APIRouter(prefix="/modules", tags=["modules"])


def _to_response(module: Module) -> ModuleResponse:
    return ModuleResponse(
        code=module.code,
        name=module.name,
        mnc=module.mnc,
        max_seats=module.max_seats,
    )


@router.get("", response_model=ModuleListResponse)
def list_modules(
    service: RecordsService = Depends(get_records_service),
) -> ModuleListResponse:
    """List all modules."""
    modules = [_to_response(m) for m in service.list_modules()]
    return ModuleListResponse(modules=modules, count=len(modules))


@router.post("", response_model=ModuleResponse, status_code=status.HTTP_201_CREATED)
def create_module(
    module_data: ModuleCreate,
    service: RecordsService = Depends(get_records_service),
) -> ModuleResponse:
    """Create a module."""
    result = service.create_module(module_data.model_dump())
    module = unwrap_or_raise(
        result, overrides={ErrorKind.BUSINESS_RULE: status.HTTP_409_CONFLICT}
    )
    return _to_response(module)


@router.get("/{code}", response_model=ModuleResponse)
def get_module(
    code: str,
    service: RecordsService = Depends(get_records_service),
) -> ModuleResponse:
    """Get a module by code."""
    return _to_response(unwrap_or_raise(service.get_module(code)))


@router.put("/{code}", response_model=ModuleResponse)
def update_module(
    code: str,
    module_data: ModuleUpdate,
    service: RecordsService = Depends(get_records_service),
) -> ModuleResponse:
    """Update name, mnc and/or maxSeats (non-positive maxSeats is ignored)."""
    result = service.update_module(code, changes_of(module_data))
    return _to_response(unwrap_or_raise(result))


@router.delete("/{code}", status_code=status.HTTP_204_NO_CONTENT)
def delete_module(
    code: str,
    service: RecordsService = Depends(get_records_service),
) -> Response:
    """Delete a module without registrations or grades."""
    unwrap_or_raise(service.delete_module(code))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{code}/registerStudent")
def register_student(
    code: str,
    body: RegisterStudentRequest,
    service: RecordsService = Depends(get_records_service),
) -> Response:
    """Register a student in the module."""
    unwrap_or_raise(service.register_student(code, body.student_id))
    return Response(status_code=status.HTTP_200_OK)


@router.delete("/{code}/students/{student_id}")
def remove_student(
    code: str,
    student_id: int,
    service: RecordsService = Depends(get_records_service),
) -> Response:
    """Remove a student's registration from the module."""
    unwrap_or_raise(service.remove_student(code, student_id))
    return Response(status_code=status.HTTP_200_OK)


@router.get("/{code}/registrations", response_model=ModuleRegistrationsResponse)
def list_registrations(
    code: str,
    service: RecordsService = Depends(get_records_service),
) -> ModuleRegistrationsResponse:
    """List registered students with their grade for this module."""
    enrolled = unwrap_or_raise(service.list_module_registrations(code))
    return ModuleRegistrationsResponse(
        enrolled_students=[
            EnrolledStudentResponse(
                id=e.id,
                first_name=e.first_name,
                last_name=e.last_name,
                email=e.email,
                grade=e.grade,
                grade_id=e.grade_id,
            )
            for e in enrolled
        ]
    )


@router.get("/{code}/average", response_model=ModuleAverageResponse)
def get_module_average(
    code: str,
    academic_year: str | None = Query(default=None, alias="academicYear"),
    service: RecordsService = Depends(get_records_service),
) -> ModuleAverageResponse:
    """Average grade of the module, optionally for one academic year."""
    average = unwrap_or_raise(service.module_average(code, academic_year))
    return ModuleAverageResponse(
        module_code=code, academic_year=academic_year, average=average
    )
