"""Grade endpoints."""

import structlog
from fastapi import APIRouter, Depends

from academics.core.models import Grade
from academics.services.records_service import RecordsService
from academics.web.dependencies import get_records_service
from academics.web.outcomes import unwrap_or_raise
from academics.web.schemas import (
    AddGradeRequest,
    GradeListResponse,
    GradeResponse,
    GradeUpdate,
    changes_of,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/grades", tags=["grades"])


def _to_response(grade: Grade) -> GradeResponse:
    return GradeResponse(
        id=grade.id,
        score=grade.score,
        academic_year=grade.academic_year,
        student_id=grade.student_id,
        module_code=grade.module_code,
    )


@router.get("", response_model=GradeListResponse)
def list_grades(
    service: RecordsService = Depends(get_records_service),
) -> GradeListResponse:
    """List all grades."""
    grades = [_to_response(g) for g in service.list_grades()]
    return GradeListResponse(grades=grades, count=len(grades))


@router.post("/addGrade", response_model=GradeResponse)
def add_grade(
    grade_data: AddGradeRequest,
    service: RecordsService = Depends(get_records_service),
) -> GradeResponse:
    """Add a grade for a student enrolled in the module."""
    result = service.add_grade(
        student_id=grade_data.student_id,
        module_code=grade_data.module_code,
        score=grade_data.score,
        academic_year=grade_data.academic_year,
    )
    if not result.success:
        logger.info("grades.add_failed", error=result.error.value, detail=result.message)
    return _to_response(unwrap_or_raise(result))


@router.get("/{grade_id}", response_model=GradeResponse)
def get_grade(
    grade_id: int,
    service: RecordsService = Depends(get_records_service),
) -> GradeResponse:
    """Get a grade by ID."""
    return _to_response(unwrap_or_raise(service.get_grade(grade_id)))


@router.put("/{grade_id}", response_model=GradeResponse)
def update_grade(
    grade_id: int,
    grade_data: GradeUpdate,
    service: RecordsService = Depends(get_records_service),
) -> GradeResponse:
    """Update score and/or academic year of a grade."""
    result = service.update_grade(grade_id, changes_of(grade_data))
    return _to_response(unwrap_or_raise(result))
