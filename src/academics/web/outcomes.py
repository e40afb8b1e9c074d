"""Translate service Results into HTTP responses."""

from __future__ import annotations

from typing import TypeVar

from fastapi import HTTPException, status

from academics.core.errors import ErrorKind, Result

T = TypeVar("T")

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.BUSINESS_RULE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.NOT_REGISTERED: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NO_GRADE_AVAILABLE: status.HTTP_404_NOT_FOUND,
}


def unwrap_or_raise(
    result: Result[T],
    overrides: dict[ErrorKind, int] | None = None,
) -> T:
    """Return the result value or raise the matching HTTPException.

    Args:
        result: Service outcome
        overrides: Per-route status codes for specific error kinds

    Raises:
        HTTPException: With {"detail": result.message}
    """
    if result.success:
        return result.value

    codes = {**STATUS_BY_KIND, **(overrides or {})}
    raise HTTPException(status_code=codes[result.error], detail=result.message)
