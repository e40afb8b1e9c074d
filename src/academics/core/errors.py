"""Outcome types shared by the domain operations and the records service.

Every operation that can be rejected returns a Result instead of raising,
so callers branch on `result.success` and `result.error` explicitly.

Error kinds:
- VALIDATION: required input absent or unparsable
- NOT_FOUND: a student, module or grade id does not resolve
- BUSINESS_RULE: a resolved request breaks an enrollment/grading rule
- NOT_REGISTERED: domain signal, student holds no registration for a module
- NO_GRADE_AVAILABLE: domain signal, no grade to return or average
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Classification of a rejected operation."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    BUSINESS_RULE = "business_rule"
    NOT_REGISTERED = "not_registered"
    NO_GRADE_AVAILABLE = "no_grade_available"


@dataclass
class Result(Generic[T]):
    """Outcome of a domain operation or use case."""

    success: bool
    value: T | None = None
    error: ErrorKind | None = None
    message: str = ""

    @classmethod
    def ok(cls, value: Any = None, message: str = "") -> Result:
        return cls(success=True, value=value, message=message)

    @classmethod
    def fail(cls, error: ErrorKind, message: str) -> Result:
        return cls(success=False, error=error, message=message)

    def unwrap(self) -> T:
        """Return the value, or raise DomainError for a failed result."""
        if not self.success:
            raise DomainError(self)
        return self.value


class DomainError(Exception):
    """Raised by Result.unwrap() on a failed result."""

    def __init__(self, result: Result):
        self.result = result
        self.kind = result.error
        super().__init__(result.message)
