"""Core domain: entities, enrollment/grading rules and outcome types.

Modules:
- models: Student, Module, Registration, Grade
- rules: invariant checks shared by entities and the records service
- errors: Result / ErrorKind outcome types
"""

from academics.core.errors import DomainError, ErrorKind, Result
from academics.core.models import Grade, Module, Registration, Student

__all__ = [
    "DomainError",
    "ErrorKind",
    "Result",
    "Grade",
    "Module",
    "Registration",
    "Student",
]
