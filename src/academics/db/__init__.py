"""Database module for SQLite persistence.

Provides:
- Database connection management
- Schema initialization
- Repositories for students, modules, registrations and grades
"""

from academics.db.database import get_db, init_db
from academics.db.repositories import (
    GradeRepository,
    ModuleRepository,
    RecordsStore,
    RegistrationRepository,
    StudentRepository,
)

__all__ = [
    "get_db",
    "init_db",
    "GradeRepository",
    "ModuleRepository",
    "RecordsStore",
    "RegistrationRepository",
    "StudentRepository",
]
