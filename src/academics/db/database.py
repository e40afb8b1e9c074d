"""SQLite database connection and schema management.

Provides connection management and schema initialization for the records
service.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

import structlog

from academics.config.app_config import load_app_config

logger = structlog.get_logger(__name__)

# Current database location (set by init_db)
_db_path: Path | None = None


def get_db_path() -> Path:
    """Return the active database path (init_db value, else config)."""
    return _db_path or load_app_config().database.path


def init_db(db_path: Path | None = None) -> None:
    """Initialize database with schema.

    Creates the database file and all required tables if they don't exist.

    Args:
        db_path: Path to database file. Defaults to the configured path
    """
    global _db_path
    _db_path = db_path or load_app_config().database.path

    with get_db() as conn:
        _create_schema(conn)

    logger.info("database.initialized", path=str(_db_path))


@contextmanager
def get_db() -> Generator[sqlite3.Connection, None, None]:
    """Get database connection as context manager.

    Yields:
        SQLite connection with row factory set to sqlite3.Row

    Example:
        with get_db() as conn:
            rows = conn.execute("SELECT * FROM modules").fetchall()
    """
    db_path = get_db_path()

    # Ensure directory exists
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path, timeout=30)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")

    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def _create_schema(conn: sqlite3.Connection) -> None:
    """Create database schema.

    Uses IF NOT EXISTS for idempotency.
    """
    conn.executescript(
        """
        -- students: ids are assigned by the caller, never generated
        CREATE TABLE IF NOT EXISTS students (
            id INTEGER PRIMARY KEY,
            first_name TEXT,
            last_name TEXT,
            username TEXT,
            email TEXT
        );

        CREATE TABLE IF NOT EXISTS modules (
            code TEXT PRIMARY KEY,
            name TEXT,
            mnc INTEGER NOT NULL DEFAULT 0,
            max_seats INTEGER NOT NULL DEFAULT 0
        );

        -- one registration per (student, module)
        CREATE TABLE IF NOT EXISTS registrations (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            student_id INTEGER NOT NULL REFERENCES students(id),
            module_code TEXT NOT NULL REFERENCES modules(code),
            UNIQUE (student_id, module_code)
        );

        CREATE TABLE IF NOT EXISTS grades (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            score INTEGER NOT NULL,
            academic_year TEXT NOT NULL,
            student_id INTEGER NOT NULL REFERENCES students(id),
            module_code TEXT NOT NULL REFERENCES modules(code)
        );

        CREATE INDEX IF NOT EXISTS idx_registrations_module ON registrations(module_code);
        CREATE INDEX IF NOT EXISTS idx_registrations_student ON registrations(student_id);
        CREATE INDEX IF NOT EXISTS idx_grades_module ON grades(module_code);
        CREATE INDEX IF NOT EXISTS idx_grades_student ON grades(student_id);
        """
    )
