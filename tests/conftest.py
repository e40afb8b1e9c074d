"""Shared fixtures: isolated SQLite database per test."""

import pytest
from fastapi.testclient import TestClient

from academics.config.app_config import clear_config_cache
from academics.core.models import Module, Student
from academics.db import database
from academics.db.repositories import RecordsStore
from academics.services.records_service import RecordsService
from academics.web.api import create_app


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    """Initialize a fresh database under tmp_path."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("ACADEMICS_CONFIG", raising=False)
    monkeypatch.setattr(database, "_db_path", None)
    clear_config_cache()

    path = tmp_path / "db" / "test.db"
    database.init_db(path)
    yield path
    clear_config_cache()


@pytest.fixture
def store(db_path) -> RecordsStore:
    return RecordsStore()


@pytest.fixture
def service(store) -> RecordsService:
    return RecordsService(store)


@pytest.fixture
def seeded(store):
    """Three students and a module COMP0010 with two seats."""
    students = [
        store.students.save(
            Student(
                id=1,
                first_name="Ada",
                last_name="Lovelace",
                username="alovelace",
                email="ada@example.com",
            )
        ),
        store.students.save(
            Student(
                id=2,
                first_name="Alan",
                last_name="Turing",
                username="aturing",
                email="alan@example.com",
            )
        ),
        store.students.save(
            Student(
                id=3,
                first_name="Grace",
                last_name="Hopper",
                username="ghopper",
                email="grace@example.com",
            )
        ),
    ]
    module = store.modules.save(
        Module(code="COMP0010", name="Software Engineering", mnc=True, max_seats=2)
    )
    return {"students": students, "module": module}


@pytest.fixture
def client(db_path, service):
    """Test client bound to the isolated database."""
    app = create_app(service)
    with TestClient(app) as test_client:
        yield test_client
