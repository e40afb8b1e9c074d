"""Tests for student endpoints."""

import pytest


class TestListStudents:
    """Tests for GET /students."""

    def test_list_students_empty(self, client):
        """List returns empty array when no students."""
        response = client.get("/students")
        assert response.status_code == 200
        assert response.json() == {"students": [], "count": 0}

    def test_list_students_after_create(self, client):
        client.post("/students", json={"id": 5, "firstName": "Ana"})

        data = client.get("/students").json()
        assert data["count"] == 1
        assert data["students"][0]["firstName"] == "Ana"


class TestCreateStudent:
    """Tests for POST /students."""

    def test_create_student_full(self, client):
        response = client.post(
            "/students",
            json={
                "id": 7,
                "firstName": "María",
                "lastName": "García",
                "username": "mgarcia",
                "email": "maria@example.com",
            },
        )
        assert response.status_code == 201
        assert response.json() == {
            "id": 7,
            "firstName": "María",
            "lastName": "García",
            "username": "mgarcia",
            "email": "maria@example.com",
        }

    def test_create_student_without_id(self, client):
        """Ids are assigned by the caller."""
        response = client.post("/students", json={"firstName": "Pedro"})
        assert response.status_code == 400

    def test_create_student_duplicate_id(self, client):
        client.post("/students", json={"id": 1, "firstName": "Ana"})
        response = client.post("/students", json={"id": 1, "firstName": "Otra"})
        assert response.status_code == 409


class TestUpdateStudent:
    """Tests for PUT /students/{id}."""

    @pytest.fixture
    def student_client(self, client, seeded):
        return client

    def test_update_some_fields(self, student_client):
        response = student_client.put(
            "/students/1", json={"lastName": "King", "username": "aking"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["firstName"] == "Ada"
        assert data["lastName"] == "King"
        assert data["username"] == "aking"
        assert data["email"] == "ada@example.com"

    def test_null_field_left_unchanged(self, student_client):
        response = student_client.put("/students/1", json={"email": None})
        assert response.json()["email"] == "ada@example.com"

    def test_update_unknown_student(self, student_client):
        assert student_client.put("/students/99", json={"email": "x"}).status_code == 404


class TestGetAndDeleteStudent:
    """Tests for GET/DELETE /students/{id}."""

    def test_get_student_exists(self, client, seeded):
        response = client.get("/students/2")
        assert response.status_code == 200
        assert response.json()["firstName"] == "Alan"

    def test_get_student_not_found(self, client):
        assert client.get("/students/99").status_code == 404

    def test_delete_student(self, client, seeded):
        assert client.delete("/students/3").status_code == 204
        assert client.get("/students/3").status_code == 404

    def test_delete_registered_student(self, client, seeded):
        client.post("/modules/COMP0010/registerStudent", json={"studentId": 1})
        assert client.delete("/students/1").status_code == 400

    def test_average_without_grades(self, client, seeded):
        assert client.get("/students/1/average").status_code == 404
