"""Tests for the shared enrollment and grading rules."""

import pytest

from academics.core import rules
from academics.core.errors import ErrorKind
from academics.core.models import Grade, Registration


@pytest.fixture
def registrations() -> list[Registration]:
    return [
        Registration(id=1, student_id=1, module_code="COMP0010"),
        Registration(id=2, student_id=2, module_code="COMP0010"),
        Registration(id=3, student_id=1, module_code="COMP0011"),
    ]


class TestRegistrationLookups:
    """Tests for is_registered / find_registration / check_registered."""

    def test_is_registered(self, registrations):
        assert rules.is_registered(registrations, "COMP0011") is True
        assert rules.is_registered(registrations, "COMP0099") is False

    def test_find_registration(self, registrations):
        """Finds the first registration held by the student."""
        found = rules.find_registration(registrations[:2], student_id=2)
        assert found is registrations[1]
        assert rules.find_registration(registrations[:2], student_id=9) is None

    def test_check_registered_failure(self, registrations):
        result = rules.check_registered(registrations, "COMP0099")
        assert result.success is False
        assert result.error == ErrorKind.NOT_REGISTERED


class TestCapacity:
    """Tests for has_capacity."""

    @pytest.mark.parametrize(
        "max_seats,enrolled,expected",
        [(2, 0, True), (2, 1, True), (2, 2, False), (0, 0, False), (1, 5, False)],
    )
    def test_has_capacity(self, max_seats, enrolled, expected):
        assert rules.has_capacity(max_seats, enrolled) is expected


class TestFirstGradeFor:
    """Tests for first_grade_for."""

    def test_filters_by_module_and_student(self):
        grades = [
            Grade(id=1, score=60, academic_year="2024/2025", student_id=1, module_code="A"),
            Grade(id=2, score=70, academic_year="2024/2025", student_id=2, module_code="A"),
            Grade(id=3, score=80, academic_year="2024/2025", student_id=2, module_code="B"),
        ]
        assert rules.first_grade_for(grades, module_code="B").id == 3
        assert rules.first_grade_for(grades, student_id=2).id == 2
        assert rules.first_grade_for(grades, module_code="B", student_id=1) is None


class TestComputeAverage:
    """Tests for compute_average."""

    @pytest.mark.parametrize(
        "scores,expected",
        [([80, 100], 90.0), ([50, 100], 75.0), ([1, 2], 1.5), ([-10, 10, 3], 1.0)],
    )
    def test_average_is_fractional(self, scores, expected):
        grades = [Grade(score=s, academic_year="2024/2025") for s in scores]
        result = rules.compute_average(grades)

        assert result.success is True
        assert isinstance(result.value, float)
        assert result.value == pytest.approx(expected)

    @pytest.mark.parametrize("grades", [None, []])
    def test_average_of_nothing(self, grades):
        result = rules.compute_average(grades)
        assert result.error == ErrorKind.NO_GRADE_AVAILABLE
