"""Application services (use cases) for the records API and CLI."""

from academics.services.records_service import EnrolledStudent, RecordsService

__all__ = ["EnrolledStudent", "RecordsService"]
