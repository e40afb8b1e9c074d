"""Request dependencies shared by the routers."""

from fastapi import Request

from academics.services.records_service import RecordsService


def get_records_service(request: Request) -> RecordsService:
    """The app-wide RecordsService (one instance so registration locks are shared)."""
    return request.app.state.records_service
