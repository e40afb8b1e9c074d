"""Web API (FastAPI) for the academic records service."""
