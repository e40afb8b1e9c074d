"""Route handlers for the records Web API."""

from academics.web.routes.health import router as health_router
from academics.web.routes.students import router as students_router
from academics.web.routes.modules import router as modules_router
from academics.web.routes.grades import router as grades_router

__all__ = [
    "health_router",
    "students_router",
    "modules_router",
    "grades_router",
]
