"""
FastAPI API routes and endpoints.

- routes_trivia.py: POST /api/trivia
- routes_admin.py: POST /api/admin/login, POST /api/admin/logout, GET /api/admin/stats
- routes_health.py: GET /health
- dependencies.py: Dependency injection for LLM client, rate limiter, repository, etc.
- auth.py: Admin session tokens
- assembler.py: Success and error response bodies
- models.py: API-specific request/response models
- error_handlers.py: Exception handlers for structured error responses
"""

from trivia_service.api import dependencies, error_handlers, models
from trivia_service.api.routes_admin import router as admin_router
from trivia_service.api.routes_health import router as health_router
from trivia_service.api.routes_trivia import router as trivia_router

__all__ = [
    "trivia_router",
    "admin_router",
    "health_router",
    "dependencies",
    "error_handlers",
    "models",
]
