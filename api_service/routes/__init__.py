"""
API route modules.

Each module owns one /api/<resource> prefix.
"""

from .admin import router as admin_router
from .ai import router as ai_router
from .analytics import router as analytics_router
from .applications import router as applications_router
from .auth import router as auth_router
from .auth import users_router
from .jobs import router as jobs_router
from .matching import router as matching_router
from .resumes import router as resumes_router

__all__ = [
    "admin_router",
    "ai_router",
    "analytics_router",
    "applications_router",
    "auth_router",
    "users_router",
    "jobs_router",
    "matching_router",
    "resumes_router",
]
