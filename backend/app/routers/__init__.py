"""Routers package."""

from .auth import router as auth_router
from .messages import router as messages_router
from .projects import router as projects_router
from .skills import router as skills_router
from .users import router as users_router

__all__ = [
    "auth_router",
    "messages_router",
    "projects_router",
    "skills_router",
    "users_router",
]
