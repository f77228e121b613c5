"""Expose SQLAlchemy models for convenient imports."""

from ..enums import (
    MessageCategory,
    MessagePriority,
    MessageStatus,
    ProjectCategory,
    ProjectStatus,
    SkillCategory,
    UserRole,
)
from .message import Message
from .project import Project
from .skill import Skill
from .user import User

__all__ = [
    "Message",
    "MessageCategory",
    "MessagePriority",
    "MessageStatus",
    "Project",
    "ProjectCategory",
    "ProjectStatus",
    "Skill",
    "SkillCategory",
    "User",
    "UserRole",
]
