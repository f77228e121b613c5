"""Enumerations shared by models, schemas and listing configuration."""

from __future__ import annotations

import enum


class ResourceKind(str, enum.Enum):
    """Resources exposed through the paginated listing endpoints."""

    PROJECT = "project"
    MESSAGE = "message"
    SKILL = "skill"


class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


class CallerRole(str, enum.Enum):
    """Role of whoever issued a request, including unauthenticated callers."""

    ANONYMOUS = "anonymous"
    USER = "user"
    ADMIN = "admin"


class ProjectCategory(str, enum.Enum):
    WEB_DEVELOPMENT = "Web Development"
    MOBILE_APP = "Mobile App"
    UI_UX_DESIGN = "UI/UX Design"
    FULL_STACK = "Full Stack"
    FRONTEND = "Frontend"
    BACKEND = "Backend"
    OTHER = "Other"


class ProjectStatus(str, enum.Enum):
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    ON_HOLD = "On Hold"
    ARCHIVED = "Archived"


class MessageCategory(str, enum.Enum):
    GENERAL_INQUIRY = "General Inquiry"
    PROJECT_PROPOSAL = "Project Proposal"
    JOB_OPPORTUNITY = "Job Opportunity"
    COLLABORATION = "Collaboration"
    FEEDBACK = "Feedback"
    OTHER = "Other"


class MessageStatus(str, enum.Enum):
    NEW = "new"
    READ = "read"
    REPLIED = "replied"
    ARCHIVED = "archived"


class MessagePriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SkillCategory(str, enum.Enum):
    FRONTEND = "Frontend"
    BACKEND = "Backend"
    DATABASE = "Database"
    TOOLS = "Tools & Technologies"
    DESIGN = "Design"
    SOFT_SKILLS = "Soft Skills"
    OTHER = "Other"
