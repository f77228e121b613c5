"""Expose Pydantic schemas for convenient imports."""

from .common import (
    ActionResponse,
    CamelModel,
    DataResponse,
    ErrorDetail,
    ErrorResponse,
    ListResponse,
    PaginationMeta,
    SanitizedInput,
    sanitize_text,
)
from .message import (
    MessageAttachment,
    MessageCreate,
    MessageRead,
    MessageReceipt,
    MessageReply,
    MessageStatusUpdate,
    UnreadCount,
)
from .project import (
    GithubRepository,
    ProjectCounter,
    ProjectCreate,
    ProjectImage,
    ProjectRead,
    ProjectUpdate,
)
from .skill import SkillCreate, SkillOrder, SkillRead, SkillReorderRequest, SkillUpdate
from .user import (
    ForgotPasswordRequest,
    LoginRequest,
    PasswordUpdate,
    ProfileUpdate,
    RefreshTokenRequest,
    RegisterRequest,
    ResetPasswordRequest,
    TokenResponse,
    UserRead,
    UserStats,
    UserSummary,
    UserUpdate,
)

__all__ = [
    "ActionResponse",
    "CamelModel",
    "DataResponse",
    "ErrorDetail",
    "ErrorResponse",
    "ForgotPasswordRequest",
    "GithubRepository",
    "ListResponse",
    "LoginRequest",
    "MessageAttachment",
    "MessageCreate",
    "MessageRead",
    "MessageReceipt",
    "MessageReply",
    "MessageStatusUpdate",
    "PaginationMeta",
    "PasswordUpdate",
    "ProfileUpdate",
    "ProjectCounter",
    "ProjectCreate",
    "ProjectImage",
    "ProjectRead",
    "ProjectUpdate",
    "RefreshTokenRequest",
    "RegisterRequest",
    "ResetPasswordRequest",
    "SanitizedInput",
    "SkillCreate",
    "SkillOrder",
    "SkillRead",
    "SkillReorderRequest",
    "SkillUpdate",
    "TokenResponse",
    "UnreadCount",
    "UserRead",
    "UserStats",
    "UserSummary",
    "UserUpdate",
    "sanitize_text",
]
