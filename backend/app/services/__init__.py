"""Service layer encapsulating business logic for API routers."""

from .github import GithubClient, GithubClientError
from .listing import (
    BackendUnavailable,
    InvalidFilterField,
    InvalidPagination,
    InvalidSortField,
    InvalidSortOrder,
    ListingError,
    ListRequest,
    ListResult,
    ResourceLister,
    SqlAlchemyStore,
)
from .messages import MessageService
from .notifications import (
    ConfigurationError,
    ConsoleNotificationClient,
    MessageNotifier,
    NotificationClient,
    NotificationError,
    SendGridEmailClient,
    build_notification_client_from_env,
    dispatch_quietly,
)
from .projects import ProjectService
from .skills import SkillService
from .users import UserService, UserServiceError

__all__ = [
    "BackendUnavailable",
    "ConfigurationError",
    "ConsoleNotificationClient",
    "GithubClient",
    "GithubClientError",
    "InvalidFilterField",
    "InvalidPagination",
    "InvalidSortField",
    "InvalidSortOrder",
    "ListingError",
    "ListRequest",
    "ListResult",
    "MessageNotifier",
    "MessageService",
    "NotificationClient",
    "NotificationError",
    "ProjectService",
    "ResourceLister",
    "SendGridEmailClient",
    "SkillService",
    "SqlAlchemyStore",
    "UserService",
    "UserServiceError",
    "build_notification_client_from_env",
    "dispatch_quietly",
]
