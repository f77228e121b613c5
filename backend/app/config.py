"""Environment-driven settings for the portfolio API.

Settings are resolved once and handed to the components that need them
instead of being looked up ad hoc while serving a request.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Mapping

from .enums import (
    MessageCategory,
    MessagePriority,
    MessageStatus,
    ProjectCategory,
    ProjectStatus,
    ResourceKind,
    SkillCategory,
)

LISTING_MAX_LIMIT_ENV = "LISTING_MAX_LIMIT"
DEFAULT_LIMIT_ENVS = {
    ResourceKind.PROJECT: "PROJECTS_DEFAULT_LIMIT",
    ResourceKind.MESSAGE: "MESSAGES_DEFAULT_LIMIT",
    ResourceKind.SKILL: "SKILLS_DEFAULT_LIMIT",
}
APP_ENV_ENV = "APP_ENV"

DEFAULT_MAX_LIMIT = 100


def read_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if value < 0:
        raise ValueError(f"{name} must be non-negative")
    return value


def read_bool_env(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def is_development() -> bool:
    return os.getenv(APP_ENV_ENV, "production").strip().lower() == "development"


@dataclass(frozen=True)
class ResourcePolicy:
    """Listing options for a single resource kind.

    ``filter_fields`` maps each filterable field to the type its raw query
    value is coerced to. ``sort_fields`` lists the fields accepted by
    ``sortBy`` and ``search_fields`` the text fields scanned by free-text
    search.
    """

    default_limit: int
    filter_fields: Mapping[str, type]
    sort_fields: frozenset[str]
    search_fields: tuple[str, ...] = ()


@dataclass(frozen=True)
class ListingConfig:
    max_limit: int = DEFAULT_MAX_LIMIT
    resources: Mapping[ResourceKind, ResourcePolicy] = field(default_factory=dict)

    def policy(self, kind: ResourceKind) -> ResourcePolicy:
        return self.resources[kind]


_PROJECT_SORT_FIELDS = frozenset(
    {
        "createdAt",
        "updatedAt",
        "title",
        "category",
        "status",
        "priority",
        "featured",
        "views",
        "likes",
        "startDate",
        "endDate",
    }
)
_MESSAGE_SORT_FIELDS = frozenset(
    {"createdAt", "updatedAt", "name", "email", "subject", "category", "status", "priority"}
)
_SKILL_SORT_FIELDS = frozenset(
    {"createdAt", "updatedAt", "name", "category", "proficiency", "yearsOfExperience", "order"}
)


def build_listing_config(
    *,
    max_limit: int = DEFAULT_MAX_LIMIT,
    project_limit: int = 10,
    message_limit: int = 20,
    skill_limit: int = 20,
) -> ListingConfig:
    """Assemble the listing configuration with the resource allow-lists."""

    if max_limit < 1:
        raise ValueError("max_limit must be at least 1")
    return ListingConfig(
        max_limit=max_limit,
        resources={
            ResourceKind.PROJECT: ResourcePolicy(
                default_limit=min(project_limit, max_limit),
                filter_fields={
                    "status": ProjectStatus,
                    "category": ProjectCategory,
                    "priority": int,
                    "featured": bool,
                },
                sort_fields=_PROJECT_SORT_FIELDS,
                search_fields=("title", "description", "shortDescription", "tags"),
            ),
            ResourceKind.MESSAGE: ResourcePolicy(
                default_limit=min(message_limit, max_limit),
                filter_fields={
                    "status": MessageStatus,
                    "category": MessageCategory,
                    "priority": MessagePriority,
                },
                sort_fields=_MESSAGE_SORT_FIELDS,
                search_fields=("name", "email", "subject", "message"),
            ),
            ResourceKind.SKILL: ResourcePolicy(
                default_limit=min(skill_limit, max_limit),
                filter_fields={"category": SkillCategory, "isActive": bool},
                sort_fields=_SKILL_SORT_FIELDS,
                search_fields=("name", "description"),
            ),
        },
    )


@lru_cache(maxsize=1)
def get_listing_config() -> ListingConfig:
    """Read the listing configuration from the environment once per process."""

    return build_listing_config(
        max_limit=read_int_env(LISTING_MAX_LIMIT_ENV, DEFAULT_MAX_LIMIT),
        project_limit=read_int_env(DEFAULT_LIMIT_ENVS[ResourceKind.PROJECT], 10),
        message_limit=read_int_env(DEFAULT_LIMIT_ENVS[ResourceKind.MESSAGE], 20),
        skill_limit=read_int_env(DEFAULT_LIMIT_ENVS[ResourceKind.SKILL], 20),
    )
