"""Pydantic schemas for portfolio projects."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Optional

from pydantic import Field, field_validator

from ..enums import ProjectCategory, ProjectStatus
from .common import CamelModel, SanitizedInput
from .user import UserSummary

_URL_PATTERN = re.compile(r"^(https?://)?([\da-z.-]+)\.([a-z.]{2,6})(/\S*)?$", re.IGNORECASE)
_ABSOLUTE_URL_PATTERN = re.compile(r"^https?://\S+$", re.IGNORECASE)
_GITHUB_URL_PATTERN = re.compile(r"^(https?://)?(www\.)?github\.com/[\w-]+/[\w.-]+/?$", re.IGNORECASE)


def _check_url(value: Optional[str], pattern: re.Pattern[str], message: str) -> Optional[str]:
    if value in (None, ""):
        return None
    if not pattern.match(value):
        raise ValueError(message)
    return value


class ProjectImage(CamelModel):
    url: str
    public_id: Optional[str] = None
    alt: Optional[str] = None


class ProjectFields(SanitizedInput):
    """Optional project attributes shared by create and update payloads."""

    short_description: Optional[str] = Field(default=None, max_length=200)
    images: list[ProjectImage] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    live_url: Optional[str] = None
    github_url: Optional[str] = None
    status: ProjectStatus = ProjectStatus.COMPLETED
    featured: bool = False
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    client_name: Optional[str] = Field(default=None, max_length=120)
    team_size: Optional[int] = Field(default=None, ge=1)
    my_role: Optional[str] = Field(default=None, max_length=120)
    challenges: list[str] = Field(default_factory=list)
    solutions: list[str] = Field(default_factory=list)
    results: Optional[str] = None
    priority: int = 0
    is_published: bool = True

    @field_validator("live_url")
    @classmethod
    def _validate_live_url(cls, value: Optional[str]) -> Optional[str]:
        return _check_url(value, _URL_PATTERN, "Please provide a valid URL")

    @field_validator("github_url")
    @classmethod
    def _validate_github_url(cls, value: Optional[str]) -> Optional[str]:
        return _check_url(value, _GITHUB_URL_PATTERN, "Please provide a valid GitHub URL")


class ProjectCreate(ProjectFields):
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=1000)
    thumbnail: str = Field(..., min_length=1, max_length=500)
    technologies: list[str] = Field(..., min_length=1)
    category: ProjectCategory

    @field_validator("thumbnail")
    @classmethod
    def _validate_thumbnail(cls, value: str) -> str:
        return _check_url(value, _ABSOLUTE_URL_PATTERN, "Thumbnail must be a valid URL") or value


class ProjectUpdate(SanitizedInput):
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, min_length=1, max_length=1000)
    short_description: Optional[str] = Field(default=None, max_length=200)
    images: Optional[list[ProjectImage]] = None
    thumbnail: Optional[str] = Field(default=None, min_length=1, max_length=500)
    technologies: Optional[list[str]] = Field(default=None, min_length=1)
    category: Optional[ProjectCategory] = None
    tags: Optional[list[str]] = None
    live_url: Optional[str] = None
    github_url: Optional[str] = None
    status: Optional[ProjectStatus] = None
    featured: Optional[bool] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    client_name: Optional[str] = Field(default=None, max_length=120)
    team_size: Optional[int] = Field(default=None, ge=1)
    my_role: Optional[str] = Field(default=None, max_length=120)
    challenges: Optional[list[str]] = None
    solutions: Optional[list[str]] = None
    results: Optional[str] = None
    priority: Optional[int] = None
    is_published: Optional[bool] = None

    @field_validator("live_url")
    @classmethod
    def _validate_live_url(cls, value: Optional[str]) -> Optional[str]:
        return _check_url(value, _URL_PATTERN, "Please provide a valid URL")

    @field_validator("github_url")
    @classmethod
    def _validate_github_url(cls, value: Optional[str]) -> Optional[str]:
        return _check_url(value, _GITHUB_URL_PATTERN, "Please provide a valid GitHub URL")


class ProjectRead(CamelModel):
    id: str
    title: str
    description: str
    short_description: Optional[str] = None
    images: list[ProjectImage] = Field(default_factory=list)
    thumbnail: str
    technologies: list[str] = Field(default_factory=list)
    category: ProjectCategory
    tags: list[str] = Field(default_factory=list)
    live_url: Optional[str] = None
    github_url: Optional[str] = None
    status: ProjectStatus
    featured: bool
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    client_name: Optional[str] = None
    team_size: Optional[int] = None
    my_role: Optional[str] = None
    challenges: list[str] = Field(default_factory=list)
    solutions: list[str] = Field(default_factory=list)
    results: Optional[str] = None
    views: int
    likes: int
    priority: int
    is_published: bool
    created_by: Optional[UserSummary] = None
    created_at: datetime
    updated_at: datetime


class ProjectCounter(CamelModel):
    views: Optional[int] = None
    likes: Optional[int] = None


class GithubRepository(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    url: str
    homepage: Optional[str] = None
    stars: int = 0
    forks: int = 0
    language: Optional[str] = None
    topics: list[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
