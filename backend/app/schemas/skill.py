"""Pydantic schemas for skills."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from ..enums import SkillCategory
from .common import CamelModel, SanitizedInput
from .user import UserSummary


class SkillCreate(SanitizedInput):
    name: str = Field(..., min_length=1, max_length=50)
    category: SkillCategory = SkillCategory.OTHER
    proficiency: int = Field(default=50, ge=0, le=100)
    icon: Optional[str] = Field(default=None, max_length=120)
    color: str = Field(default="#3B82F6", max_length=16)
    years_of_experience: int = Field(default=0, ge=0)
    description: Optional[str] = Field(default=None, max_length=500)
    is_active: bool = True
    order: int = 0


class SkillUpdate(SanitizedInput):
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    category: Optional[SkillCategory] = None
    proficiency: Optional[int] = Field(default=None, ge=0, le=100)
    icon: Optional[str] = Field(default=None, max_length=120)
    color: Optional[str] = Field(default=None, max_length=16)
    years_of_experience: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = Field(default=None, max_length=500)
    is_active: Optional[bool] = None
    order: Optional[int] = None


class SkillRead(CamelModel):
    id: str
    name: str
    category: SkillCategory
    proficiency: int
    icon: Optional[str] = None
    color: str
    years_of_experience: int
    description: Optional[str] = None
    is_active: bool
    order: int
    created_by: Optional[UserSummary] = None
    created_at: datetime
    updated_at: datetime


class SkillOrder(CamelModel):
    id: str
    order: int


class SkillReorderRequest(CamelModel):
    skills: list[SkillOrder] = Field(..., min_length=1)
