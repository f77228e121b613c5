"""Shared schema definitions."""

from __future__ import annotations

import re
from typing import Any, Generic, Optional, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")

_SCRIPT_BLOCK = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)


def sanitize_text(value: str) -> str:
    """Trim whitespace and drop inline ``<script>`` blocks."""

    return _SCRIPT_BLOCK.sub("", value.strip())


def _sanitize(value: Any) -> Any:
    if isinstance(value, str):
        return sanitize_text(value)
    if isinstance(value, list):
        return [_sanitize(item) for item in value]
    if isinstance(value, dict):
        return {key: _sanitize(item) for key, item in value.items()}
    return value


class CamelModel(BaseModel):
    """Base model exposing camelCase field names on the wire."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class SanitizedInput(CamelModel):
    """Request payload whose string values are sanitised before validation."""

    @field_validator("*", mode="before")
    @classmethod
    def _sanitize_strings(cls, value: Any) -> Any:
        return _sanitize(value)


class PaginationMeta(BaseModel):
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    total: int = Field(..., ge=0)
    pages: int = Field(..., ge=0)


class DataResponse(BaseModel, Generic[T]):
    """Standard success envelope for single-record responses."""

    success: bool = True
    message: Optional[str] = None
    data: T


class ListResponse(BaseModel, Generic[T]):
    """Standard shape for listings, paginated or not."""

    success: bool = True
    count: Optional[int] = None
    data: Sequence[T]
    pagination: Optional[PaginationMeta] = None


class ActionResponse(BaseModel):
    success: bool = True
    message: str


class ErrorDetail(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    error: Optional[str] = None
    errors: Optional[list[ErrorDetail]] = None
