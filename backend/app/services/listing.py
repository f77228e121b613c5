"""Shared listing pipeline for projects, messages and skills.

A list call flows through four steps before touching the database: the
visibility policy yields a baseline predicate for the caller's role, the
filter builder merges explicit filters into it, the sort resolver produces a
deterministic ordering and the pagination calculator validates the window.
``ResourceLister`` then asks a ``ResourceStore`` for the total count and the
windowed page, both evaluated against the same merged predicate.
"""

from __future__ import annotations

import enum
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Protocol, Sequence

from sqlalchemy import String, and_, cast, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import models
from ..config import ListingConfig, ResourcePolicy
from ..enums import CallerRole, ResourceKind

LOGGER = logging.getLogger(__name__)

DEFAULT_SORT_FIELD = "createdAt"
DEFAULT_SORT_ORDER = "desc"
TIE_BREAK_FIELD = "id"
PUBLISHED_ALL = "all"


class ListingError(ValueError):
    """Base class for request validation failures in the listing pipeline."""


class InvalidFilterField(ListingError):
    def __init__(self, field_name: str, reason: str | None = None) -> None:
        self.field_name = field_name
        message = reason or f"Filtering by '{field_name}' is not allowed"
        super().__init__(message)


class InvalidSortField(ListingError):
    def __init__(self, field_name: str) -> None:
        self.field_name = field_name
        super().__init__(f"Sorting by '{field_name}' is not allowed")


class InvalidSortOrder(ListingError):
    def __init__(self, order: str) -> None:
        self.order = order
        super().__init__(f"Sort order must be 'asc' or 'desc', got '{order}'")


class InvalidPagination(ListingError):
    pass


class BackendUnavailable(RuntimeError):
    """Raised when the persistence layer fails or times out during a listing."""


@dataclass(frozen=True)
class Clause:
    """Equality condition on a single field.

    Forced clauses come from the visibility policy and cannot be overridden
    by caller-supplied filters on the same field.
    """

    field: str
    value: Any
    forced: bool = False


@dataclass(frozen=True)
class TextSearch:
    term: str
    fields: tuple[str, ...]


@dataclass(frozen=True)
class Predicate:
    clauses: tuple[Clause, ...] = ()
    search: Optional[TextSearch] = None

    def forced_fields(self) -> set[str]:
        return {clause.field for clause in self.clauses if clause.forced}

    def values_for(self, field_name: str) -> list[Any]:
        return [clause.value for clause in self.clauses if clause.field == field_name]


@dataclass(frozen=True)
class SortKey:
    field: str
    descending: bool


@dataclass(frozen=True)
class OrderSpec:
    keys: tuple[SortKey, ...]

    @property
    def primary(self) -> SortKey:
        return self.keys[0]


@dataclass(frozen=True)
class PageWindow:
    page: int
    limit: int
    total: int
    pages: int
    skip: int

    def as_dict(self) -> dict[str, int]:
        return {"page": self.page, "limit": self.limit, "total": self.total, "pages": self.pages}


@dataclass
class ListRequest:
    """Raw listing parameters as received from the caller."""

    page: int = 1
    limit: Optional[int] = None
    sort_by: Optional[str] = None
    order: Optional[str] = None
    filters: Mapping[str, Any] = field(default_factory=dict)
    search: Optional[str] = None
    published: Optional[str] = None


@dataclass
class ListResult:
    items: Sequence[Any]
    pagination: PageWindow


class ResourceStore(Protocol):
    """Persistence collaborator used by :class:`ResourceLister`."""

    def count(self, kind: ResourceKind, predicate: Predicate) -> int:
        ...

    def find(
        self,
        kind: ResourceKind,
        predicate: Predicate,
        order: OrderSpec,
        skip: int,
        limit: int,
    ) -> Sequence[Any]:
        ...


def _is_admin(role: Optional[CallerRole]) -> bool:
    return role == CallerRole.ADMIN


class VisibilityPolicy:
    """Baseline predicates restricting which records a caller may list."""

    @staticmethod
    def base_predicate(
        kind: ResourceKind,
        role: Optional[CallerRole],
        *,
        published: Optional[str] = None,
    ) -> Predicate:
        if kind is ResourceKind.PROJECT:
            if not _is_admin(role):
                return Predicate(clauses=(Clause("isPublished", True, forced=True),))
            return Predicate(clauses=VisibilityPolicy._admin_published_clauses(published))
        if kind is ResourceKind.MESSAGE:
            return Predicate(clauses=(Clause("isSpam", False, forced=True),))
        return Predicate()

    @staticmethod
    def _admin_published_clauses(published: Optional[str]) -> tuple[Clause, ...]:
        # Admins default to published projects, matching the public listing.
        normalized = (published or "true").strip().lower()
        if normalized == PUBLISHED_ALL:
            return ()
        if normalized in {"true", "false"}:
            return (Clause("isPublished", normalized == "true"),)
        raise InvalidFilterField(
            "isPublished", "isPublished must be one of 'true', 'false' or 'all'"
        )


def _coerce(field_name: str, raw: Any, declared: type) -> Any:
    if declared is bool:
        if isinstance(raw, bool):
            return raw
        normalized = str(raw).strip().lower()
        if normalized in {"true", "false"}:
            return normalized == "true"
        raise InvalidFilterField(field_name, f"Filter '{field_name}' must be 'true' or 'false'")
    if declared is int:
        if isinstance(raw, bool):
            raise InvalidFilterField(field_name, f"Filter '{field_name}' must be an integer")
        try:
            return int(str(raw).strip())
        except ValueError as exc:
            raise InvalidFilterField(
                field_name, f"Filter '{field_name}' must be an integer"
            ) from exc
    if isinstance(declared, type) and issubclass(declared, enum.Enum):
        try:
            return declared(raw)
        except ValueError as exc:
            allowed = ", ".join(member.value for member in declared)
            raise InvalidFilterField(
                field_name, f"Filter '{field_name}' must be one of: {allowed}"
            ) from exc
    return declared(raw)


class FilterBuilder:
    @staticmethod
    def build_predicate(
        policy: ResourcePolicy,
        raw_filters: Mapping[str, Any],
        base: Predicate,
    ) -> Predicate:
        """Merge caller filters into ``base``.

        Unknown fields raise :class:`InvalidFilterField`. Caller clauses on a
        field the base predicate forces are discarded; any other overlap is
        kept so both conditions apply.
        """

        unknown = sorted(name for name in raw_filters if name not in policy.filter_fields)
        if unknown:
            raise InvalidFilterField(unknown[0])

        forced = base.forced_fields()
        clauses = list(base.clauses)
        for name, raw in raw_filters.items():
            if raw is None or (isinstance(raw, str) and not raw.strip()):
                continue
            value = _coerce(name, raw, policy.filter_fields[name])
            if name in forced:
                continue
            clauses.append(Clause(name, value))
        return Predicate(clauses=tuple(clauses), search=base.search)


class SortResolver:
    @staticmethod
    def resolve_sort(
        policy: ResourcePolicy,
        sort_by: Optional[str],
        order: Optional[str],
    ) -> OrderSpec:
        field_name = sort_by or DEFAULT_SORT_FIELD
        direction = (order or DEFAULT_SORT_ORDER).strip().lower()
        if field_name not in policy.sort_fields:
            raise InvalidSortField(field_name)
        if direction not in {"asc", "desc"}:
            raise InvalidSortOrder(order or "")
        return SortResolver.with_tie_breaks(SortKey(field_name, direction == "desc"))

    @staticmethod
    def with_tie_breaks(*keys: SortKey) -> OrderSpec:
        """Append ``createdAt desc`` and ``id asc`` unless already present."""

        resolved = list(keys)
        fields = {key.field for key in resolved}
        if DEFAULT_SORT_FIELD not in fields:
            resolved.append(SortKey(DEFAULT_SORT_FIELD, True))
        if TIE_BREAK_FIELD not in fields:
            resolved.append(SortKey(TIE_BREAK_FIELD, False))
        return OrderSpec(keys=tuple(resolved))

    @staticmethod
    def featured_order() -> OrderSpec:
        return SortResolver.with_tie_breaks(SortKey("priority", True))


def validate_window(page: int, limit: int) -> None:
    if page < 1:
        raise InvalidPagination("page must be greater than or equal to 1")
    if limit < 1:
        raise InvalidPagination("limit must be greater than or equal to 1")


def paginate(page: int, limit: int, total: int) -> PageWindow:
    validate_window(page, limit)
    if total < 0:
        raise InvalidPagination("total must not be negative")
    return PageWindow(
        page=page,
        limit=limit,
        total=total,
        pages=math.ceil(total / limit),
        skip=(page - 1) * limit,
    )


class ResourceLister:
    """Compose visibility, filtering, sorting and pagination for list calls."""

    def __init__(self, config: ListingConfig, store: ResourceStore) -> None:
        self.config = config
        self.store = store

    def list(
        self,
        kind: ResourceKind,
        request: ListRequest,
        caller_role: Optional[CallerRole] = None,
        *,
        order: Optional[OrderSpec] = None,
    ) -> ListResult:
        policy = self.config.policy(kind)

        base = VisibilityPolicy.base_predicate(kind, caller_role, published=request.published)
        if request.search and request.search.strip():
            base = Predicate(
                clauses=base.clauses,
                search=TextSearch(request.search.strip(), policy.search_fields),
            )
        predicate = FilterBuilder.build_predicate(policy, request.filters, base)
        order_spec = order or SortResolver.resolve_sort(policy, request.sort_by, request.order)

        limit = policy.default_limit if request.limit is None else request.limit
        validate_window(request.page, limit)
        limit = min(limit, self.config.max_limit)

        try:
            total = self.store.count(kind, predicate)
            window = paginate(request.page, limit, total)
            items = self.store.find(kind, predicate, order_spec, window.skip, window.limit)
        except (SQLAlchemyError, TimeoutError) as exc:
            LOGGER.exception("Listing %s failed in the persistence layer", kind.value)
            raise BackendUnavailable(f"Unable to list {kind.value} records") from exc

        LOGGER.debug(
            "Listed %s page=%s limit=%s total=%s returned=%s",
            kind.value,
            window.page,
            window.limit,
            window.total,
            len(items),
        )
        return ListResult(items=list(items), pagination=window)


_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")

MODELS_BY_KIND: dict[ResourceKind, type] = {
    ResourceKind.PROJECT: models.Project,
    ResourceKind.MESSAGE: models.Message,
    ResourceKind.SKILL: models.Skill,
}


def attribute_name(field_name: str) -> str:
    """Translate an API field name (``isPublished``) to a model attribute."""

    return _CAMEL_BOUNDARY.sub("_", field_name).lower()


def escape_like(term: str) -> str:
    """Escape ``LIKE`` wildcards so ``term`` only matches literally."""

    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SqlAlchemyStore:
    """:class:`ResourceStore` backed by a SQLAlchemy session."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def _column(self, kind: ResourceKind, field_name: str):
        model = MODELS_BY_KIND[kind]
        column = getattr(model, attribute_name(field_name), None)
        if column is None:
            raise InvalidFilterField(field_name, f"Unknown field '{field_name}'")
        return column

    def _query(self, kind: ResourceKind, predicate: Predicate):
        query = self.db.query(MODELS_BY_KIND[kind])
        conditions = [
            self._column(kind, clause.field) == clause.value for clause in predicate.clauses
        ]
        if conditions:
            query = query.filter(and_(*conditions))
        if predicate.search is not None:
            pattern = f"%{escape_like(predicate.search.term.lower())}%"
            query = query.filter(
                or_(
                    *(
                        cast(self._column(kind, name), String).ilike(pattern, escape="\\")
                        for name in predicate.search.fields
                    )
                )
            )
        return query

    def count(self, kind: ResourceKind, predicate: Predicate) -> int:
        return self._query(kind, predicate).count()

    def find(
        self,
        kind: ResourceKind,
        predicate: Predicate,
        order: OrderSpec,
        skip: int,
        limit: int,
    ) -> Sequence[Any]:
        ordering = []
        for key in order.keys:
            column = self._column(kind, key.field)
            ordering.append(column.desc() if key.descending else column.asc())
        return self._query(kind, predicate).order_by(*ordering).offset(skip).limit(limit).all()
