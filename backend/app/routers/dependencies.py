"""Dependencies shared by the resource routers."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Iterable, Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from ..config import get_listing_config
from ..database import get_db
from ..services import (
    GithubClient,
    ListRequest,
    ListResult,
    MessageNotifier,
    NotificationClient,
    ResourceLister,
    SqlAlchemyStore,
    build_notification_client_from_env,
)

# Query parameters consumed by the listing endpoints themselves; anything
# else is treated as a field filter and checked against the allow-list.
RESERVED_LIST_PARAMS = frozenset({"page", "limit", "sortBy", "order", "search"})

# The projects listing also takes the admin visibility switch.
PROJECT_LIST_PARAMS = RESERVED_LIST_PARAMS | {"isPublished"}


def get_lister(db: Session = Depends(get_db)) -> ResourceLister:
    return ResourceLister(get_listing_config(), SqlAlchemyStore(db))


@lru_cache(maxsize=1)
def _default_notification_client() -> NotificationClient:
    return build_notification_client_from_env()


def get_notifier() -> MessageNotifier:
    return MessageNotifier(_default_notification_client())


def get_github_client() -> GithubClient:
    return GithubClient.from_env()


def extract_filters(request: Request, reserved: Iterable[str] = RESERVED_LIST_PARAMS) -> dict[str, Any]:
    excluded = set(reserved)
    return {
        key: value for key, value in request.query_params.items() if key not in excluded
    }


def build_list_request(
    request: Request,
    *,
    page: int,
    limit: Optional[int],
    sort_by: Optional[str],
    order: Optional[str],
    search: Optional[str] = None,
    published: Optional[str] = None,
    filters: Optional[dict[str, Any]] = None,
    reserved: Iterable[str] = RESERVED_LIST_PARAMS,
) -> ListRequest:
    return ListRequest(
        page=page,
        limit=limit,
        sort_by=sort_by,
        order=order,
        filters=extract_filters(request, reserved) if filters is None else filters,
        search=search,
        published=published,
    )


def list_payload(result: ListResult, *, paginated: bool = True) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "success": True,
        "count": len(result.items),
        "data": result.items,
    }
    if paginated:
        payload["pagination"] = result.pagination.as_dict()
    return payload
