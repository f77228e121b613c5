"""FastAPI application package for the portfolio backend."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from fastapi import FastAPI


def get_app() -> "FastAPI":
    """Return the FastAPI application without importing it eagerly."""

    from .main import app as fastapi_app

    return fastapi_app


def __getattr__(name: str) -> Any:
    # ``uvicorn backend.app:app`` resolves the application lazily so Alembic
    # can import the models package without building the API.
    if name == "app":
        return get_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["app", "get_app"]
