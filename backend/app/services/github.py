"""Read-only proxy for a user's public GitHub repositories."""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

import httpx

LOGGER = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
GITHUB_TOKEN_ENV = "GITHUB_TOKEN"
GITHUB_USERNAME_ENV = "GITHUB_USERNAME"


class GithubClientError(RuntimeError):
    """Raised when repositories cannot be fetched from GitHub."""


class GithubClient:
    def __init__(
        self,
        *,
        token: Optional[str] = None,
        default_username: Optional[str] = None,
        base_url: str = GITHUB_API_URL,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.token = token
        self.default_username = default_username
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_env(cls) -> "GithubClient":
        return cls(
            token=os.getenv(GITHUB_TOKEN_ENV),
            default_username=os.getenv(GITHUB_USERNAME_ENV),
        )

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/vnd.github+json"}
        if self.token:
            headers["Authorization"] = f"token {self.token}"
        return headers

    def list_repositories(self, username: Optional[str] = None, limit: int = 6) -> list[dict[str, Any]]:
        """Return the most recently updated repositories of ``username``."""

        owner = username or self.default_username
        if not owner:
            raise GithubClientError("No GitHub username provided or configured")

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.get(
                    f"{self.base_url}/users/{owner}/repos",
                    params={"sort": "updated", "per_page": limit},
                    headers=self._headers(),
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            LOGGER.warning("GitHub responded %s for %s", exc.response.status_code, owner)
            raise GithubClientError(
                f"GitHub responded with status {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            LOGGER.warning("Unable to reach GitHub: %s", exc)
            raise GithubClientError(f"Unable to reach GitHub: {exc}") from exc

        return [_summarize(repo) for repo in response.json()]


def _summarize(repo: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": repo["id"],
        "name": repo["name"],
        "description": repo.get("description"),
        "url": repo.get("html_url"),
        "homepage": repo.get("homepage") or None,
        "stars": repo.get("stargazers_count", 0),
        "forks": repo.get("forks_count", 0),
        "language": repo.get("language"),
        "topics": repo.get("topics") or [],
        "created_at": repo.get("created_at"),
        "updated_at": repo.get("updated_at"),
    }
