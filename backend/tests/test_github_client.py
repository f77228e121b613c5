from __future__ import annotations

import httpx
import pytest

from backend.app.services import GithubClient, GithubClientError


def _repo(**overrides):
    repo = {
        "id": 42,
        "name": "portfolio",
        "description": None,
        "html_url": "https://github.com/jane/portfolio",
        "homepage": "https://jane.dev",
        "stargazers_count": 3,
        "forks_count": 1,
        "language": "TypeScript",
        "topics": None,
        "created_at": "2024-01-01T00:00:00Z",
        "updated_at": "2024-03-01T00:00:00Z",
        "owner": {"login": "jane"},
    }
    repo.update(overrides)
    return repo


def test_list_repositories_sends_token_and_summarizes():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json=[_repo()])

    client = GithubClient(
        token="ghp_secret", default_username="jane", transport=httpx.MockTransport(handler)
    )

    repos = client.list_repositories(limit=3)

    assert seen["url"] == "https://api.github.com/users/jane/repos?sort=updated&per_page=3"
    assert seen["auth"] == "token ghp_secret"
    assert repos == [
        {
            "id": 42,
            "name": "portfolio",
            "description": None,
            "url": "https://github.com/jane/portfolio",
            "homepage": "https://jane.dev",
            "stars": 3,
            "forks": 1,
            "language": "TypeScript",
            "topics": [],
            "created_at": "2024-01-01T00:00:00Z",
            "updated_at": "2024-03-01T00:00:00Z",
        }
    ]


def test_explicit_username_overrides_default_and_no_token_means_no_auth():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/users/octocat/repos"
        assert "Authorization" not in request.headers
        return httpx.Response(200, json=[])

    client = GithubClient(default_username="jane", transport=httpx.MockTransport(handler))

    assert client.list_repositories("octocat") == []


def test_missing_username_is_an_error():
    with pytest.raises(GithubClientError):
        GithubClient().list_repositories()


def _not_found(request: httpx.Request) -> httpx.Response:
    return httpx.Response(404, json={"message": "Not Found"})


def _offline(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("offline", request=request)


@pytest.mark.parametrize("handler", [_not_found, _offline])
def test_http_failures_become_client_errors(handler):
    client = GithubClient(default_username="jane", transport=httpx.MockTransport(handler))

    with pytest.raises(GithubClientError):
        client.list_repositories()


def test_from_env(monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_env")
    monkeypatch.setenv("GITHUB_USERNAME", "env-user")

    client = GithubClient.from_env()

    assert (client.token, client.default_username) == ("ghp_env", "env-user")
