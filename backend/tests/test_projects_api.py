from __future__ import annotations

import httpx
import pytest

from backend.app import models
from backend.app.enums import ProjectCategory
from backend.app.main import app
from backend.app.routers.dependencies import get_github_client
from backend.app.services import GithubClient


@pytest.fixture
def catalogue(make_project):
    """23 published projects (6 of them Frontend) and 2 unpublished ones."""

    projects = []
    for index in range(23):
        category = ProjectCategory.FRONTEND if index < 6 else ProjectCategory.BACKEND
        projects.append(make_project(category=category))
    projects.append(make_project(is_published=False, category=ProjectCategory.FRONTEND))
    projects.append(make_project(is_published=False))
    return projects


def test_anonymous_listing_only_returns_published_projects(client, catalogue):
    response = client.get("/api/projects/", params={"page": 1, "limit": 10})

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert len(payload["data"]) == 10
    assert payload["count"] == 10
    assert payload["pagination"] == {"page": 1, "limit": 10, "total": 23, "pages": 3}
    assert all(item["isPublished"] for item in payload["data"])


def test_anonymous_cannot_widen_visibility_with_is_published(client, user_client, catalogue):
    for caller in (client, user_client):
        for value in ("all", "false"):
            response = caller.get("/api/projects/", params={"isPublished": value, "limit": 50})
            assert response.status_code == 200
            payload = response.json()
            assert payload["pagination"]["total"] == 23
            assert all(item["isPublished"] for item in payload["data"])


def test_admin_listing_honours_is_published_switch(admin_client, catalogue):
    everything = admin_client.get("/api/projects/", params={"limit": 10, "isPublished": "all"})
    drafts = admin_client.get("/api/projects/", params={"isPublished": "false"})
    default = admin_client.get("/api/projects/")

    assert everything.json()["pagination"]["total"] == 25
    assert drafts.json()["pagination"]["total"] == 2
    assert default.json()["pagination"]["total"] == 23


def test_listing_is_newest_first_by_default(client, catalogue):
    payload = client.get("/api/projects/", params={"limit": 3}).json()

    titles = [item["title"] for item in payload["data"]]
    assert titles == ["Project 23", "Project 22", "Project 21"]


def test_category_filter_fits_on_one_page(client, catalogue):
    by_path = client.get("/api/projects/category/Frontend", params={"limit": 10}).json()
    by_query = client.get("/api/projects/", params={"category": "Frontend", "limit": 10}).json()

    for payload in (by_path, by_query):
        assert payload["pagination"] == {"page": 1, "limit": 10, "total": 6, "pages": 1}
        assert {item["category"] for item in payload["data"]} == {"Frontend"}


def test_page_beyond_last_returns_empty_data(client, catalogue):
    payload = client.get("/api/projects/", params={"page": 9, "limit": 10}).json()

    assert payload["data"] == []
    assert payload["pagination"]["total"] == 23
    assert payload["pagination"]["pages"] == 3


def test_empty_catalogue_reports_zero_pages(client):
    payload = client.get("/api/projects/").json()

    assert payload["data"] == []
    assert payload["pagination"] == {"page": 1, "limit": 10, "total": 0, "pages": 0}


@pytest.mark.parametrize(
    ("params", "fragment"),
    [
        ({"password": "secret"}, "password"),
        ({"sortBy": "passwordHash"}, "passwordHash"),
        ({"order": "sideways"}, "sideways"),
        ({"page": 0}, "page"),
        ({"limit": 0}, "limit"),
        ({"featured": "maybe"}, "featured"),
    ],
)
def test_invalid_listing_parameters_return_400(client, params, fragment):
    response = client.get("/api/projects/", params=params)

    assert response.status_code == 400
    payload = response.json()
    assert payload["success"] is False
    assert fragment in payload["message"]
    assert "error" not in payload


def test_oversized_limit_is_capped(client, catalogue):
    payload = client.get("/api/projects/", params={"limit": 5000}).json()

    assert payload["pagination"]["limit"] == 100
    assert len(payload["data"]) == 23


def test_featured_orders_by_priority_then_newest(client, make_project):
    make_project(title="Low", featured=True, priority=1)
    make_project(title="Old high", featured=True, priority=5)
    make_project(title="Not featured", priority=99)
    make_project(title="New high", featured=True, priority=5)
    make_project(title="Hidden", featured=True, priority=50, is_published=False)

    payload = client.get("/api/projects/featured").json()

    assert [item["title"] for item in payload["data"]] == ["New high", "Old high", "Low"]
    assert "pagination" not in payload or payload["pagination"] is None


def test_featured_respects_limit(client, make_project):
    for _ in range(8):
        make_project(featured=True)

    payload = client.get("/api/projects/featured", params={"limit": 3}).json()

    assert payload["count"] == 3


def test_search_matches_text_fields_case_insensitively(client, make_project):
    make_project(title="React storefront")
    make_project(title="CLI tool", short_description="Built with REACT hooks")
    make_project(title="Data pipeline", tags=["react-native"])
    make_project(title="Secret react draft", is_published=False)
    make_project(title="Unrelated")

    payload = client.get("/api/projects/search", params={"q": "react"}).json()

    assert payload["pagination"]["total"] == 3
    assert {item["title"] for item in payload["data"]} == {
        "React storefront",
        "CLI tool",
        "Data pipeline",
    }


@pytest.mark.parametrize("term, expected", [("%", {"100% uptime"}), ("_", {"snake_case linter"})])
def test_search_treats_wildcards_literally(client, make_project, term, expected):
    make_project(title="100% uptime")
    make_project(title="snake_case linter")
    make_project(title="Plain")

    payload = client.get("/api/projects/search", params={"q": term}).json()

    assert payload["pagination"]["total"] == 1
    assert {item["title"] for item in payload["data"]} == expected


def test_search_requires_a_query(client):
    for params in ({}, {"q": "   "}):
        response = client.get("/api/projects/search", params=params)
        assert response.status_code == 400
        assert response.json()["success"] is False


def test_unpublished_project_is_forbidden_to_non_admins(client, admin_client, make_project):
    draft = make_project(is_published=False)

    assert client.get(f"/api/projects/{draft.id}").status_code == 403
    response = admin_client.get(f"/api/projects/{draft.id}")
    assert response.status_code == 200
    assert response.json()["data"]["id"] == draft.id


def test_missing_project_returns_404(client):
    response = client.get("/api/projects/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Project not found"}


def test_non_ascii_bearer_token_lists_as_anonymous(client, catalogue):
    response = client.get(
        "/api/projects/", headers={"Authorization": "Bearer a\xe9.b.AAAA".encode("latin-1")}
    )

    assert response.status_code == 200
    assert response.json()["pagination"]["total"] == 23


def test_view_and_like_counters_increment(client, make_project, db_session):
    project = make_project()

    assert client.post(f"/api/projects/{project.id}/view").json()["data"]["views"] == 1
    assert client.post(f"/api/projects/{project.id}/view").json()["data"]["views"] == 2
    assert client.post(f"/api/projects/{project.id}/like").json()["data"]["likes"] == 1
    assert client.post("/api/projects/missing/like").status_code == 404

    db_session.expire_all()
    stored = db_session.get(models.Project, project.id)
    assert (stored.views, stored.likes) == (2, 1)


def _new_project_payload(**overrides):
    payload = {
        "title": "  Portfolio API  ",
        "description": "Backend <script>alert('x')</script>for the portfolio",
        "thumbnail": "https://example.com/api.png",
        "technologies": ["FastAPI", "SQLAlchemy"],
        "category": "Backend",
        "githubUrl": "https://github.com/example/portfolio-api",
        "tags": ["api"],
        "priority": 4,
    }
    payload.update(overrides)
    return payload


def test_admin_creates_updates_and_deletes_project(admin_client, admin_user):
    created = admin_client.post("/api/projects/", json=_new_project_payload())

    assert created.status_code == 201
    project = created.json()["data"]
    assert project["title"] == "Portfolio API"
    assert project["description"] == "Backend for the portfolio"
    assert project["createdBy"]["email"] == admin_user.email
    assert project["isPublished"] is True

    updated = admin_client.put(
        f"/api/projects/{project['id']}",
        json={"featured": True, "isPublished": False},
    )
    assert updated.status_code == 200
    assert updated.json()["data"]["featured"] is True
    assert updated.json()["data"]["isPublished"] is False
    assert updated.json()["data"]["title"] == "Portfolio API"

    deleted = admin_client.delete(f"/api/projects/{project['id']}")
    assert deleted.json() == {"success": True, "message": "Project deleted successfully"}
    assert admin_client.get(f"/api/projects/{project['id']}").status_code == 404


def test_project_mutations_require_admin(client, user_client, make_project):
    project = make_project()

    assert client.post("/api/projects/", json=_new_project_payload()).status_code == 401
    forbidden = user_client.post("/api/projects/", json=_new_project_payload())
    assert forbidden.status_code == 403
    assert forbidden.json()["message"] == "User role user is not authorized to access this route"
    assert user_client.delete(f"/api/projects/{project.id}").status_code == 403


def test_invalid_project_payload_lists_field_errors(admin_client):
    response = admin_client.post(
        "/api/projects/",
        json=_new_project_payload(technologies=[], githubUrl="https://gitlab.com/x/y"),
    )

    assert response.status_code == 400
    payload = response.json()
    assert payload["success"] is False
    fields = {error["field"] for error in payload["errors"]}
    assert {"technologies", "githubUrl"} <= fields


def test_github_repositories_are_proxied(client):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/users/octocat/repos"
        assert request.url.params["per_page"] == "2"
        return httpx.Response(
            200,
            json=[
                {
                    "id": 1,
                    "name": "hello-world",
                    "description": "First repo",
                    "html_url": "https://github.com/octocat/hello-world",
                    "homepage": "",
                    "stargazers_count": 7,
                    "forks_count": 2,
                    "language": "Python",
                    "topics": ["demo"],
                    "created_at": "2024-01-01T00:00:00Z",
                    "updated_at": "2024-02-01T00:00:00Z",
                }
            ],
        )

    app.dependency_overrides[get_github_client] = lambda: GithubClient(
        default_username="octocat", transport=httpx.MockTransport(handler)
    )
    response = client.get("/api/projects/github-repos", params={"limit": 2})

    assert response.status_code == 200
    repo = response.json()["data"][0]
    assert repo["name"] == "hello-world"
    assert repo["stars"] == 7
    assert repo["homepage"] is None
    assert repo["url"] == "https://github.com/octocat/hello-world"


def test_github_failures_return_error_envelope(client):
    app.dependency_overrides[get_github_client] = lambda: GithubClient(
        default_username="octocat",
        transport=httpx.MockTransport(lambda request: httpx.Response(503)),
    )

    response = client.get("/api/projects/github-repos")

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "message": "Failed to fetch GitHub repositories",
    }
