from __future__ import annotations

import pytest

from backend.app.main import RATE_LIMIT_MESSAGE, SECURITY_HEADERS, app, build_limiter


@pytest.fixture
def strict_limiter(monkeypatch):
    monkeypatch.setenv("RATE_LIMIT_REQUESTS", "2")
    monkeypatch.setenv("RATE_LIMIT_WINDOW_MINUTES", "15")
    monkeypatch.delenv("RATE_LIMIT_ENABLED", raising=False)
    limiter = build_limiter()
    monkeypatch.setattr(app.state, "limiter", limiter)
    return limiter


def test_responses_carry_security_headers(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    for name, value in SECURITY_HEADERS.items():
        assert response.headers[name] == value


def test_requests_beyond_the_window_budget_are_rejected(client, strict_limiter):
    assert client.get("/api/health").status_code == 200
    assert client.get("/api/projects/").status_code == 200

    response = client.get("/api/skills/")

    assert response.status_code == 429
    assert response.json() == {"success": False, "message": RATE_LIMIT_MESSAGE}


def test_rate_limiting_can_be_disabled(client, monkeypatch):
    monkeypatch.setenv("RATE_LIMIT_REQUESTS", "1")
    monkeypatch.setenv("RATE_LIMIT_ENABLED", "0")
    monkeypatch.setattr(app.state, "limiter", build_limiter())

    assert [client.get("/api/health").status_code for _ in range(3)] == [200, 200, 200]


@pytest.mark.parametrize("name", ["RATE_LIMIT_REQUESTS", "RATE_LIMIT_WINDOW_MINUTES"])
def test_rate_limit_settings_must_be_positive(monkeypatch, name):
    monkeypatch.setenv(name, "0")

    with pytest.raises(ValueError):
        build_limiter()
