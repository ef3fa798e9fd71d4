from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from backend.app.main import create_app
from leaderboard.config import get_settings

ADMIN_KEY = "test-admin-key"
ADMIN_SECRET = "test-admin-secret"


@pytest.fixture
def test_app_client(test_db, monkeypatch) -> Iterator[tuple[TestClient, sessionmaker]]:
    _, TestingSessionLocal, _ = test_db
    monkeypatch.setenv("LEADERBOARD_ADMIN_API_KEY", ADMIN_KEY)
    monkeypatch.setenv("LEADERBOARD_ADMIN_API_SECRET", ADMIN_SECRET)
    get_settings.cache_clear()

    app = create_app()

    # Entering the client runs the lifespan, which registers the admin application
    with TestClient(app) as client:
        yield client, TestingSessionLocal


def _bearer(client: TestClient, key: str, secret: str) -> dict[str, str]:
    resp = client.post("/api/v1/authenticate", auth=(key, secret))
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
def admin_credentials() -> tuple[str, str]:
    """Key and secret of the admin application registered on startup."""
    return ADMIN_KEY, ADMIN_SECRET


@pytest.fixture
def admin_headers(test_app_client) -> dict[str, str]:
    client, _ = test_app_client
    return _bearer(client, ADMIN_KEY, ADMIN_SECRET)


@pytest.fixture
def app_credentials(test_app_client, admin_headers) -> tuple[str, str]:
    """Key and secret of a regular (non-admin) application."""
    client, _ = test_app_client
    resp = client.post("/api/v1/applications", json={"name": "Game Client"}, headers=admin_headers)
    assert resp.status_code == 201, resp.text
    body = resp.json()
    return body["key"], body["secret"]


@pytest.fixture
def app_headers(test_app_client, app_credentials) -> dict[str, str]:
    client, _ = test_app_client
    return _bearer(client, *app_credentials)


@pytest.fixture
def race_board_id(test_app_client, admin_headers) -> int:
    """Board ranked by points (higher first), then time (lower first)."""
    client, _ = test_app_client
    resp = client.post(
        "/api/v1/boards",
        json={
            "name": "Race",
            "fields": {
                "points": {"sort_order": 0, "sort_descending": True},
                "time": {"sort_order": 1, "sort_descending": False},
            },
        },
        headers=admin_headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["id"]


@pytest.fixture
def contestant_ids(test_app_client, app_headers) -> list[int]:
    client, _ = test_app_client
    ids = []
    for name in ("alice", "bob", "carol"):
        resp = client.post("/api/v1/contestants", json={"name": name}, headers=app_headers)
        assert resp.status_code == 201, resp.text
        ids.append(resp.json()["id"])
    return ids
