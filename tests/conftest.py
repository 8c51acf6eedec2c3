import os

# Settings are read at import time
os.environ.setdefault("JWT_SECRET", "test-secret-key-that-is-at-least-32-characters")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from ranker.config import settings
from ranker.main import app


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "data_dir", tmp_path)
    monkeypatch.setattr(settings, "allow_registration", True)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register(client):
    """Create a user and return auth headers for it."""
    def _register(username, password="hunter22"):
        response = client.post("/api/users/add", json={"username": username, "password": password})
        assert response.status_code == 201, response.text
        response = client.post("/api/users/login", json={"username": username, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}
    return _register


@pytest.fixture
def make_playlist(client):
    def _make_playlist(headers, name="Best of", video_limit=3, does_owner_vote_count=1):
        response = client.post(
            "/api/playlists",
            json={"name": name, "videoLimit": video_limit, "doesOwnerVoteCount": does_owner_vote_count},
            headers=headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["playlist"]
    return _make_playlist
