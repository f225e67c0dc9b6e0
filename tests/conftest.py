"""
Shared fixtures for the test suite.

Every test gets its own application wired to a throwaway SQLite database and
media directory, so tests never touch MySQL or the real ``uploads`` folder.
"""

from collections.abc import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from core.config import Settings
from main import create_app


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        MEDIA_DIR=str(tmp_path / "uploads"),
        BCRYPT_ROUNDS=4,
        SESSION_SECRET="test-secret",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Client whose context runs the lifespan (database, session manager)."""
    with TestClient(app) as c:
        yield c


@pytest.fixture
def other_client(app: FastAPI, client: TestClient) -> TestClient:
    """A second browser sharing the already started application."""
    return TestClient(app)


@pytest.fixture
def db(app: FastAPI, client: TestClient):
    session = app.state.database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


def signup(client: TestClient, username: str = "alice", password: str = "pw123"):
    return client.post("/signup", json={"username": username, "password": password})


REVIEW_FIELDS = {
    "artistId": "27",
    "artistName": "Daft Punk",
    "artistDescription": "French electronic duo",
    "artistPicture": "https://example.com/daftpunk.jpg",
    "albumTitle": "Discovery",
    "trackTitle": "One More Time",
    "trackLength": "5:20",
    "trackArtwork": "/uploads/1-discovery.png",
    "reviewTitle": "Still great",
    "reviewDescription": "Holds up twenty years later.",
    "starRating": 5,
}
