import os

os.environ.setdefault("TMDB_API_KEY", "test-api-key")
os.environ.setdefault("SECRET_KEY", "test-secret")

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from movie_app.clients.tmdb_client import TMDBClient
from movie_app.dependencies import (
    get_current_user,
    get_rating_store,
    get_tmdb_client,
    get_user_repository,
    get_watchlist_store,
)
from movie_app.exceptions import NotFound
from movie_app.main import app
from movie_app.repositories.base import check_rating


class InMemoryRatingStore:
    """Dict keyed by (user_id, movie_id); same contract as RatingRepository."""

    def __init__(self):
        self.rows: Dict[tuple, Dict[str, Any]] = {}

    async def upsert_rating(self, user_id: int, movie_id: int, rating: int) -> Dict[str, Any]:
        check_rating(rating)
        now = datetime.now(timezone.utc)
        key = (user_id, movie_id)
        row = self.rows.get(key)
        if row is None:
            row = {"user_id": user_id, "movie_id": movie_id, "created_at": now}
            self.rows[key] = row
        row.update(rating=rating, updated_at=now)
        return dict(row)

    async def list_ratings(self, user_id: int, min_rating: Optional[int] = None) -> List[Dict[str, Any]]:
        return [
            dict(row) for (uid, _), row in self.rows.items()
            if uid == user_id and (min_rating is None or row["rating"] >= min_rating)
        ]


class InMemoryWatchlistStore:
    def __init__(self):
        self.rows: Dict[tuple, Dict[str, Any]] = {}

    async def upsert_entry(self, user_id: int, movie_id: int, title: str, poster_path: Optional[str]) -> Dict[str, Any]:
        row = {
            "user_id": user_id,
            "movie_id": movie_id,
            "title": title,
            "poster_path": poster_path,
            "added_at": datetime.now(timezone.utc),
        }
        self.rows[(user_id, movie_id)] = row
        return dict(row)

    async def remove_entry(self, user_id: int, movie_id: int) -> bool:
        if self.rows.pop((user_id, movie_id), None) is None:
            raise NotFound("Movie not found in watchlist")
        return True

    async def list_entries(self, user_id: int) -> List[Dict[str, Any]]:
        return [dict(row) for (uid, _), row in self.rows.items() if uid == user_id]


TEST_USER = {
    "id": 1,
    "username": "testuser",
    "email": "test@example.com",
    "hashed_password": "x",
    "is_active": True,
    "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
}


@pytest.fixture
def rating_store():
    return InMemoryRatingStore()


@pytest.fixture
def watchlist_store():
    return InMemoryWatchlistStore()


@pytest.fixture
def mock_tmdb():
    return AsyncMock(spec=TMDBClient)


@pytest.fixture
def mock_user_repo():
    return AsyncMock()


@pytest_asyncio.fixture
async def client(mock_tmdb, rating_store, watchlist_store, mock_user_repo):
    # Override dependencies
    app.dependency_overrides[get_tmdb_client] = lambda: mock_tmdb
    app.dependency_overrides[get_rating_store] = lambda: rating_store
    app.dependency_overrides[get_watchlist_store] = lambda: watchlist_store
    app.dependency_overrides[get_user_repository] = lambda: mock_user_repo

    from movie_app.limiter import limiter
    limiter.enabled = False
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    limiter.enabled = True

    app.dependency_overrides = {}


@pytest_asyncio.fixture
async def auth_client(client):
    """Client whose requests resolve to TEST_USER."""
    app.dependency_overrides[get_current_user] = lambda: TEST_USER
    yield client
