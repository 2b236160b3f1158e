from datetime import datetime, timezone

import pytest
from httpx import AsyncClient, ASGITransport
from unittest.mock import AsyncMock

from movie_app.config import Settings
from movie_app.core.security import create_access_token, get_password_hash
from movie_app.dependencies import get_user_repository
from movie_app.main import create_app


@pytest.mark.asyncio
async def test_register_login_and_profile_flow(client: AsyncClient, mock_user_repo: AsyncMock):
    state = {"registered": False}
    hashed = get_password_hash("securepassword")
    stored = {
        "id": 1,
        "username": "integrationuser",
        "email": "integration@example.com",
        "hashed_password": hashed,
        "is_active": True,
        "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
    }

    async def get_by_username(username):
        return stored if state["registered"] and username == "integrationuser" else None

    mock_user_repo.get_by_username.side_effect = get_by_username
    mock_user_repo.get_by_email.return_value = None
    mock_user_repo.create_user.return_value = 1
    mock_user_repo.get_by_id.return_value = stored

    # 1. Register
    reg_response = await client.post("/api/users", json={
        "username": "integrationuser",
        "email": "integration@example.com",
        "password": "securepassword"
    })
    assert reg_response.status_code == 201
    assert reg_response.json()["username"] == "integrationuser"

    state["registered"] = True

    # 2. Login
    login_response = await client.post("/api/users/login", data={
        "username": "integrationuser",
        "password": "securepassword"
    })
    assert login_response.status_code == 200
    token_data = login_response.json()
    assert token_data["token_type"] == "bearer"

    # 3. Profile with the issued token
    profile = await client.get(
        "/api/users/profile",
        headers={"Authorization": f"Bearer {token_data['access_token']}"}
    )
    assert profile.status_code == 200
    body = profile.json()
    assert body["username"] == "integrationuser"
    assert "hashed_password" not in body
    mock_user_repo.get_by_id.assert_awaited_with(1)


@pytest.mark.asyncio
async def test_login_invalid_credentials(client: AsyncClient, mock_user_repo: AsyncMock):
    mock_user_repo.get_by_username.return_value = None

    login_response = await client.post("/api/users/login", data={
        "username": "nonexistent",
        "password": "wrongpassword"
    })
    assert login_response.status_code == 401


@pytest.mark.asyncio
async def test_private_route_requires_token(client: AsyncClient):
    response = await client.get("/api/movies/user/watchlist")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_private_route_rejects_garbage_token(client: AsyncClient):
    response = await client.get(
        "/api/movies/user/ratings",
        headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_accepts_json_credentials(client: AsyncClient, mock_user_repo: AsyncMock):
    mock_user_repo.get_by_username.return_value = {
        "id": 3,
        "username": "jsonuser",
        "hashed_password": get_password_hash("securepassword"),
    }

    response = await client.post("/api/users/login", json={
        "username": "jsonuser",
        "password": "securepassword"
    })

    assert response.status_code == 200
    assert response.json()["token_type"] == "bearer"


@pytest.mark.asyncio
async def test_login_json_missing_password(client: AsyncClient):
    response = await client.post("/api/users/login", json={"username": "jsonuser"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_app_uses_the_settings_it_was_built_with():
    settings = Settings(TMDB_API_KEY="k", SECRET_KEY="custom-secret")
    custom_app = create_app(settings)
    user_repo = AsyncMock()
    user_repo.get_by_id.return_value = {
        "id": 1,
        "username": "customuser",
        "email": "custom@example.com",
        "hashed_password": "x",
        "is_active": True,
        "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
    }
    custom_app.dependency_overrides[get_user_repository] = lambda: user_repo

    good = create_access_token({"sub": "1"}, "custom-secret", settings.ALGORITHM)
    other = create_access_token({"sub": "1"}, "some-other-secret", settings.ALGORITHM)

    async with AsyncClient(transport=ASGITransport(app=custom_app), base_url="http://test") as ac:
        accepted = await ac.get("/api/users/profile", headers={"Authorization": f"Bearer {good}"})
        rejected = await ac.get("/api/users/profile", headers={"Authorization": f"Bearer {other}"})

    assert accepted.status_code == 200
    assert accepted.json()["username"] == "customuser"
    assert rejected.status_code == 401
