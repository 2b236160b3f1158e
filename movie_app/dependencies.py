import logging
from typing import Optional

import asyncpg
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError

from .clients.tmdb_client import TMDBClient
from .config import Settings
from .core.security import decode_access_token
from .db import create_pool, init_schema
from .repositories.rating_repository import RatingRepository
from .repositories.user_repository import UserRepository
from .repositories.watchlist_repository import WatchlistRepository

logger = logging.getLogger(__name__)


# Connections shared by all requests
class AppState:
    pg_pool: Optional[asyncpg.Pool] = None
    tmdb_client: Optional[TMDBClient] = None


state = AppState()


async def init_resources(settings: Settings):
    """Initialize all resources"""
    # fails fast when TMDB_API_KEY is missing
    state.tmdb_client = TMDBClient(settings)
    state.pg_pool = await create_pool(settings)
    await init_schema(state.pg_pool)
    logger.info("All connections initialized")


async def close_resources():
    """Close all resources"""
    if state.tmdb_client:
        await state.tmdb_client.aclose()
    if state.pg_pool:
        await state.pg_pool.close()
    logger.info("All connections closed")


# Dependencies
def get_app_settings(request: Request) -> Settings:
    """The Settings instance the running app was built with."""
    return request.app.state.settings


async def get_db_pool() -> asyncpg.Pool:
    return state.pg_pool


async def get_tmdb_client() -> TMDBClient:
    return state.tmdb_client


async def get_rating_store(db=Depends(get_db_pool)) -> RatingRepository:
    return RatingRepository(db)


async def get_watchlist_store(db=Depends(get_db_pool)) -> WatchlistRepository:
    return WatchlistRepository(db)


async def get_user_repository(db=Depends(get_db_pool)) -> UserRepository:
    return UserRepository(db)


# Auth Dependencies
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/users/login")


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    user_repo: UserRepository = Depends(get_user_repository),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_access_token(token, settings.SECRET_KEY, settings.ALGORITHM)
        subject = payload.get("sub")
        if subject is None:
            raise credentials_exception
        user_id = int(subject)
    except (JWTError, ValueError):
        raise credentials_exception

    user = await user_repo.get_by_id(user_id)
    if user is None or not user["is_active"]:
        raise credentials_exception
    return user
