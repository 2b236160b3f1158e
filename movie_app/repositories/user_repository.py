import asyncpg
from asyncpg import Pool
from typing import Optional

from ..exceptions import ValidationError
from .base import store_errors

USER_COLUMNS = "id, username, email, hashed_password, is_active, created_at"


class UserRepository:
    def __init__(self, db: Pool):
        self.db = db

    async def get_by_id(self, user_id: int) -> Optional[dict]:
        query = f"SELECT {USER_COLUMNS} FROM users WHERE id = $1"
        with store_errors("get_user"):
            row = await self.db.fetchrow(query, user_id)
        return dict(row) if row else None

    async def get_by_username(self, username: str) -> Optional[dict]:
        query = f"SELECT {USER_COLUMNS} FROM users WHERE username = $1"
        with store_errors("get_user"):
            row = await self.db.fetchrow(query, username)
        return dict(row) if row else None

    async def get_by_email(self, email: str) -> Optional[dict]:
        query = f"SELECT {USER_COLUMNS} FROM users WHERE email = $1"
        with store_errors("get_user"):
            row = await self.db.fetchrow(query, email)
        return dict(row) if row else None

    async def create_user(self, username: str, email: str, hashed_password: str) -> int:
        query = """
            INSERT INTO users (username, email, hashed_password, is_active, created_at)
            VALUES ($1, $2, $3, TRUE, NOW())
            RETURNING id
        """
        with store_errors("create_user"):
            try:
                user_id = await self.db.fetchval(query, username, email, hashed_password)
            except asyncpg.UniqueViolationError as e:
                # lost a race with a concurrent registration
                raise ValidationError("Username or email already registered") from e
        return user_id
