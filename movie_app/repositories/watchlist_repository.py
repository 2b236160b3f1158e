from typing import Any, Dict, List, Optional
from asyncpg import Pool

from ..exceptions import NotFound
from .base import store_errors


class WatchlistRepository:
    def __init__(self, db: Pool):
        self.db = db

    async def upsert_entry(
        self, user_id: int, movie_id: int, title: str, poster_path: Optional[str]
    ) -> Dict[str, Any]:
        query = """
            INSERT INTO watchlist (user_id, movie_id, title, poster_path, added_at)
            VALUES ($1, $2, $3, $4, NOW())
            ON CONFLICT (user_id, movie_id) DO UPDATE SET
                title = EXCLUDED.title,
                poster_path = EXCLUDED.poster_path,
                added_at = NOW()
            RETURNING user_id, movie_id, title, poster_path, added_at
        """
        with store_errors("upsert_entry"):
            row = await self.db.fetchrow(query, user_id, movie_id, title, poster_path)
        return dict(row)

    async def remove_entry(self, user_id: int, movie_id: int) -> bool:
        query = """
            DELETE FROM watchlist
            WHERE user_id = $1 AND movie_id = $2
            RETURNING movie_id
        """
        with store_errors("remove_entry"):
            deleted = await self.db.fetchval(query, user_id, movie_id)
        if deleted is None:
            raise NotFound("Movie not found in watchlist")
        return True

    async def list_entries(self, user_id: int) -> List[Dict[str, Any]]:
        query = """
            SELECT user_id, movie_id, title, poster_path, added_at
            FROM watchlist
            WHERE user_id = $1
            ORDER BY added_at DESC
        """
        with store_errors("list_entries"):
            rows = await self.db.fetch(query, user_id)
        return [dict(row) for row in rows]
