from typing import Any, Dict, List, Optional
from asyncpg import Pool

from .base import check_rating, store_errors


class RatingRepository:
    def __init__(self, db: Pool):
        self.db = db

    async def upsert_rating(self, user_id: int, movie_id: int, rating: int) -> Dict[str, Any]:
        check_rating(rating)
        query = """
            INSERT INTO ratings (user_id, movie_id, rating, created_at, updated_at)
            VALUES ($1, $2, $3, NOW(), NOW())
            ON CONFLICT (user_id, movie_id) DO UPDATE SET
                rating = EXCLUDED.rating,
                updated_at = NOW()
            RETURNING user_id, movie_id, rating, created_at, updated_at
        """
        with store_errors("upsert_rating"):
            row = await self.db.fetchrow(query, user_id, movie_id, rating)
        return dict(row)

    async def list_ratings(self, user_id: int, min_rating: Optional[int] = None) -> List[Dict[str, Any]]:
        if min_rating is None:
            query = """
                SELECT user_id, movie_id, rating, created_at, updated_at
                FROM ratings
                WHERE user_id = $1
            """
            args = (user_id,)
        else:
            query = """
                SELECT user_id, movie_id, rating, created_at, updated_at
                FROM ratings
                WHERE user_id = $1 AND rating >= $2
            """
            args = (user_id, min_rating)

        with store_errors("list_ratings"):
            rows = await self.db.fetch(query, *args)
        return [dict(row) for row in rows]
