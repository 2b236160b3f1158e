"""
Store contracts for ratings and watchlist entries.

Both stores are keyed by the compound (user_id, movie_id) key. The backing
store must enforce that key itself and expose an atomic upsert on it, so
that concurrent writes for the same pair end with a single row (last write
wins) without any locking in the application.
"""
from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Protocol

import asyncpg

from ..exceptions import InternalError, ValidationError

MIN_RATING = 1
MAX_RATING = 10


def check_rating(rating: Any) -> None:
    """Raise ValidationError unless rating is an integer within [MIN_RATING, MAX_RATING]."""
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")


@contextmanager
def store_errors(operation: str):
    """Surface database failures as InternalError."""
    try:
        yield
    except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
        raise InternalError(f"Storage failure during {operation}") from e


class RatingStore(Protocol):
    async def upsert_rating(self, user_id: int, movie_id: int, rating: int) -> Dict[str, Any]:
        """Create or overwrite the rating for (user_id, movie_id)."""
        ...

    async def list_ratings(self, user_id: int, min_rating: Optional[int] = None) -> List[Dict[str, Any]]:
        ...


class WatchlistStore(Protocol):
    async def upsert_entry(
        self, user_id: int, movie_id: int, title: str, poster_path: Optional[str]
    ) -> Dict[str, Any]:
        """Create the entry or refresh its title/poster snapshot."""
        ...

    async def remove_entry(self, user_id: int, movie_id: int) -> bool:
        """Delete the entry. Raises NotFound if there was none."""
        ...

    async def list_entries(self, user_id: int) -> List[Dict[str, Any]]:
        ...
