import logging
from typing import Any, Dict, List

from ..clients.tmdb_client import TMDBClient, TRENDING_WINDOWS
from ..exceptions import NotFound, UpstreamNotFound, ValidationError
from ..repositories.base import RatingStore, WatchlistStore, check_rating
from .recommendation_service import RecommendationService

logger = logging.getLogger(__name__)


class MovieService:
    """
    User-facing movie operations.

    Checks always run in the same order: input validation, then upstream
    existence, then the single store write. Collaborator errors are either
    narrowed (a TMDB 404 becomes NotFound) or propagated as they are.
    """

    def __init__(
        self,
        tmdb: TMDBClient,
        rating_repo: RatingStore,
        watchlist_repo: WatchlistStore,
        recommender: RecommendationService,
    ):
        self.tmdb = tmdb
        self.rating_repo = rating_repo
        self.watchlist_repo = watchlist_repo
        self.recommender = recommender

    async def _require_movie(self, movie_id: int) -> Dict[str, Any]:
        try:
            return await self.tmdb.details(movie_id)
        except UpstreamNotFound as e:
            raise NotFound("Movie not found") from e

    # Public catalogue

    async def search(self, query: str, page: int = 1) -> Dict[str, Any]:
        if query is None or not query.strip():
            raise ValidationError("Search query is required")
        return await self.tmdb.search(query.strip(), page=page)

    async def trending(self, time_window: str = "week") -> Dict[str, Any]:
        if time_window not in TRENDING_WINDOWS:
            raise ValidationError(f"time_window must be one of: {', '.join(TRENDING_WINDOWS)}")
        return await self.tmdb.trending(time_window)

    async def details(self, movie_id: int) -> Dict[str, Any]:
        return await self._require_movie(movie_id)

    # Ratings

    async def rate(self, user_id: int, movie_id: int, rating: int) -> Dict[str, Any]:
        check_rating(rating)
        await self._require_movie(movie_id)
        stored = await self.rating_repo.upsert_rating(user_id, movie_id, rating)
        logger.info("Rating stored", extra={"user_id": user_id, "movie_id": movie_id})
        return stored

    async def ratings(self, user_id: int) -> List[Dict[str, Any]]:
        return await self.rating_repo.list_ratings(user_id)

    # Watchlist

    async def add_to_watchlist(self, user_id: int, movie_id: int) -> Dict[str, Any]:
        movie = await self._require_movie(movie_id)
        entry = await self.watchlist_repo.upsert_entry(
            user_id,
            movie_id,
            title=movie.get("title") or "",
            poster_path=movie.get("poster_path"),
        )
        logger.info("Watchlist entry stored", extra={"user_id": user_id, "movie_id": movie_id})
        return entry

    async def remove_from_watchlist(self, user_id: int, movie_id: int) -> bool:
        removed = await self.watchlist_repo.remove_entry(user_id, movie_id)
        logger.info("Watchlist entry removed", extra={"user_id": user_id, "movie_id": movie_id})
        return removed

    async def watchlist(self, user_id: int) -> List[Dict[str, Any]]:
        return await self.watchlist_repo.list_entries(user_id)

    async def recommend(self, user_id: int) -> Dict[str, Any]:
        return await self.recommender.get_recommendations(user_id)
