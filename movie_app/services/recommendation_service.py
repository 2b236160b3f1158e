import logging
import random
from typing import Any, Dict, Optional

from ..clients.tmdb_client import TMDBClient
from ..exceptions import UpstreamNotFound, UpstreamUnavailable
from ..repositories.base import RatingStore

logger = logging.getLogger(__name__)

# Ratings at or above this score seed recommendations
HIGH_AFFINITY_THRESHOLD = 7


class RecommendationService:
    def __init__(self, rating_repo: RatingStore, tmdb: TMDBClient, rng: Optional[random.Random] = None):
        self.rating_repo = rating_repo
        self.tmdb = tmdb
        self.rng = rng or random.Random()

    async def get_recommendations(self, user_id: int) -> Dict[str, Any]:
        """
        Strategy:
        1. Load the user's ratings >= HIGH_AFFINITY_THRESHOLD
        2. None -> TMDB popular list (cold start)
        3. Otherwise pick one of them at random and return TMDB
           recommendations for that movie

        A failed recommendations call is reported as UpstreamUnavailable,
        it never falls back to the popular list.
        """
        liked = await self.rating_repo.list_ratings(user_id, min_rating=HIGH_AFFINITY_THRESHOLD)
        # the store filter is trusted, but the threshold must hold exactly
        liked = [r for r in liked if r["rating"] >= HIGH_AFFINITY_THRESHOLD]

        if not liked:
            logger.info("No high-affinity ratings, serving popular movies", extra={"user_id": user_id})
            return await self.tmdb.popular()

        seed = self.rng.choice(liked)
        logger.info(
            "Serving recommendations from seed movie",
            extra={"user_id": user_id, "movie_id": seed["movie_id"]}
        )
        try:
            return await self.tmdb.recommendations(seed["movie_id"])
        except UpstreamNotFound as e:
            raise UpstreamUnavailable(
                f"TMDB has no recommendations for movie {seed['movie_id']}"
            ) from e
