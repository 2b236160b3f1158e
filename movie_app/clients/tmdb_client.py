import logging
from typing import Any, Dict, Optional

import httpx

from ..config import Settings
from ..exceptions import ConfigurationError, UpstreamNotFound, UpstreamUnavailable

logger = logging.getLogger(__name__)

TRENDING_WINDOWS = ("day", "week")


class TMDBClient:
    """
    Thin async wrapper around The Movie Database v3 API.

    Every method returns the decoded JSON payload untouched. A 404 from the
    provider raises UpstreamNotFound; any other failure (transport error,
    non-2xx status, undecodable body) raises UpstreamUnavailable.
    """

    def __init__(self, settings: Settings, http_client: Optional[httpx.AsyncClient] = None):
        if not settings.TMDB_API_KEY:
            raise ConfigurationError("TMDB_API_KEY is not configured")

        self.base_url = settings.TMDB_BASE_URL.rstrip("/")
        self._api_key = settings.TMDB_API_KEY
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(settings.TMDB_TIMEOUT)
        )

    async def aclose(self):
        if self._owns_client:
            await self._client.aclose()

    async def _get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        query = {"api_key": self._api_key}
        if params:
            query.update(params)

        try:
            response = await self._client.get(f"{self.base_url}{endpoint}", params=query)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            if status_code == 404:
                raise UpstreamNotFound(f"TMDB resource not found: {endpoint}") from e
            logger.warning("TMDB API error", extra={"path": endpoint, "status_code": status_code})
            raise UpstreamUnavailable(f"TMDB API error: {status_code}") from e
        except httpx.RequestError as e:
            logger.warning("TMDB request failed", extra={"path": endpoint, "error": str(e)})
            raise UpstreamUnavailable(f"TMDB request failed: {e.__class__.__name__}") from e
        except ValueError as e:
            # body was not JSON
            logger.warning("TMDB returned an invalid payload", extra={"path": endpoint, "error": str(e)})
            raise UpstreamUnavailable("TMDB returned an invalid payload") from e

    async def search(self, query: str, page: int = 1) -> Dict[str, Any]:
        return await self._get("/search/movie", {"query": query, "page": page})

    async def trending(self, time_window: str = "week") -> Dict[str, Any]:
        return await self._get(f"/trending/movie/{time_window}")

    async def details(self, movie_id: int) -> Dict[str, Any]:
        return await self._get(f"/movie/{movie_id}")

    async def popular(self, page: int = 1) -> Dict[str, Any]:
        return await self._get("/movie/popular", {"page": page})

    async def recommendations(self, movie_id: int, page: int = 1) -> Dict[str, Any]:
        return await self._get(f"/movie/{movie_id}/recommendations", {"page": page})
