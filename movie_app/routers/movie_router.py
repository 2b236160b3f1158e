from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Path, Query

from ..clients.tmdb_client import TMDBClient
from ..dependencies import get_current_user, get_rating_store, get_tmdb_client, get_watchlist_store
from ..schemas.movie import MessageResponse, RateRequest, RatingResponse, WatchlistEntryResponse
from ..services.movie_service import MovieService
from ..services.recommendation_service import RecommendationService

router = APIRouter(prefix="/api/movies", tags=["movies"])

# TMDB ids fit the int4 movie_id columns
MAX_MOVIE_ID = 2**31 - 1


async def get_movie_service(
    tmdb: TMDBClient = Depends(get_tmdb_client),
    rating_repo=Depends(get_rating_store),
    watchlist_repo=Depends(get_watchlist_store),
) -> MovieService:
    recommender = RecommendationService(rating_repo, tmdb)
    return MovieService(tmdb, rating_repo, watchlist_repo, recommender)


# Public routes

@router.get("/search")
async def search_movies(
    query: str = "",
    page: int = Query(1, ge=1, le=500),
    service: MovieService = Depends(get_movie_service)
) -> Dict[str, Any]:
    """Search movies by title"""
    return await service.search(query, page=page)


@router.get("/trending")
async def get_trending_movies(
    time_window: str = "week",
    service: MovieService = Depends(get_movie_service)
) -> Dict[str, Any]:
    """Trending movies for the day or the week"""
    return await service.trending(time_window)


# Protected routes

@router.get("/user/ratings", response_model=List[RatingResponse])
async def get_user_ratings(
    user: dict = Depends(get_current_user),
    service: MovieService = Depends(get_movie_service)
):
    return await service.ratings(user["id"])


@router.get("/user/watchlist", response_model=List[WatchlistEntryResponse])
async def get_watchlist(
    user: dict = Depends(get_current_user),
    service: MovieService = Depends(get_movie_service)
):
    return await service.watchlist(user["id"])


@router.get("/user/recommendations")
async def get_recommendations(
    user: dict = Depends(get_current_user),
    service: MovieService = Depends(get_movie_service)
) -> Dict[str, Any]:
    """
    Movies related to one of the user's highly rated titles,
    or the popular list when there is none.
    """
    return await service.recommend(user["id"])


# Routes with path parameters

@router.get("/{movie_id}")
async def get_movie_details(
    movie_id: int = Path(..., ge=1, le=MAX_MOVIE_ID),
    service: MovieService = Depends(get_movie_service)
) -> Dict[str, Any]:
    return await service.details(movie_id)


@router.post("/{movie_id}/rate", response_model=RatingResponse)
async def rate_movie(
    *,
    movie_id: int = Path(..., ge=1, le=MAX_MOVIE_ID),
    body: RateRequest,
    user: dict = Depends(get_current_user),
    service: MovieService = Depends(get_movie_service)
):
    return await service.rate(user["id"], movie_id, body.rating)


@router.post("/{movie_id}/watchlist", response_model=WatchlistEntryResponse)
async def add_to_watchlist(
    movie_id: int = Path(..., ge=1, le=MAX_MOVIE_ID),
    user: dict = Depends(get_current_user),
    service: MovieService = Depends(get_movie_service)
):
    return await service.add_to_watchlist(user["id"], movie_id)


@router.delete("/{movie_id}/watchlist", response_model=MessageResponse)
async def remove_from_watchlist(
    movie_id: int = Path(..., ge=1, le=MAX_MOVIE_ID),
    user: dict = Depends(get_current_user),
    service: MovieService = Depends(get_movie_service)
):
    await service.remove_from_watchlist(user["id"], movie_id)
    return MessageResponse(message="Movie removed from watchlist")
