from datetime import datetime
from typing import Optional
from pydantic import BaseModel, StrictInt


class RateRequest(BaseModel):
    """Range is checked by MovieService so out-of-range scores get a 400.
    Strict so JSON true, "7" or 7.0 are never coerced into a score."""
    rating: StrictInt


class RatingResponse(BaseModel):
    user_id: int
    movie_id: int
    rating: int
    created_at: datetime
    updated_at: datetime


class WatchlistEntryResponse(BaseModel):
    user_id: int
    movie_id: int
    title: str
    poster_path: Optional[str] = None
    added_at: datetime


class MessageResponse(BaseModel):
    message: str
