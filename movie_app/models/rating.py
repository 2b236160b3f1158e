from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, SmallInteger, UniqueConstraint, func

from .base import Base


class RatingDB(Base):
    """
    One row per (user, movie). Re-rating updates the row in place.
    """
    __tablename__ = "ratings"
    __table_args__ = (
        UniqueConstraint("user_id", "movie_id", name="uq_ratings_user_movie"),
        CheckConstraint("rating BETWEEN 1 AND 10", name="ck_ratings_range"),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    movie_id = Column(Integer, nullable=False)  # TMDB id
    rating = Column(SmallInteger, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
