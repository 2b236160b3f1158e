from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint, func

from .base import Base


class WatchlistDB(Base):
    """
    Watchlist entry with a title/poster snapshot taken when the movie was added.
    """
    __tablename__ = "watchlist"
    __table_args__ = (
        UniqueConstraint("user_id", "movie_id", name="uq_watchlist_user_movie"),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    movie_id = Column(Integer, nullable=False)
    title = Column(String(500), nullable=False)
    poster_path = Column(String(500))
    added_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
