import logging

import asyncpg
from sqlalchemy.dialects import postgresql
from sqlalchemy.schema import CreateTable

from .config import Settings
from .models.base import Base
# register tables on Base.metadata
from .models import user, rating, watchlist  # noqa: F401

logger = logging.getLogger(__name__)


async def create_pool(settings: Settings) -> asyncpg.Pool:
    return await asyncpg.create_pool(
        settings.DATABASE_URL,
        min_size=settings.DB_POOL_MIN_SIZE,
        max_size=settings.DB_POOL_MAX_SIZE,
        command_timeout=60
    )


def schema_statements() -> list:
    """CREATE TABLE IF NOT EXISTS statements for every model, in dependency order."""
    dialect = postgresql.dialect()
    return [
        str(CreateTable(table, if_not_exists=True).compile(dialect=dialect))
        for table in Base.metadata.sorted_tables
    ]


async def init_schema(pool: asyncpg.Pool):
    async with pool.acquire() as conn:
        async with conn.transaction():
            for statement in schema_statements():
                await conn.execute(statement)
    logger.info("Database schema ready")
