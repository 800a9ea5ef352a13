import logging
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy import text

from core.config import settings

logger = logging.getLogger(__name__)


def _engine_options(url: str) -> dict:
    # SQLite (used by the test suite) rejects pool sizing arguments
    if url.startswith("sqlite"):
        return {}
    return {
        "pool_size": settings.database_pool_size,
        "max_overflow": settings.database_max_overflow,
        "pool_pre_ping": True,
    }


db_engine = create_async_engine(
    settings.database_url, echo=False, **_engine_options(settings.database_url)
)


# Create async session maker to be used throughout the application
AsyncSessionLocal = async_sessionmaker(
    db_engine, class_=AsyncSession, expire_on_commit=False
)


# Base class for declarative models
class Base(DeclarativeBase):
    pass


# Dependency to get DB session
async def get_db():
    async with AsyncSessionLocal() as session:
        yield session


async def ping_db(session: AsyncSession) -> None:
    """Run a trivial query, raising if the database is unreachable."""
    await session.execute(text("select 1"))


# Function to initialize the database (create tables)
async def init_db():
    # Register every model on the metadata before create_all
    from database.models import admins, positions, candidates, applications  # noqa: F401

    logger.info("Initializing database schema")
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# Function to close database connections
async def close_db():
    """Close database engine and connections."""
    await db_engine.dispose()
