"""
Database Connection and Session Management

This module sets up SQLAlchemy's async database engine and provides
a dependency injection function for FastAPI routes to access database sessions.
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from app.config import settings


# Create async database engine
# - Uses asyncpg driver for PostgreSQL (specified in DATABASE_URL)
# - Connection pool is automatically managed by SQLAlchemy
engine = create_async_engine(settings.DATABASE_URL, echo=False)


# Session factory for creating database sessions
# - expire_on_commit=False: created posts are returned to the caller after
#   commit, and with async code we can't make blocking calls to refresh them
AsyncSessionLocal = sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False
)


async def get_db():
    """
    Database session dependency for FastAPI routes.

    Yields a database session and closes it when the request is complete,
    even if an exception occurs during request handling.
    """
    async with AsyncSessionLocal() as session:
        yield session
