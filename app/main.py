"""
Main Application Entry Point

This module sets up the FastAPI application with:
- Logging configuration
- Database table creation on startup
- Identity client and post rate limiter owned by the application lifespan
- Exception handlers for the common error envelope
- Route registration
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.config import settings
from app.database import engine
from app.errors import register_exception_handlers
from app.limiter import limiter
from app.models import Base
from app.routes import posts
from app.services.identity import IdentityClient
from app.services.ratelimit import PostRateLimiter

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager - runs on startup and shutdown.

    Startup:
    - Create database tables if they don't exist
    - Build the identity client and the per-author post rate limiter

    Shutdown:
    - Close the identity client's HTTP session
    - Dispose of the database connection pool
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        app.state.post_rate_limiter = PostRateLimiter.from_settings()
        app.state.identity = IdentityClient.from_settings()
        try:
            logger.info(f"Started in {settings.ENVIRONMENT} mode")
            yield
        finally:
            app.state.identity.close()
    finally:
        await engine.dispose()


app = FastAPI(title="Posts", lifespan=lifespan)

# slowapi looks the limiter up on app.state
app.state.limiter = limiter
register_exception_handlers(app)

app.include_router(posts.router)


@app.get("/health")
async def health():
    return {"status": "ok"}
