"""
Request Rate Limiting Configuration

This module sets up the slowapi Limiter using Redis as the storage backend.
It throttles requests by client IP and is applied to the public feed read.
Post creation is additionally limited per author by
app.services.ratelimit.PostRateLimiter.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from app.config import settings

# key_func=get_remote_address: Uses the client's IP address as the unique identifier
# storage_uri: Connects to Redis (or memory://) for persisting limit counters
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.rate_limit_storage_uri,
    strategy="fixed-window"
)
