"""
Error Kinds and Exception Handlers

Every failure leaves the API in the same envelope:

    {"error": {"code": "TOO_MANY_REQUESTS", "message": "..."}}

Services raise subclasses of PostsError; the handlers registered by
register_exception_handlers() turn them (and FastAPI's own validation,
HTTP and slowapi errors) into JSON responses.
"""

import logging
import math
import time
from datetime import datetime, timezone
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class PostsError(Exception):
    """Base class for errors surfaced to API callers."""
    code = "INTERNAL_SERVER_ERROR"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class PostValidationError(PostsError):
    code = "VALIDATION_ERROR"
    status_code = 400


class TooManyRequestsError(PostsError):
    code = "TOO_MANY_REQUESTS"
    status_code = 429

    def __init__(self, reset: datetime):
        super().__init__(
            f"Too many posts. You can post again after {format_reset_time(reset)}"
        )
        self.reset = reset

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["reset"] = self.reset.isoformat()
        return data


class AuthorNotFoundError(PostsError):
    """A stored post references a user the identity provider does not know."""

    def __init__(self, post_id: str):
        super().__init__(f"Author not found for post {post_id}")
        self.post_id = post_id


class IdentityServiceError(PostsError):
    pass


def format_reset_time(reset: datetime) -> str:
    return reset.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def _error_response(status_code: int, error: dict, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error}, headers=headers)


async def posts_error_handler(request: Request, exc: PostsError):
    headers = None
    if isinstance(exc, TooManyRequestsError):
        delta = (exc.reset - datetime.now(timezone.utc)).total_seconds()
        headers = {"Retry-After": str(math.ceil(max(0.0, delta)))}
    return _error_response(exc.status_code, exc.to_dict(), headers)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()) if part != 'body')}: {err.get('msg')}"
        for err in errors
    ) or "Invalid request"
    return _error_response(400, {"code": PostValidationError.code, "message": message})


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    try:
        code = HTTPStatus(exc.status_code).name
    except ValueError:
        code = "HTTP_ERROR"
    return _error_response(
        exc.status_code,
        {"code": code, "message": str(exc.detail)},
        getattr(exc, "headers", None),
    )


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    logger.info(f"Request rate limit hit for {request.client.host if request.client else 'unknown'}: {exc.detail}")
    item = exc.limit.limit
    # slowapi records the limit and key it just checked on request.state
    current = getattr(request.state, "view_rate_limit", None)
    if current is not None:
        item, args = current
        reset_time, _remaining = request.app.state.limiter.limiter.get_window_stats(item, *args)
        retry_after = reset_time - time.time()
    else:
        retry_after = item.get_expiry()
    return _error_response(
        429,
        {"code": TooManyRequestsError.code, "message": f"Rate limit exceeded: {exc.detail}"},
        {"Retry-After": str(math.ceil(max(0.0, retry_after)))},
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return _error_response(500, {"code": "INTERNAL_SERVER_ERROR", "message": "Internal server error"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PostsError, posts_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
