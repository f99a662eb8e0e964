"""
FastAPI Dependencies

Authentication and access to the collaborators created at startup.

The identity client and post rate limiter live on `app.state` (built in the
application lifespan), so routes receive them through these functions and
tests can swap them with `app.dependency_overrides`.
"""

from fastapi import HTTPException, Request, status

from app.services.auth import verify_token
from app.services.identity import IdentityClient
from app.services.ratelimit import PostRateLimiter


# Cookie the identity provider's frontend SDK stores the session token in
SESSION_COOKIE = "__session"


def _extract_token(request: Request) -> str | None:
    header = request.headers.get("Authorization")
    if header:
        # "Bearer <jwt_token>" (OAuth 2.0 standard)
        scheme, _, param = header.partition(" ")
        if scheme.lower() != "bearer" or not param:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token scheme"
            )
        return param
    return request.cookies.get(SESSION_COOKIE)


async def get_current_user_id(request: Request) -> str:
    """
    Dependency that requires an authenticated user.

    Reads the session token from the Authorization header (or the session
    cookie), verifies it, and returns the identity provider's user id.

    Raises:
        HTTPException: 401 if authentication fails at any step
    """
    token = _extract_token(request)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )

    payload = verify_token(token)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token"
        )

    # "sub" is the standard JWT claim for the subject identifier
    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload"
        )

    return user_id


def get_identity_client(request: Request) -> IdentityClient:
    return request.app.state.identity


def get_post_rate_limiter(request: Request) -> PostRateLimiter:
    return request.app.state.post_rate_limiter
