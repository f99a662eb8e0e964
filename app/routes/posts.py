"""
Posts Routes

- GET /posts: The feed, newest 100 posts with their authors (posts.getAll)
- POST /posts: Create a post as the signed-in user (posts.create)

Business logic lives in app.services.posts; these handlers wire in the
session, the authenticated user and the collaborators from app.state.
"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.dependencies import get_current_user_id, get_identity_client, get_post_rate_limiter
from app.limiter import limiter
from app.schemas import CreatedPost, ErrorResponse, PostCreate, PostOut, PostWithAuthor
from app.services.posts import create_post, get_all_posts


router = APIRouter(prefix="/posts", tags=["posts"])


@router.get(
    "",
    response_model=list[PostWithAuthor],
    responses={429: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
@limiter.limit(settings.FEED_RATE_LIMIT)
async def get_all(
    request: Request,
    db: AsyncSession = Depends(get_db),
    identity=Depends(get_identity_client),
):
    """
    Most recent posts, newest first, each with its author's profile.

    Fails with INTERNAL_SERVER_ERROR if any post's author can't be
    resolved by the identity provider.
    """
    return await get_all_posts(db, identity)


@router.post(
    "",
    response_model=CreatedPost,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
    },
)
async def create(
    payload: PostCreate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    rate_limiter=Depends(get_post_rate_limiter),
):
    """
    Create a post authored by the signed-in user.

    At most 3 posts per author per minute; further attempts fail with
    TOO_MANY_REQUESTS and a message saying when posting is allowed again.
    """
    post = await create_post(db, rate_limiter, user_id, payload.content)
    return CreatedPost(post=PostOut.model_validate(post))
