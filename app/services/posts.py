"""
Posts Service - Feed Reading and Post Creation

The two operations behind the posts API:

1. get_all_posts: newest posts joined with their authors' profiles
2. create_post: validated, rate-limited insert of a new post

Posts are stored locally; author profiles come from the identity provider
in one batched lookup per feed read and are only kept for that request.
"""

import logging

from sqlalchemy import desc
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.config import settings
from app.errors import AuthorNotFoundError, TooManyRequestsError
from app.models import Post
from app.schemas import PostOut, PostWithAuthor
from app.utils.validators import validate_post_content

logger = logging.getLogger(__name__)


async def get_all_posts(db: AsyncSession, identity, limit: int | None = None) -> list[PostWithAuthor]:
    """
    Return the most recent posts, newest first, each paired with its author.

    Steps:
    1. Fetch up to `limit` posts ordered by creation time (descending)
    2. Collect the distinct author ids
    3. Look all authors up with a single identity service call
    4. Pair every post with its author

    Args:
        db: Database session
        identity: Identity client exposing `get_user_list(ids, limit)`
        limit: Page size, defaults to FEED_PAGE_SIZE (100)

    Returns:
        List of PostWithAuthor

    Raises:
        AuthorNotFoundError: If any post's author is missing from the
            identity service response. The whole read fails; a partial
            feed is never returned.
    """
    if limit is None:
        limit = settings.FEED_PAGE_SIZE

    result = await db.execute(
        select(Post).order_by(desc(Post.created_at), desc(Post.id)).limit(limit)
    )
    posts = result.scalars().all()
    if not posts:
        return []

    # dict.fromkeys keeps first-seen order while dropping duplicates
    author_ids = list(dict.fromkeys(post.author_id for post in posts))
    profiles = await identity.get_user_list(author_ids, limit=limit)
    authors = {profile.id: profile for profile in profiles}

    feed = []
    for post in posts:
        author = authors.get(post.author_id)
        if author is None:
            # Storage and identity provider disagree; this is a bug elsewhere
            logger.error(
                f"Author {post.author_id} not found for post {post.id}; "
                f"identity service returned {len(authors)} of {len(author_ids)} authors"
            )
            raise AuthorNotFoundError(post.id)
        feed.append(PostWithAuthor(post=PostOut.model_validate(post), author=author))

    return feed


async def create_post(db: AsyncSession, rate_limiter, author_id: str, content: str) -> Post:
    """
    Create a post for `author_id`.

    Validation runs before anything else, so an invalid post neither
    consumes rate limit budget nor touches the database. A throttled
    attempt is not persisted and is not retried; the caller must submit
    it again after the reset time.

    Args:
        db: Database session (committed here)
        rate_limiter: Object exposing `async limit(key)` returning
                      `success` and `reset`
        author_id: Authenticated user id from the session token
        content: Post text, 1 to 255 characters

    Returns:
        The persisted Post, with server-assigned id and created_at

    Raises:
        PostValidationError: Content is empty or too long
        TooManyRequestsError: Author exceeded the post rate limit
    """
    validate_post_content(content)

    outcome = await rate_limiter.limit(author_id)
    if not outcome.success:
        raise TooManyRequestsError(outcome.reset)

    post = Post(author_id=author_id, content=content)
    db.add(post)
    await db.commit()
    await db.refresh(post)  # Refresh to get server-side defaults

    logger.info(f"Post {post.id} created by {author_id}")
    return post
