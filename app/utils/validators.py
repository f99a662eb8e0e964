"""
Input Validation Utilities

Post content rules are checked here so that every caller of the post writer
(HTTP route or direct service call) gets the same behaviour.
"""

from app.errors import PostValidationError
from app.models import MAX_CONTENT_LENGTH


def validate_post_content(content) -> str:
    """
    Check that post content is a string of 1 to 255 characters.

    Whitespace counts towards the length and is not trimmed, so a single
    space is a valid post but 256 spaces are not.

    Args:
        content: Candidate post text

    Returns:
        The content, unchanged

    Raises:
        PostValidationError: If the content is not a string or its length
            is out of range

    Examples:
        >>> validate_post_content("hello")
        'hello'
        >>> validate_post_content("")
        Traceback (most recent call last):
        ...
        app.errors.PostValidationError: Post content must not be empty
    """
    if not isinstance(content, str):
        raise PostValidationError("Post content must be a string")
    if len(content) == 0:
        raise PostValidationError("Post content must not be empty")
    if len(content) > MAX_CONTENT_LENGTH:
        raise PostValidationError(
            f"Post content must be at most {MAX_CONTENT_LENGTH} characters"
        )
    return content
