"""
Request and Response Models

Pydantic models for the posts API. Field names are snake_case in Python
and camelCase on the wire (`authorId`, `createdAt`, `profileImageUrl`).
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.models import MAX_CONTENT_LENGTH


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class PostCreate(CamelModel):
    content: str = Field(..., min_length=1, max_length=MAX_CONTENT_LENGTH)


class PostOut(CamelModel):
    id: str
    author_id: str
    content: str
    created_at: datetime


class AuthorProfile(CamelModel):
    """Read-only projection of a user held by the identity provider."""
    id: str
    display_name: Optional[str] = None
    email: Optional[str] = None
    profile_image_url: str = ""


class PostWithAuthor(CamelModel):
    post: PostOut
    author: AuthorProfile


class CreatedPost(CamelModel):
    post: PostOut


class RateLimitResult(CamelModel):
    success: bool
    reset: datetime


# --- Error envelope ---

class ErrorDetail(BaseModel):
    code: str = Field(..., description="Machine-readable error kind, e.g. VALIDATION_ERROR")
    message: str
    reset: Optional[datetime] = Field(None, description="When the rate limit window resets (TOO_MANY_REQUESTS only)")


class ErrorResponse(BaseModel):
    error: ErrorDetail
