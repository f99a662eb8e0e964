"""
Database Models

Posts are the only table owned by this service. Authors live in the
external identity provider, so `author_id` is a plain indexed string
rather than a foreign key.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import declarative_base


# Base class for all ORM models
Base = declarative_base()


# Longest post accepted by the writer
MAX_CONTENT_LENGTH = 255


def _new_post_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Post(Base):
    """
    A short text post. Immutable once created.
    """
    __tablename__ = "posts"

    # Opaque identifier assigned at insert time
    id = Column(String(32), primary_key=True, default=_new_post_id)

    # Identity provider user id of the author
    author_id = Column(String, nullable=False, index=True)

    content = Column(String(MAX_CONTENT_LENGTH), nullable=False)

    # Indexed because the feed is always read newest first
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
