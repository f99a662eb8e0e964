"""
Identity Service Client

Author profiles are owned by the external identity provider. This module
fetches them from the provider's backend API (Clerk-compatible `/users`
endpoint) in a single batched call per feed read.
"""

import asyncio
import logging

import requests

from app.config import settings
from app.errors import IdentityServiceError
from app.schemas import AuthorProfile

logger = logging.getLogger(__name__)


def profile_from_user(user: dict) -> AuthorProfile:
    """
    Project a provider user record onto the fields the feed exposes.

    The display name is the username; the email is the first listed
    address. Either may be missing.
    """
    emails = user.get("email_addresses") or []
    email = emails[0].get("email_address") if emails else None
    return AuthorProfile(
        id=user["id"],
        display_name=user.get("username") or None,
        email=email or None,
        profile_image_url=user.get("image_url") or user.get("profile_image_url") or "",
    )


class IdentityClient:
    """
    Thin client for the identity provider's user listing endpoint.

    Holds a requests.Session, so one instance is created at application
    startup and closed on shutdown.
    """

    def __init__(self, base_url: str, secret_key: str, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        if secret_key:
            self.session.headers["Authorization"] = f"Bearer {secret_key}"

    @classmethod
    def from_settings(cls) -> "IdentityClient":
        if not settings.IDENTITY_SECRET_KEY:
            logger.warning("IDENTITY_SECRET_KEY not configured. Identity lookups will be unauthenticated.")
        return cls(
            settings.IDENTITY_API_URL,
            settings.IDENTITY_SECRET_KEY,
            timeout=settings.IDENTITY_TIMEOUT_SECONDS,
        )

    async def get_user_list(self, user_ids: list[str], limit: int = 100) -> list[AuthorProfile]:
        """
        Fetch profiles for up to `limit` user ids in one request.

        Ids the provider does not know are simply absent from the result;
        the caller decides what a missing profile means.

        Raises:
            IdentityServiceError: If the provider can't be reached or
                answers with an error status
        """
        if not user_ids:
            return []

        params = [("user_id", user_id) for user_id in user_ids[:limit]]
        params.append(("limit", str(limit)))

        def _fetch_sync():
            response = self.session.get(
                f"{self.base_url}/users", params=params, timeout=self.timeout
            )
            response.raise_for_status()
            return response.json()

        try:
            # Run blocking request in a separate thread to avoid blocking the event loop
            users = await asyncio.to_thread(_fetch_sync)
        except requests.RequestException as e:
            logger.error(f"Identity service request failed: {e}")
            raise IdentityServiceError("Identity service unavailable") from e

        # Some provider versions wrap the list as {"data": [...]}
        if isinstance(users, dict):
            users = users.get("data", [])
        return [profile_from_user(user) for user in users]

    def close(self):
        self.session.close()
