"""Access token cache for the Twitch API."""

import logging
from typing import Optional

from stream_watcher.errors import PlatformAPIError
from stream_watcher.twitch import TwitchClient

logger = logging.getLogger(__name__)


class CredentialManager:
    """Obtains and caches the app access token.

    There is no expiry tracking: the token is renewed only after it has been
    rejected and ``invalidate()`` was called.
    """

    def __init__(self, client: TwitchClient):
        self.client = client
        self._token: Optional[str] = None

    @property
    def has_token(self) -> bool:
        return self._token is not None

    async def get_token(self) -> Optional[str]:
        """Return the cached token, requesting a new one if none is cached.

        Returns:
            The bearer token, or None if the token request failed.
        """
        if self._token:
            return self._token

        try:
            self._token = await self.client.request_app_token()
        except PlatformAPIError as e:
            logger.error(f"Error getting Twitch access token: {e}")
            return None

        logger.info("New Twitch access token obtained")
        return self._token

    def invalidate(self) -> None:
        """Drop the cached token so the next ``get_token()`` requests a new one."""
        if self._token:
            logger.info("Twitch access token invalidated")
        self._token = None
