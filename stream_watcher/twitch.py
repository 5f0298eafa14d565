"""Twitch API client.

Covers the two endpoints the watcher needs: the client-credentials token
exchange and the Helix streams lookup. Failures are raised as
PlatformAPIError with a kind and the HTTP status so callers never inspect
response objects themselves.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from stream_watcher.errors import ErrorKind, PlatformAPIError

logger = logging.getLogger(__name__)

HELIX_BASE = "https://api.twitch.tv/helix"
OAUTH_BASE = "https://id.twitch.tv/oauth2"


class TwitchClient:
    """Client for the Twitch token and streams endpoints.

    Manages a shared httpx client for connection reuse.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        timeout: float = 10.0,
        http: Optional[httpx.AsyncClient] = None,
    ):
        if not client_id or not client_secret:
            raise ValueError("Twitch client_id and client_secret are required")

        self.client_id = client_id
        self.client_secret = client_secret
        self._http = http or httpx.AsyncClient(timeout=timeout)

    async def close(self) -> None:
        """Close the shared HTTP client. Call on shutdown."""
        await self._http.aclose()

    def _headers(self, token: str) -> Dict[str, str]:
        return {"Client-ID": self.client_id, "Authorization": f"Bearer {token}"}

    async def request_app_token(self) -> str:
        """Exchange the client credentials for an app access token.

        Returns:
            The bearer token.

        Raises:
            PlatformAPIError: With kind AUTH_FAILED if the exchange fails.
        """
        try:
            response = await self._http.post(
                f"{OAUTH_BASE}/token",
                data={
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "grant_type": "client_credentials",
                },
            )
        except httpx.HTTPError as e:
            raise PlatformAPIError(
                f"Token request failed: {e}", kind=ErrorKind.AUTH_FAILED
            ) from e

        if response.status_code != 200:
            raise PlatformAPIError(
                f"Token request rejected: HTTP {response.status_code} - {response.text}",
                kind=ErrorKind.AUTH_FAILED,
                status_code=response.status_code,
            )

        try:
            token = response.json().get("access_token")
        except (ValueError, AttributeError) as e:
            raise PlatformAPIError(
                "Token response is not a JSON object",
                kind=ErrorKind.AUTH_FAILED,
                status_code=response.status_code,
            ) from e

        if not token:
            raise PlatformAPIError(
                "Token response has no access_token",
                kind=ErrorKind.AUTH_FAILED,
                status_code=response.status_code,
            )
        return token

    async def get_streams(self, user_login: str, token: str) -> List[Dict[str, Any]]:
        """Return the live streams for a channel login.

        Args:
            user_login: Channel login name.
            token: App access token.

        Returns:
            List of stream objects; empty when the channel is offline.

        Raises:
            PlatformAPIError: UNAUTHORIZED on HTTP 401, REQUEST_FAILED on any
                other HTTP or transport failure, INVALID_RESPONSE on a body
                that cannot be read.
        """
        try:
            response = await self._http.get(
                f"{HELIX_BASE}/streams",
                params={"user_login": user_login},
                headers=self._headers(token),
            )
        except httpx.HTTPError as e:
            raise PlatformAPIError(f"Streams request failed: {e}") from e

        if response.status_code == 401:
            raise PlatformAPIError(
                "Access token rejected",
                kind=ErrorKind.UNAUTHORIZED,
                status_code=401,
            )

        if response.status_code != 200:
            raise PlatformAPIError(
                f"Streams request failed: HTTP {response.status_code} - {response.text}",
                status_code=response.status_code,
            )

        try:
            streams = response.json().get("data") or []
        except (ValueError, AttributeError) as e:
            raise PlatformAPIError(
                "Streams response is not a JSON object",
                kind=ErrorKind.INVALID_RESPONSE,
                status_code=response.status_code,
            ) from e

        if not isinstance(streams, list):
            raise PlatformAPIError(
                "Streams response 'data' is not a list",
                kind=ErrorKind.INVALID_RESPONSE,
                status_code=response.status_code,
            )
        return streams
