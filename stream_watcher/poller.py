"""Live stream detection for one channel.

Each check queries the current broadcast, compares its id against the last
notified one and sends a notification when a new broadcast started.

Per broadcast id the poller walks ``OFFLINE -> LIVE(new) -> NOTIFIED ->
LIVE(same, no-op) -> OFFLINE``; only the transition to NOTIFIED sends a
message.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from notifier import Notifier
from stream_watcher.auth import CredentialManager
from stream_watcher.config import WatcherConfig
from stream_watcher.errors import PlatformAPIError
from stream_watcher.formatting import build_stream_info
from stream_watcher.state_store import StateStore
from stream_watcher.twitch import TwitchClient

logger = logging.getLogger(__name__)


class CheckResult(str, Enum):
    """Outcome of a single check cycle."""

    OFFLINE = "offline"
    NOTIFIED = "notified"
    ALREADY_NOTIFIED = "already_notified"
    SEND_FAILED = "send_failed"
    REAUTHENTICATED = "reauthenticated"
    NO_TOKEN = "no_token"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class PollerState:
    """In-memory tracking owned by the poller."""

    last_stream_id: Optional[str] = None


class StreamPoller:
    """Checks one channel and announces new broadcasts.

    Checks never overlap: a check that starts while another one is still
    running is skipped.
    """

    def __init__(
        self,
        config: WatcherConfig,
        credentials: CredentialManager,
        twitch: TwitchClient,
        store: StateStore,
        notifier: Notifier,
        state: Optional[PollerState] = None,
    ):
        self.config = config
        self.credentials = credentials
        self.twitch = twitch
        self.store = store
        self.notifier = notifier
        self.state = state or PollerState()
        self._lock = asyncio.Lock()

    async def check_once(self) -> CheckResult:
        """Run one check cycle.

        Every failure is logged and reported through the returned result;
        nothing is raised to the caller.
        """
        if self._lock.locked():
            logger.warning("Previous stream check still running, skipping this one")
            return CheckResult.SKIPPED

        async with self._lock:
            try:
                return await self._check()
            except Exception as e:
                logger.error(f"Unexpected error checking stream: {e}", exc_info=True)
                return CheckResult.FAILED

    async def _check(self) -> CheckResult:
        channel = self.config.channel_login

        token = await self.credentials.get_token()
        if not token:
            logger.error("No Twitch access token available, skipping check")
            return CheckResult.NO_TOKEN

        try:
            streams = await self.twitch.get_streams(channel, token)
        except PlatformAPIError as e:
            if e.is_unauthorized:
                logger.warning("Twitch access token expired, requesting a new one")
                self.credentials.invalidate()
                await self.credentials.get_token()
                return CheckResult.REAUTHENTICATED
            logger.error(f"Error checking stream: {e}")
            return CheckResult.FAILED

        if not streams:
            if self.state.last_stream_id is not None:
                logger.info(f"Stream {self.state.last_stream_id} of {channel} ended")
            else:
                logger.info(f"{channel} is offline, waiting for stream")
            self.state.last_stream_id = None
            return CheckResult.OFFLINE

        stream = streams[0]
        stream_id = str(stream.get("id") or "")
        if not stream_id:
            logger.error(f"Stream entry without id: {stream}")
            return CheckResult.FAILED

        try:
            stream_info = build_stream_info(stream, channel, self.config.display_timezone)
        except (KeyError, ValueError, TypeError) as e:
            logger.error(f"Malformed stream entry {stream_id}: {e}")
            return CheckResult.FAILED

        if self.state.last_stream_id == stream_id:
            return CheckResult.ALREADY_NOTIFIED

        previous_id = self.store.load()
        if previous_id == stream_id:
            self.state.last_stream_id = stream_id
            logger.debug(f"Stream {stream_id} was already announced")
            return CheckResult.ALREADY_NOTIFIED

        logger.info(f"New stream {stream_id} detected for {channel}")
        self.store.save(stream_id)
        self.state.last_stream_id = stream_id

        handle = await self.notifier.send(stream_info)
        if handle is None:
            self._rollback(previous_id)
            return CheckResult.SEND_FAILED

        return CheckResult.NOTIFIED

    def _rollback(self, previous_id: Optional[str]) -> None:
        """Restore the last notified id after a failed send so the next check retries."""
        if previous_id is None:
            self.store.clear()
        else:
            self.store.save(previous_id)
        self.state.last_stream_id = None
        logger.warning("Notification not sent, will retry on the next check")
