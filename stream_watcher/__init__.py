"""
Twitch live-stream watcher.

Polls the Helix API for one channel and announces every new broadcast
through the notifier package.

Main components:
- StreamPoller: One check cycle per timer tick, new-broadcast detection
- CredentialManager: App access token cache
- TwitchClient: Token and streams endpoints
- StateStore: Last notified broadcast id on disk
- WatcherConfig: Configuration management

Run with ``python -m stream_watcher``.
"""

from .auth import CredentialManager
from .config import WatcherConfig
from .errors import ConfigError, ErrorKind, PlatformAPIError, StreamWatcherError
from .poller import CheckResult, PollerState, StreamPoller
from .state_store import StateStore
from .twitch import TwitchClient

__version__ = "1.0.0"
__all__ = [
    "StreamPoller",
    "CheckResult",
    "PollerState",
    "CredentialManager",
    "TwitchClient",
    "StateStore",
    "WatcherConfig",
    "StreamWatcherError",
    "ConfigError",
    "PlatformAPIError",
    "ErrorKind",
]
