"""Stream watcher service entry point.

Wires the components together and runs the polling loop until SIGINT or
SIGTERM is received.
"""

import asyncio
import logging
import signal
from typing import Optional

from dotenv import load_dotenv

from logging_module import LoggingConfig, setup_logging
from notifier import NotificationConfig, Notifier
from stream_watcher.auth import CredentialManager
from stream_watcher.config import WatcherConfig
from stream_watcher.errors import ConfigError
from stream_watcher.poller import StreamPoller
from stream_watcher.state_store import StateStore
from stream_watcher.twitch import TwitchClient

logger = logging.getLogger(__name__)


def build_poller(watcher_config: WatcherConfig, notification_config: NotificationConfig) -> StreamPoller:
    """Create a poller with all of its collaborators."""
    twitch = TwitchClient(
        watcher_config.client_id,
        watcher_config.client_secret,
        timeout=watcher_config.http_timeout_seconds,
    )
    return StreamPoller(
        config=watcher_config,
        credentials=CredentialManager(twitch),
        twitch=twitch,
        store=StateStore(watcher_config.state_file),
        notifier=Notifier(notification_config),
    )


async def run_loop(
    poller: StreamPoller, interval: float, stop_event: asyncio.Event
) -> None:
    """Check the channel every ``interval`` seconds until ``stop_event`` is set.

    Each check completes before the next wait starts.
    """
    logger.info(
        f"Watching {poller.config.channel_login} every {interval:.0f}s "
        f"(notifications deleted after {poller.notifier.config.delete_after_seconds:.0f}s)"
    )

    while not stop_event.is_set():
        result = await poller.check_once()
        logger.debug(f"Stream check finished: {result.value}")

        try:
            await asyncio.wait_for(stop_event.wait(), timeout=interval)
        except asyncio.TimeoutError:
            pass


async def run(
    watcher_config: WatcherConfig,
    notification_config: NotificationConfig,
    stop_event: Optional[asyncio.Event] = None,
) -> None:
    """Run the watcher until stopped, then release resources."""
    stop_event = stop_event or asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except (NotImplementedError, RuntimeError):
            # Not available on Windows event loops
            pass

    poller = build_poller(watcher_config, notification_config)
    try:
        await run_loop(poller, watcher_config.poll_interval_seconds, stop_event)
    finally:
        poller.notifier.scheduler.cancel_all()
        await poller.twitch.close()
        logger.info("Stream watcher stopped")


def main() -> int:
    """Load configuration, set up logging and run the watcher.

    Returns:
        Process exit code
    """
    load_dotenv()

    try:
        setup_logging(LoggingConfig.from_env())
    except ValueError as e:
        logging.basicConfig(level=logging.INFO)
        logger.error(f"Invalid logging configuration: {e}")
        return 1

    try:
        watcher_config = WatcherConfig.from_env()
        watcher_config.validate()
        notification_config = NotificationConfig.from_env()
        notification_config.validate()
    except (ConfigError, ValueError) as e:
        logger.error(f"Configuration error: {e}")
        return 1

    logger.info("Bot started")
    logger.debug(f"Loaded {watcher_config!r} and {notification_config!r}")

    try:
        asyncio.run(run(watcher_config, notification_config))
    except KeyboardInterrupt:
        logger.info("Interrupted")
    return 0
