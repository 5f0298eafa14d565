"""
Live notification delivery for the stream watcher.

This module posts a photo notification with an inline "watch" button to a
Telegram channel and removes it again after a fixed delay.

Main components:
- Notifier: Formats and sends notifications, schedules their deletion
- TelegramClient: Bot API client (sendPhoto / deleteMessage)
- DeletionScheduler: One-shot deferred deletions with cancel handles
- NotificationConfig: Configuration management

Example:
    from notifier import Notifier, StreamInfo

    notifier = Notifier()
    handle = await notifier.send(
        StreamInfo(
            username="somechannel",
            title="Late night speedruns",
            category="Celeste",
            start_time="21:30 05/03/2024",
            image="https://example.com/1920x1080.jpg",
            viewers=42,
        )
    )
"""

from .config import NotificationConfig
from .models import MessageHandle, StreamInfo
from .notifier import Notifier, build_caption
from .scheduler import DeletionScheduler, ScheduledDeletion

__version__ = "1.0.0"
__all__ = [
    "Notifier",
    "NotificationConfig",
    "StreamInfo",
    "MessageHandle",
    "DeletionScheduler",
    "ScheduledDeletion",
    "build_caption",
]
