"""
Live notification interface.

This is the main entry point for announcing a broadcast. It handles:
- Caption and inline keyboard formatting
- Photo selection (local asset or stream thumbnail)
- Scheduling the deletion of every sent notification
- Error handling without blocking the polling loop
"""

import html
import logging
from typing import Dict, Optional

from notifier.config import TELEGRAM_CAPTION_LIMIT, NotificationConfig
from notifier.models import MessageHandle, StreamInfo
from notifier.scheduler import DeletionScheduler, ScheduledDeletion
from notifier.telegram import InlineKeyboard, TelegramClient

logger = logging.getLogger(__name__)

CAPTION_TEMPLATE = (
    "<b>[Twitch]</b> {username} is live!\n"
    "\n"
    "<b>Title:</b> {title}\n"
    "<b>Category:</b> {category}\n"
    "<b>Started:</b> {start_time}\n"
    "<b>Viewers:</b> {viewers}"
)


def _shorten(value: str, limit: int) -> str:
    """HTML-escape ``value`` and cut it so the escaped text fits ``limit``.

    The cut is made on the raw text, so entities are never split.
    """
    escaped = html.escape(value)
    if len(escaped) <= limit:
        return escaped
    if limit <= 1:
        return ""

    # Escaping never shortens text
    value = value[: limit - 1]
    while len(html.escape(value)) > limit - 1:
        value = value[:-1]
    return html.escape(value) + "…"


def build_caption(stream_info: StreamInfo) -> str:
    """
    Render the notification caption.

    Values are HTML-escaped. When the caption would exceed Telegram's
    caption limit, the category and title are shortened before they are
    placed in the template, so tags and entities stay intact.

    Args:
        stream_info: Broadcast to announce

    Returns:
        Caption text in HTML parse mode
    """
    fields = {
        "username": html.escape(stream_info.username),
        "start_time": html.escape(stream_info.start_time),
        "viewers": stream_info.viewers,
    }
    title = html.escape(stream_info.title)
    category = html.escape(stream_info.category)

    budget = TELEGRAM_CAPTION_LIMIT - len(CAPTION_TEMPLATE.format(title="", category="", **fields))
    if len(title) + len(category) > budget:
        category = _shorten(stream_info.category, max(budget - len(title), budget // 2))
        title = _shorten(stream_info.title, budget - len(category))

    return CAPTION_TEMPLATE.format(title=title, category=category, **fields)


class Notifier:
    """Sends live notifications and schedules their removal."""

    def __init__(
        self,
        config: Optional[NotificationConfig] = None,
        client: Optional[TelegramClient] = None,
        scheduler: Optional[DeletionScheduler] = None,
    ):
        """
        Initialize the notifier.

        Args:
            config: Optional configuration. If not provided, loads it from the environment.
            client: Optional Telegram client
            scheduler: Optional deletion scheduler
        """
        self.config = config or NotificationConfig.from_env()
        self.client = client or TelegramClient(self.config)
        self.scheduler = scheduler or DeletionScheduler(self.client)

        # Statistics
        self.stats = {
            "sent": 0,
            "failed": 0,
        }

    def build_keyboard(self, stream_info: StreamInfo) -> InlineKeyboard:
        """Single-button keyboard linking to the live channel."""
        return InlineKeyboard().add_url_button(self.config.button_text, stream_info.channel_url)

    async def send(self, stream_info: StreamInfo) -> Optional[MessageHandle]:
        """
        Send a live notification.

        On success the message is scheduled for deletion after
        ``config.delete_after_seconds``.

        Args:
            stream_info: Broadcast to announce

        Returns:
            Handle of the sent message, or None if sending failed
        """
        chat_id = self.config.chat_id
        photo = self.config.photo_path or stream_info.image

        try:
            message_id = await self.client.send_photo(
                chat_id,
                photo,
                build_caption(stream_info),
                keyboard=self.build_keyboard(stream_info),
            )
        except Exception as e:
            logger.error(f"Error sending Telegram notification: {e}")
            message_id = None

        if message_id is None:
            self.stats["failed"] += 1
            logger.error(f"Live notification for {stream_info.username} was not sent")
            return None

        self.stats["sent"] += 1
        handle = MessageHandle(chat_id=chat_id, message_id=message_id)
        logger.info(f"Live notification sent for {stream_info.username} (message {message_id})")

        self.schedule_deletion(handle)
        return handle

    def schedule_deletion(self, handle: MessageHandle) -> ScheduledDeletion:
        """Schedule removal of a sent notification after the configured delay."""
        return self.scheduler.schedule(handle, self.config.delete_after_seconds)

    def get_stats(self) -> Dict[str, int]:
        """
        Get notification statistics.

        Returns:
            Dictionary with statistics
        """
        return self.stats.copy()

    def reset_stats(self) -> None:
        """Reset notification statistics."""
        self.stats = {
            "sent": 0,
            "failed": 0,
        }
