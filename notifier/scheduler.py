"""
Deferred deletion of sent notifications.

Every sent notification gets one independent one-shot task that sleeps for
the configured delay and then deletes the message. Failures are logged and
never propagate to the caller.
"""

import asyncio
import logging
from typing import List, Optional, Set

from notifier.models import MessageHandle
from notifier.telegram import TelegramClient

logger = logging.getLogger(__name__)


class ScheduledDeletion:
    """Handle for one pending message deletion."""

    def __init__(self, handle: MessageHandle, delay: float, task: "asyncio.Task[bool]"):
        self.handle = handle
        self.delay = delay
        self._task = task

    @property
    def done(self) -> bool:
        """Whether the deletion has run, failed, or been cancelled."""
        return self._task.done()

    @property
    def cancelled(self) -> bool:
        return self._task.cancelled()

    def cancel(self) -> bool:
        """
        Cancel the deletion if it has not run yet.

        Returns:
            True if the pending task was cancelled
        """
        return self._task.cancel()

    async def wait(self) -> Optional[bool]:
        """Wait for the deletion and return whether the message was removed."""
        try:
            return await self._task
        except asyncio.CancelledError:
            return None

    def __repr__(self) -> str:
        return (
            f"ScheduledDeletion(chat_id={self.handle.chat_id!r}, "
            f"message_id={self.handle.message_id}, delay={self.delay}, done={self.done})"
        )


class DeletionScheduler:
    """Schedules message deletions on the running event loop."""

    def __init__(self, client: TelegramClient):
        """
        Initialize the scheduler.

        Args:
            client: Client used to issue the delete calls
        """
        self.client = client
        self._pending: Set[ScheduledDeletion] = set()

    def schedule(self, handle: MessageHandle, delay: float) -> ScheduledDeletion:
        """
        Schedule deletion of a message after ``delay`` seconds.

        Must be called from within a running event loop.

        Args:
            handle: Message to delete
            delay: Seconds to wait before deleting

        Returns:
            ScheduledDeletion that can be awaited or cancelled
        """
        task = asyncio.create_task(self._delete_later(handle, delay))
        deletion = ScheduledDeletion(handle, delay, task)
        self._pending.add(deletion)
        task.add_done_callback(lambda _: self._pending.discard(deletion))

        logger.info(f"Message {handle.message_id} scheduled for deletion in {delay:.0f}s")
        return deletion

    async def _delete_later(self, handle: MessageHandle, delay: float) -> bool:
        try:
            await asyncio.sleep(delay)
        except asyncio.CancelledError:
            logger.info(f"Deletion of message {handle.message_id} cancelled")
            raise

        try:
            deleted = await self.client.delete_message(handle.chat_id, handle.message_id)
        except Exception as e:
            logger.error(f"Unexpected error deleting message {handle.message_id}: {e}")
            return False

        if deleted:
            logger.info(f"Message {handle.message_id} deleted")
        else:
            logger.error(f"Failed to delete message {handle.message_id}, leaving it in place")
        return deleted

    @property
    def pending(self) -> List[ScheduledDeletion]:
        """Deletions that have not completed yet."""
        return [deletion for deletion in self._pending if not deletion.done]

    def cancel_all(self) -> int:
        """
        Cancel every pending deletion.

        Returns:
            Number of deletions cancelled
        """
        cancelled = 0
        for deletion in list(self._pending):
            if deletion.cancel():
                cancelled += 1
        if cancelled:
            logger.warning(f"Cancelled {cancelled} pending message deletion(s)")
        return cancelled
