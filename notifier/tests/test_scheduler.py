"""Tests for deferred message deletion."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from notifier.models import MessageHandle
from notifier.scheduler import DeletionScheduler
from notifier.telegram import TelegramClient


@pytest.fixture
def client():
    """Telegram client whose deletes succeed."""
    client = MagicMock(spec=TelegramClient)
    client.delete_message = AsyncMock(return_value=True)
    return client


@pytest.fixture
def scheduler(client):
    return DeletionScheduler(client)


class TestDeletionScheduler:
    """Test DeletionScheduler class."""

    @pytest.mark.asyncio
    async def test_deletes_after_delay(self, scheduler, client):
        """Test that the message is deleted once the delay elapsed."""
        handle = MessageHandle(chat_id="@channel", message_id=10)

        deletion = scheduler.schedule(handle, 0.01)
        client.delete_message.assert_not_called()

        assert await deletion.wait() is True
        client.delete_message.assert_awaited_once_with("@channel", 10)
        assert deletion.done

    @pytest.mark.asyncio
    async def test_delete_failure_is_swallowed(self, scheduler, client):
        """Test that a failed delete is logged and reported, not raised."""
        client.delete_message.return_value = False

        deletion = scheduler.schedule(MessageHandle("@channel", 11), 0)

        assert await deletion.wait() is False

    @pytest.mark.asyncio
    async def test_unexpected_error_is_swallowed(self, scheduler, client):
        """Test that an unexpected exception does not escape the task."""
        client.delete_message.side_effect = RuntimeError("boom")

        deletion = scheduler.schedule(MessageHandle("@channel", 12), 0)

        assert await deletion.wait() is False

    @pytest.mark.asyncio
    async def test_cancel(self, scheduler, client):
        """Test cancelling a pending deletion."""
        deletion = scheduler.schedule(MessageHandle("@channel", 13), 3600)
        await asyncio.sleep(0)

        assert deletion.cancel() is True
        assert await deletion.wait() is None
        assert deletion.cancelled
        client.delete_message.assert_not_called()

    @pytest.mark.asyncio
    async def test_pending_tracking(self, scheduler):
        """Test that finished deletions leave the pending list."""
        long_wait = scheduler.schedule(MessageHandle("@channel", 14), 3600)
        short_wait = scheduler.schedule(MessageHandle("@channel", 15), 0)

        await short_wait.wait()
        await asyncio.sleep(0)

        assert scheduler.pending == [long_wait]
        long_wait.cancel()

    @pytest.mark.asyncio
    async def test_cancel_all(self, scheduler, client):
        """Test cancelling every pending deletion."""
        deletions = [scheduler.schedule(MessageHandle("@channel", i), 3600) for i in range(3)]
        await asyncio.sleep(0)

        assert scheduler.cancel_all() == 3
        for deletion in deletions:
            assert await deletion.wait() is None
        client.delete_message.assert_not_called()

