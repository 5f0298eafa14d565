"""
End-to-end integration tests.

These tests run the real poller, credential cache, state file and notifier
against mocked Twitch (httpx via respx) and Telegram (aiohttp) endpoints.
"""

from unittest.mock import AsyncMock, patch

import httpx
import pytest
import respx

from stream_watcher.app import build_poller
from stream_watcher.poller import CheckResult
from stream_watcher.twitch import HELIX_BASE, OAUTH_BASE

TOKEN_URL = f"{OAUTH_BASE}/token"
STREAMS_URL = f"{HELIX_BASE}/streams"


def _telegram_response(status=200, body=None):
    response = AsyncMock()
    response.status = status
    if body is None:
        body = {"ok": True, "result": {"message_id": 77}}
    response.json = AsyncMock(return_value=body)
    response.text = AsyncMock(return_value="error")
    return response


async def _drain_deletions(poller):
    for deletion in poller.notifier.scheduler.pending:
        await deletion.wait()


@pytest.fixture
def notification_config(notification_config):
    notification_config.delete_after_seconds = 0.01
    return notification_config


@pytest.mark.integration
@pytest.mark.asyncio
class TestEndToEndWorkflow:
    """Test the complete check, notify and delete workflow."""

    async def test_stream_announced_once_and_deleted(
        self, watcher_config, notification_config, sample_stream
    ):
        """
        Test complete workflow:
        1. Token is requested
        2. Live broadcast is announced with the expected photo and caption
        3. Broadcast id is persisted
        4. Repeated polls stay silent
        5. Message is deleted after the delay
        """
        poller = build_poller(watcher_config, notification_config)

        with respx.mock:
            token_route = respx.post(TOKEN_URL).mock(
                return_value=httpx.Response(200, json={"access_token": "tok-1"})
            )
            respx.get(STREAMS_URL).mock(
                return_value=httpx.Response(200, json={"data": [sample_stream]})
            )

            with patch("aiohttp.ClientSession.post") as mock_post:
                mock_post.return_value.__aenter__.return_value = _telegram_response()

                assert await poller.check_once() is CheckResult.NOTIFIED
                assert await poller.check_once() is CheckResult.ALREADY_NOTIFIED

                assert mock_post.call_count == 1
                send_url = mock_post.call_args_list[0].args[0]
                payload = mock_post.call_args_list[0].kwargs["json"]
                assert send_url.endswith("/sendPhoto")
                assert payload["chat_id"] == "@testchannel_news"
                assert payload["photo"] == "https://x/1920x1080.jpg"
                assert payload["parse_mode"] == "HTML"
                assert "testchannel" in payload["caption"]
                assert "42" in payload["caption"]
                assert "21:30 05/03/2024" in payload["caption"]
                button = payload["reply_markup"]["inline_keyboard"][0][0]
                assert button["url"] == "https://www.twitch.tv/testchannel"

                (deletion,) = poller.notifier.scheduler.pending
                assert await deletion.wait() is True

                delete_call = mock_post.call_args_list[1]
                assert delete_call.args[0].endswith("/deleteMessage")
                assert delete_call.kwargs["json"] == {
                    "chat_id": "@testchannel_news",
                    "message_id": 77,
                }

            assert token_route.call_count == 1

        assert watcher_config.state_file.read_text() == "111"
        await poller.twitch.close()

    async def test_expired_token_renewed(self, watcher_config, notification_config, sample_stream):
        """Test that a rejected token is replaced and the next poll announces."""
        poller = build_poller(watcher_config, notification_config)

        with respx.mock:
            token_route = respx.post(TOKEN_URL).mock(
                side_effect=[
                    httpx.Response(200, json={"access_token": "tok-1"}),
                    httpx.Response(200, json={"access_token": "tok-2"}),
                ]
            )
            streams_route = respx.get(STREAMS_URL).mock(
                side_effect=[
                    httpx.Response(401, json={"status": 401, "message": "Invalid OAuth token"}),
                    httpx.Response(200, json={"data": [sample_stream]}),
                ]
            )

            with patch("aiohttp.ClientSession.post") as mock_post:
                mock_post.return_value.__aenter__.return_value = _telegram_response()

                assert await poller.check_once() is CheckResult.REAUTHENTICATED
                mock_post.assert_not_called()

                assert await poller.check_once() is CheckResult.NOTIFIED
                await _drain_deletions(poller)

            assert token_route.call_count == 2
            auth_header = streams_route.calls.last.request.headers["Authorization"]
            assert auth_header == "Bearer tok-2"

        await poller.twitch.close()

    async def test_failed_send_retried(self, watcher_config, notification_config, sample_stream):
        """Test that a failed send leaves no persisted id and is retried."""
        poller = build_poller(watcher_config, notification_config)

        with respx.mock:
            respx.post(TOKEN_URL).mock(
                return_value=httpx.Response(200, json={"access_token": "tok-1"})
            )
            respx.get(STREAMS_URL).mock(
                return_value=httpx.Response(200, json={"data": [sample_stream]})
            )

            with patch("aiohttp.ClientSession.post") as mock_post:
                mock_post.return_value.__aenter__.return_value = _telegram_response(status=500)

                assert await poller.check_once() is CheckResult.SEND_FAILED
                assert not watcher_config.state_file.exists()

                mock_post.return_value.__aenter__.return_value = _telegram_response()

                assert await poller.check_once() is CheckResult.NOTIFIED
                await _drain_deletions(poller)

        assert watcher_config.state_file.read_text() == "111"
        assert poller.notifier.get_stats()["sent"] == 1
        assert poller.notifier.get_stats()["failed"] == 1
        await poller.twitch.close()

    async def test_offline_between_broadcasts(
        self, watcher_config, notification_config, sample_stream
    ):
        """Test that a new broadcast after an offline period is announced."""
        watcher_config.state_file.write_text("100")
        poller = build_poller(watcher_config, notification_config)

        with respx.mock:
            respx.post(TOKEN_URL).mock(
                return_value=httpx.Response(200, json={"access_token": "tok-1"})
            )
            respx.get(STREAMS_URL).mock(
                side_effect=[
                    httpx.Response(200, json={"data": []}),
                    httpx.Response(200, json={"data": [sample_stream]}),
                ]
            )

            with patch("aiohttp.ClientSession.post") as mock_post:
                mock_post.return_value.__aenter__.return_value = _telegram_response()

                assert await poller.check_once() is CheckResult.OFFLINE
                assert watcher_config.state_file.read_text() == "100"

                assert await poller.check_once() is CheckResult.NOTIFIED
                await _drain_deletions(poller)

        assert watcher_config.state_file.read_text() == "111"
        await poller.twitch.close()
