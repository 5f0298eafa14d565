"""
Telegram Bot API client with inline keyboard support.

Sends photo notifications with an HTML caption and inline buttons to a
channel, and deletes them again by message id.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import aiohttp

from notifier.config import NotificationConfig

logger = logging.getLogger(__name__)

ChatId = Union[int, str]


class InlineKeyboard:
    """Builder for Telegram inline keyboard markup."""

    def __init__(self) -> None:
        self.rows: List[List[Dict[str, str]]] = []

    def add_url_button(self, text: str, url: str, new_row: bool = True) -> "InlineKeyboard":
        """
        Add a button that opens a URL.

        Args:
            text: Button label
            url: Target URL
            new_row: Start a new row instead of appending to the last one

        Returns:
            Self for method chaining
        """
        button = {"text": text, "url": url}
        if new_row or not self.rows:
            self.rows.append([button])
        else:
            self.rows[-1].append(button)
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert keyboard to the ``reply_markup`` structure."""
        return {"inline_keyboard": self.rows}


class TelegramClient:
    """Telegram Bot API client."""

    def __init__(self, config: NotificationConfig):
        """
        Initialize Telegram client.

        Args:
            config: Notification configuration
        """
        self.config = config

    async def send_photo(
        self,
        chat_id: ChatId,
        photo: Union[str, Path],
        caption: str,
        keyboard: Optional[InlineKeyboard] = None,
    ) -> Optional[int]:
        """
        Send a photo with caption to a chat.

        Args:
            chat_id: Destination chat id or ``@channel`` username
            photo: Remote image URL, or a local file to upload
            caption: Caption text, formatted according to ``parse_mode``
            keyboard: Optional inline keyboard

        Returns:
            The sent message id, or None if sending failed
        """
        if not self.config.bot_token:
            logger.warning("Telegram bot token not configured")
            return None

        url = self.config.method_url("sendPhoto")
        request_kwargs: Dict[str, Any]

        if isinstance(photo, Path):
            try:
                photo_bytes = photo.read_bytes()
            except OSError as e:
                logger.error(f"Cannot read notification photo {photo}: {e}")
                return None

            form = aiohttp.FormData()
            form.add_field("chat_id", str(chat_id))
            form.add_field("caption", caption)
            form.add_field("parse_mode", self.config.parse_mode)
            if keyboard:
                form.add_field("reply_markup", json.dumps(keyboard.to_dict()))
            form.add_field("photo", photo_bytes, filename=photo.name)
            request_kwargs = {"data": form}
        else:
            payload: Dict[str, Any] = {
                "chat_id": chat_id,
                "photo": photo,
                "caption": caption,
                "parse_mode": self.config.parse_mode,
            }
            if keyboard:
                payload["reply_markup"] = keyboard.to_dict()
            request_kwargs = {"json": payload}

        result = await self._post("sendPhoto", url, **request_kwargs)
        if result is None:
            return None

        try:
            return int(result["message_id"])
        except (KeyError, TypeError, ValueError):
            logger.error(f"Telegram sendPhoto returned no message id: {result}")
            return None

    async def delete_message(self, chat_id: ChatId, message_id: int) -> bool:
        """
        Delete a previously sent message.

        Args:
            chat_id: Chat the message was sent to
            message_id: Id returned by the send call

        Returns:
            True if successful, False otherwise
        """
        url = self.config.method_url("deleteMessage")
        result = await self._post(
            "deleteMessage", url, json={"chat_id": chat_id, "message_id": message_id}
        )
        return result is not None

    async def _post(self, method: str, url: str, **kwargs: Any) -> Optional[Any]:
        """POST to a Bot API method and return its ``result`` field."""
        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    url,
                    timeout=aiohttp.ClientTimeout(total=self.config.timeout_seconds),
                    **kwargs,
                ) as response:
                    if response.status == 200:
                        data = await response.json()
                        if data.get("ok"):
                            logger.debug(f"Telegram {method} succeeded")
                            return data.get("result", True)
                        logger.error(f"Telegram {method} rejected: {data}")
                        return None
                    elif response.status == 429:
                        data = await response.json()
                        retry_after = data.get("parameters", {}).get("retry_after", 1)
                        logger.warning(f"Telegram rate limit hit, retry after {retry_after}s")
                        return None
                    else:
                        error_text = self._redact(await response.text())
                        logger.error(f"Telegram {method} failed: {response.status} - {error_text}")
                        return None

        except asyncio.TimeoutError:
            logger.error(f"Telegram {method} timed out")
            return None
        except aiohttp.ClientError as e:
            logger.error(f"Telegram {method} failed: {self._redact(str(e))}")
            return None

    def _redact(self, text: str) -> str:
        """Mask the bot token, which is part of every Bot API URL."""
        if not self.config.bot_token:
            return text
        return text.replace(self.config.bot_token, "***")
