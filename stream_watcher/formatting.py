"""Conversion of Helix stream objects into notification data."""

from datetime import datetime
from typing import Any, Dict

import pytz

from notifier.models import StreamInfo

START_TIME_FORMAT = "%H:%M %d/%m/%Y"

THUMBNAIL_WIDTH = 1920
THUMBNAIL_HEIGHT = 1080


def format_start_time(started_at: str, timezone_name: str) -> str:
    """Render an ISO 8601 timestamp as ``HH:MM DD/MM/YYYY`` in a timezone.

    Timestamps without an offset are taken as UTC.

    Args:
        started_at: Timestamp such as ``2024-03-05T18:30:00Z``.
        timezone_name: IANA timezone name, e.g. ``Europe/Moscow``.

    Returns:
        Zero-padded local start time.

    Raises:
        ValueError: If the timestamp cannot be parsed.
    """
    value = started_at.strip()
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"

    moment = datetime.fromisoformat(value)
    if moment.tzinfo is None:
        moment = pytz.utc.localize(moment)

    return moment.astimezone(pytz.timezone(timezone_name)).strftime(START_TIME_FORMAT)


def thumbnail_url(
    template: str, width: int = THUMBNAIL_WIDTH, height: int = THUMBNAIL_HEIGHT
) -> str:
    """Fill the ``{width}``/``{height}`` placeholders of a thumbnail URL."""
    return template.replace("{width}", str(width)).replace("{height}", str(height))


def build_stream_info(stream: Dict[str, Any], username: str, timezone_name: str) -> StreamInfo:
    """Build the notification view of a live stream.

    Args:
        stream: One entry of the Helix ``/streams`` response.
        username: Channel login, used for the caption and the watch link.
        timezone_name: Timezone for the start time.

    Raises:
        KeyError: If ``started_at`` is missing.
        ValueError: If ``started_at`` or ``viewer_count`` is malformed.
    """
    return StreamInfo(
        username=username,
        title=stream.get("title") or "",
        category=stream.get("game_name") or "",
        start_time=format_start_time(stream["started_at"], timezone_name),
        image=thumbnail_url(stream.get("thumbnail_url") or ""),
        viewers=int(stream.get("viewer_count") or 0),
    )
