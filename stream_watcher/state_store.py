"""File-backed store for the last notified broadcast id.

The file holds exactly one identifier and nothing else. Access is sequential
from the poller only, so there is no locking and writes are not atomic.
"""

import logging
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


class StateStore:
    """Persists the id of the most recently notified broadcast."""

    def __init__(self, path: Union[str, Path]):
        """Initialize the store.

        Args:
            path: File holding the identifier. Created on first save.
        """
        self.path = Path(path)

    def load(self) -> Optional[str]:
        """Read the persisted identifier.

        Returns:
            The identifier stripped of surrounding whitespace, or None if the
            file is missing or empty.
        """
        try:
            value = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        return value or None

    def save(self, stream_id: str) -> None:
        """Overwrite the file with exactly ``stream_id``."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(stream_id, encoding="utf-8")
        logger.debug(f"Saved last stream id {stream_id} to {self.path}")

    def clear(self) -> None:
        """Remove the persisted identifier."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            return
        logger.debug(f"Cleared last stream id at {self.path}")
