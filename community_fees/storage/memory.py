"""In-memory key-value storage backend."""

import json
import logging
from typing import Any

from community_fees.exceptions import StorageError

logger = logging.getLogger(__name__)


class MemoryStorage:
    """Key-value storage kept in a dict of encoded JSON strings.

    Values are stored encoded so that reads go through the same decode
    path as a persistent backend.
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        """Initialize memory storage.

        Parameters
        ----------
        initial : dict[str, str] | None
            Pre-encoded JSON values keyed by storage key.
        """
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Any | None:
        """Return the decoded value under ``key``, or None if missing or unreadable."""
        raw = self._data.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding malformed JSON stored under %s", key)
            return None

    def set(self, key: str, value: Any) -> None:
        """Encode ``value`` and store it under ``key``."""
        try:
            self._data[key] = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise StorageError(f"Cannot encode value for {key}: {exc}") from exc

    def remove(self, key: str) -> None:
        """Remove ``key`` if present."""
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)
