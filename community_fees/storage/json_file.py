"""JSON file storage backend: one file per key in a data directory."""

import json
import logging
from pathlib import Path
from typing import Any

from community_fees.exceptions import StorageError

logger = logging.getLogger(__name__)


class JsonFileStorage:
    """Persist values as JSON files."""

    def __init__(self, data_dir: str | Path, pretty: bool = False) -> None:
        """Initialize JSON file storage.

        Parameters
        ----------
        data_dir : str | Path
            Directory holding one ``<key>.json`` file per key.
        pretty : bool
            Pretty-print JSON output.
        """
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.pretty = pretty

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def get(self, key: str) -> Any | None:
        """Return the decoded value under ``key``, or None if missing or unreadable."""
        file_path = self._path(key)
        if not file_path.exists():
            return None
        try:
            with open(file_path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("Discarding unreadable storage file %s", file_path, exc_info=True)
            return None

    def set(self, key: str, value: Any) -> None:
        """Write ``value`` to the file for ``key``."""
        file_path = self._path(key)
        try:
            encoded = json.dumps(value, indent=2 if self.pretty else None, ensure_ascii=False)
            with open(file_path, "w", encoding="utf-8") as f:
                f.write(encoded)
        except (OSError, TypeError, ValueError) as exc:
            raise StorageError(f"Cannot write {file_path}: {exc}") from exc

    def remove(self, key: str) -> None:
        """Delete the file for ``key`` if present."""
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Cannot remove {key}: {exc}") from exc

    def keys(self) -> list[str]:
        return sorted(p.stem for p in self.data_dir.glob("*.json"))
