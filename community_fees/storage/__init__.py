"""Key-value persistence backends.

Every backend offers ``get(key)``, ``set(key, value)`` and ``remove(key)``
over JSON-serializable values. Unreadable values read back as None.
"""

from typing import Any, Protocol

from community_fees.config import StorageConfig
from community_fees.storage.json_file import JsonFileStorage
from community_fees.storage.memory import MemoryStorage


class Storage(Protocol):
    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...

    def remove(self, key: str) -> None: ...


def create_storage(config: StorageConfig) -> Storage:
    """Build the backend selected by ``config.backend``."""
    if config.backend == "json":
        return JsonFileStorage(config.data_dir)
    return MemoryStorage()


__all__ = ["JsonFileStorage", "MemoryStorage", "Storage", "create_storage"]
