"""In-memory key/value backend."""

from __future__ import annotations

from typing import Dict, Optional

from .base import KeyValueBackend, StorageQuotaExceeded


class InMemoryBackend(KeyValueBackend):
    """Store snapshots in local memory.

    Useful for tests or when no durable store is configured. ``max_bytes``
    emulates a storage quota: writes that would exceed it are refused.
    """

    name = "inmemory"

    def __init__(self, max_bytes: Optional[int] = None) -> None:
        self._data: Dict[str, str] = {}
        self.max_bytes = max_bytes

    def _size_with(self, key: str, value: str) -> int:
        total = sum(
            len(k) + len(v.encode("utf-8")) for k, v in self._data.items() if k != key
        )
        return total + len(key) + len(value.encode("utf-8"))

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        if self.max_bytes is not None and self._size_with(key, value) > self.max_bytes:
            raise StorageQuotaExceeded(
                f"writing {key} would exceed the {self.max_bytes} byte quota"
            )
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._data
