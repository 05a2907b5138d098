"""Key/value backend interface for draft snapshots."""

from __future__ import annotations

import abc
from typing import Optional


class StorageError(Exception):
    """A backend could not complete a read, write or delete."""


class StorageQuotaExceeded(StorageError):
    """A backend refused a write because it is full."""


class KeyValueBackend(metaclass=abc.ABCMeta):
    """Abstract string key/value store."""

    name: str = "backend"

    @abc.abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the stored value or ``None``."""
        raise NotImplementedError

    @abc.abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        raise NotImplementedError

    @abc.abstractmethod
    async def delete(self, key: str) -> None:
        """Remove ``key``; missing keys are ignored."""
        raise NotImplementedError

    async def close(self) -> None:
        """Release connections (no-op by default)."""
        pass
