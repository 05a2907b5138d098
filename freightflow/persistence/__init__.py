"""Persistence layer for workflow draft snapshots."""

from __future__ import annotations

import os
from typing import Optional

from ..config import FreightflowConfig, load_config
from .base import KeyValueBackend, StorageError, StorageQuotaExceeded
from .draft_store import DraftStore, epoch_millis
from .inmemory import InMemoryBackend
from .sqlite import SQLiteBackend

_draft_store_instance: DraftStore | None = None


def get_backend(
    name: str, config: Optional[FreightflowConfig] = None
) -> Optional[KeyValueBackend]:
    """Build the backend called ``name``; ``"none"`` yields ``None``."""

    config = config or load_config()
    settings = config.draft_store
    name = name.lower()

    if name == "none":
        return None
    if name == "inmemory":
        return InMemoryBackend()
    if name == "sqlite":
        return SQLiteBackend(settings.sqlite_path)
    if name == "redis":
        from .redis import RedisBackend

        return RedisBackend(
            host=settings.redis.host,
            port=settings.redis.port,
            db=settings.redis.db,
            password=settings.redis.password,
            ttl_seconds=settings.redis.ttl_seconds,
        )
    raise ValueError(f"Unsupported draft backend: {name}")


def get_draft_store(
    backend: Optional[str] = None, config: Optional[FreightflowConfig] = None
) -> DraftStore:
    """Factory function to obtain the configured draft store.

    The primary backend is taken from ``backend``, the
    ``FREIGHTFLOW_DRAFT_BACKEND`` environment variable, or configuration, in
    that order. Without explicit arguments the process-wide instance is reused.
    """

    global _draft_store_instance
    if _draft_store_instance is not None and backend is None and config is None:
        return _draft_store_instance

    config = config or load_config()
    settings = config.draft_store
    primary_name = backend or os.getenv("FREIGHTFLOW_DRAFT_BACKEND") or settings.primary
    primary = get_backend(primary_name, config)
    if primary is None:
        raise ValueError("A primary draft backend is required")

    _draft_store_instance = DraftStore(
        primary,
        fallback=get_backend(settings.fallback, config),
        key=settings.session_key,
        staleness_seconds=settings.staleness_seconds,
    )
    return _draft_store_instance


__all__ = [
    "DraftStore",
    "InMemoryBackend",
    "KeyValueBackend",
    "SQLiteBackend",
    "StorageError",
    "StorageQuotaExceeded",
    "epoch_millis",
    "get_backend",
    "get_draft_store",
]
