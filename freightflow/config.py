from __future__ import annotations

import os
from typing import List, Literal, Optional

import yaml
from pydantic import BaseModel

from .constants import (
    DEFAULT_CARRIERS,
    DEFAULT_SESSION_KEY,
    DEFAULT_STALENESS_SECONDS,
    DEFAULT_TOKEN_GRACE_SECONDS,
)

BackendName = Literal["inmemory", "sqlite", "redis", "none"]


class RedisConfig(BaseModel):
    """Configuration for the Redis draft backend."""

    host: str = "localhost"
    port: int = 6379
    db: int = 0
    password: Optional[str] = None
    ttl_seconds: Optional[int] = DEFAULT_STALENESS_SECONDS


class DraftStoreConfig(BaseModel):
    """Snapshot storage settings."""

    primary: BackendName = "inmemory"
    fallback: BackendName = "none"
    sqlite_path: str = "freightflow-drafts.db"
    redis: RedisConfig = RedisConfig()
    session_key: str = DEFAULT_SESSION_KEY
    staleness_seconds: int = DEFAULT_STALENESS_SECONDS


class AuthConfig(BaseModel):
    """Carrier token expiry settings."""

    carriers: List[str] = list(DEFAULT_CARRIERS)
    grace_seconds: int = DEFAULT_TOKEN_GRACE_SECONDS


class FreightflowConfig(BaseModel):
    """Top-level configuration model."""

    draft_store: DraftStoreConfig = DraftStoreConfig()
    auth: AuthConfig = AuthConfig()


def load_config(path: Optional[str] = None) -> FreightflowConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to FREIGHTFLOW_CONFIG env
            variable or 'config.yaml' in the current directory.
    """

    config_path = path or os.getenv("FREIGHTFLOW_CONFIG", "config.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = FreightflowConfig(**data)
    else:
        config = FreightflowConfig()

    env_backend = os.getenv("FREIGHTFLOW_DRAFT_BACKEND")
    if env_backend:
        config.draft_store.primary = env_backend.lower()
    return config
