"""Authentication expiry interaction for the workflow."""

from __future__ import annotations

from .tokens import CarrierToken, InMemoryTokenStore, TokenAccessor, normalize_carrier

__all__ = ["CarrierToken", "InMemoryTokenStore", "TokenAccessor", "normalize_carrier"]
