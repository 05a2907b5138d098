"""Automatic population of step drafts from order data."""

from __future__ import annotations

from .resolver import AutoPopulationResolver, AutoPopulationRule, can_populate, normalize_key
from .rules import BILL_OF_LADING_RULES, DEFAULT_RULES, RATE_QUOTE_RULES

__all__ = [
    "AutoPopulationResolver",
    "AutoPopulationRule",
    "BILL_OF_LADING_RULES",
    "DEFAULT_RULES",
    "RATE_QUOTE_RULES",
    "can_populate",
    "normalize_key",
]
