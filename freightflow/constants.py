"""Fixed identifiers shared across the workflow engine."""

from __future__ import annotations

DEFAULT_SESSION_KEY = "freightflow:workflow-draft"
DEFAULT_STALENESS_SECONDS = 60 * 60
DEFAULT_TOKEN_GRACE_SECONDS = 10 * 60
DEFAULT_CARRIERS = ("estes", "xpo")

RATE_QUOTE = 1
BILL_OF_LADING = 2
PICKUP_REQUEST = 3
SUMMARY = 4
