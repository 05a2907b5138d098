"""Carrier token access used to detect authentication expiry."""

from __future__ import annotations

import logging
import time
from typing import Awaitable, Callable, Dict, Optional, Protocol

from pydantic import BaseModel

logger = logging.getLogger(__name__)

TokenRefresher = Callable[[str], Awaitable[Optional[str]]]

_CARRIER_ALIASES = {"expo": "xpo"}


def normalize_carrier(carrier: str) -> str:
    name = carrier.strip().lower()
    return _CARRIER_ALIASES.get(name, name)


class TokenAccessor(Protocol):
    """What the workflow needs to know about carrier authentication."""

    def get(self, carrier_id: str) -> Optional[str]:
        """Return the current token for ``carrier_id`` if any."""

    def is_expired(self, carrier_id: str, grace_seconds: float) -> bool:
        """True when no token exists or it is older than ``grace_seconds``."""

    async def refresh(self, carrier_id: str) -> bool:
        """Try to obtain a new token; report success."""

    def is_session_active(self) -> bool:
        """False once the user closed or left the session."""


class CarrierToken(BaseModel):
    token: str
    shipping_company_name: str = ""
    issued_at: float


class InMemoryTokenStore(TokenAccessor):
    """Tokens per carrier held in process memory.

    ``xpo`` and ``expo`` share one slot. Refreshing delegates to an injected
    coroutine that returns the new token, or ``None`` when the carrier refused.
    """

    def __init__(
        self,
        refresher: Optional[TokenRefresher] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._tokens: Dict[str, CarrierToken] = {}
        self._refresher = refresher
        self._clock = clock
        self._session_active = False

    def set_token(self, carrier_id: str, token: str, shipping_company_name: str = "") -> None:
        self._tokens[normalize_carrier(carrier_id)] = CarrierToken(
            token=token,
            shipping_company_name=shipping_company_name,
            issued_at=self._clock(),
        )

    def clear_token(self, carrier_id: str) -> None:
        self._tokens.pop(normalize_carrier(carrier_id), None)

    def clear_all(self) -> None:
        self._tokens.clear()

    def get(self, carrier_id: str) -> Optional[str]:
        record = self._tokens.get(normalize_carrier(carrier_id))
        return record.token if record else None

    def is_expired(self, carrier_id: str, grace_seconds: float) -> bool:
        record = self._tokens.get(normalize_carrier(carrier_id))
        if record is None:
            return True
        return self._clock() - record.issued_at > grace_seconds

    async def refresh(self, carrier_id: str) -> bool:
        carrier = normalize_carrier(carrier_id)
        if self._refresher is None:
            logger.warning(f"No token refresher configured for {carrier}")
            return False
        try:
            token = await self._refresher(carrier)
        except Exception as e:
            logger.warning(f"Token refresh failed for {carrier}: {e}")
            return False
        if not token:
            logger.warning(f"Token refresh for {carrier} returned no token")
            return False
        previous = self._tokens.get(carrier)
        self.set_token(
            carrier, token, previous.shipping_company_name if previous else ""
        )
        logger.info(f"Refreshed token for {carrier}")
        return True

    def mark_session_active(self) -> None:
        self._session_active = True

    def end_session(self) -> None:
        self._session_active = False

    def is_session_active(self) -> bool:
        return self._session_active
