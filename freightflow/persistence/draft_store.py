"""One-shot snapshot of the whole workflow, kept across a re-login."""

from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional

from ..constants import DEFAULT_SESSION_KEY, DEFAULT_STALENESS_SECONDS
from ..contracts import DraftSnapshot, WorkflowState
from .base import KeyValueBackend

logger = logging.getLogger(__name__)


def epoch_millis() -> int:
    return int(time.time() * 1000)


class DraftStore:
    """Save and resume a WorkflowState through a primary and a fallback tier.

    Only one snapshot lives under ``key`` at a time: ``save`` overwrites it
    (last writer wins) and ``restore`` deletes it on read (first reader wins).
    Neither operation raises; storage faults degrade to "nothing to resume".
    """

    def __init__(
        self,
        primary: KeyValueBackend,
        fallback: Optional[KeyValueBackend] = None,
        key: str = DEFAULT_SESSION_KEY,
        staleness_seconds: int = DEFAULT_STALENESS_SECONDS,
        clock: Callable[[], int] = epoch_millis,
    ) -> None:
        self.primary = primary
        self.fallback = fallback
        self.key = key
        self.staleness_millis = staleness_seconds * 1000
        self._clock = clock

    @property
    def tiers(self) -> List[KeyValueBackend]:
        return [tier for tier in (self.primary, self.fallback) if tier is not None]

    async def save(self, state: WorkflowState) -> bool:
        """Write ``state`` to the first tier that accepts it.

        Returns ``False`` when every tier refused the write.
        """
        snapshot = DraftSnapshot(
            payload=state.model_dump(mode="json"),
            saved_at_epoch_millis=self._clock(),
        )
        data = snapshot.to_json()
        for tier in self.tiers:
            try:
                await tier.set(self.key, data)
            except Exception as e:
                logger.warning(f"Draft save to {tier.name} failed: {e}")
                continue
            await self._discard(exclude=tier)
            logger.info(
                f"Saved workflow draft at step {state.current_step_id} to {tier.name}"
            )
            return True
        logger.error("Draft could not be saved to any tier; resume disabled")
        return False

    async def restore(self) -> Optional[WorkflowState]:
        """Consume the snapshot, returning its state if it is fresh and readable.

        Every tier is read and the most recently saved copy wins, so an older
        copy a failed delete left behind never shadows a newer one.
        """
        raws = await self._read_all()
        if not raws:
            return None

        await self.clear()

        snapshot = self._newest(raws)
        if snapshot is None:
            return None
        try:
            state = snapshot.to_state()
        except ValueError as e:
            logger.warning(f"Discarding unreadable workflow draft: {e}")
            return None

        age = snapshot.age_millis(self._clock())
        if age > self.staleness_millis:
            logger.info(f"Discarding stale workflow draft ({age} ms old)")
            return None

        logger.info(f"Restored workflow draft at step {state.current_step_id}")
        return state

    async def peek(self) -> Optional[DraftSnapshot]:
        """Return the live snapshot without consuming it."""
        return self._newest(await self._read_all())

    async def _read_all(self) -> List[str]:
        raws = []
        for tier in self.tiers:
            try:
                raw = await tier.get(self.key)
            except Exception as e:
                logger.warning(f"Draft read from {tier.name} failed: {e}")
                continue
            if raw is not None:
                raws.append(raw)
        return raws

    def _newest(self, raws: List[str]) -> Optional[DraftSnapshot]:
        newest: Optional[DraftSnapshot] = None
        for raw in raws:
            try:
                snapshot = DraftSnapshot.from_json(raw)
            except ValueError as e:
                logger.warning(f"Discarding unreadable workflow draft: {e}")
                continue
            if (
                newest is None
                or snapshot.saved_at_epoch_millis > newest.saved_at_epoch_millis
            ):
                newest = snapshot
        return newest

    async def clear(self) -> None:
        await self._discard()

    async def _discard(self, exclude: Optional[KeyValueBackend] = None) -> None:
        for tier in self.tiers:
            if tier is exclude:
                continue
            try:
                await tier.delete(self.key)
            except Exception as e:
                logger.warning(f"Draft delete from {tier.name} failed: {e}")

    async def close(self) -> None:
        for tier in self.tiers:
            await tier.close()
