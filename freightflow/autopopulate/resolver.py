"""Fill empty, untouched draft fields from loosely keyed order records."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Sequence, Tuple

from ..paths import apply_patch, get_path, is_empty
from ..tracking import FieldEditTracker

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^0-9a-z]")


def normalize_key(key: Any) -> str:
    """Lowercase ``key`` and drop everything but letters and digits.

    ``"Ship to Zip Code"``, ``"ship_to_zip_code"`` and ``"SHIP-TO ZIP CODE"``
    all normalise to ``"shiptozipcode"``.
    """
    return _NON_ALNUM.sub("", str(key).lower())


def can_populate(
    draft: Mapping[str, Any], target_field: str, tracker: FieldEditTracker
) -> bool:
    """Automatic writes only land on fields that are empty and never edited."""
    if not is_empty(get_path(draft, target_field)):
        return False
    if tracker.is_edited(target_field):
        return False
    return True


@dataclass(frozen=True)
class AutoPopulationRule:
    """How to derive one draft field from an order record."""

    target_field: str
    source_key_candidates: Tuple[str, ...]
    transform: Optional[Callable[[Any], Any]] = None
    fallback_keywords: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "source_key_candidates", tuple(self.source_key_candidates)
        )
        object.__setattr__(self, "fallback_keywords", tuple(self.fallback_keywords))


class SourceIndex:
    """Order record indexed by normalised key, preserving first spelling seen."""

    def __init__(self, record: Optional[Mapping[str, Any]]) -> None:
        self._values: Dict[str, Any] = {}
        self._order: list[Tuple[str, Any]] = []
        if not isinstance(record, Mapping):
            return
        for key, value in record.items():
            normalized = normalize_key(key)
            if is_empty(value):
                continue
            self._order.append((normalized, value))
            self._values.setdefault(normalized, value)

    def lookup(self, candidates: Iterable[str]) -> Any:
        for candidate in candidates:
            value = self._values.get(normalize_key(candidate))
            if value is not None:
                return value
        return None

    def scan(self, keywords: Iterable[str]) -> Any:
        normalized = [normalize_key(k) for k in keywords]
        for key, value in self._order:
            if any(word and word in key for word in normalized):
                return value
        return None


class AutoPopulationResolver:
    """Compute which draft fields an order record may fill.

    ``apply`` never mutates its inputs and returns a flat ``{path: value}``
    patch. Fields that already hold a value, or that the user has edited,
    are left alone, so replaying the same data-arrival event is harmless.
    """

    def apply(
        self,
        source: Optional[Mapping[str, Any]],
        draft: Mapping[str, Any],
        rules: Sequence[AutoPopulationRule],
        tracker: FieldEditTracker,
    ) -> Dict[str, Any]:
        patch: Dict[str, Any] = {}
        if not source:
            return patch

        index = SourceIndex(source)
        resolved: set[str] = set()
        for rule in rules:
            target = rule.target_field
            if target in resolved:
                continue
            if not can_populate(draft, target, tracker):
                logger.debug(f"Skipping auto-fill of {target}: filled or edited")
                continue

            value = index.lookup(rule.source_key_candidates)
            if value is None and rule.fallback_keywords:
                value = index.scan(rule.fallback_keywords)
            if value is None:
                continue

            if rule.transform is not None:
                value = rule.transform(value)
            if is_empty(value):
                continue

            patch[target] = value
            resolved.add(target)

        if patch:
            logger.debug(f"Auto-populated fields: {sorted(patch)}")
        return patch

    def populate(
        self,
        source: Optional[Mapping[str, Any]],
        draft: Mapping[str, Any],
        rules: Sequence[AutoPopulationRule],
        tracker: FieldEditTracker,
    ) -> Dict[str, Any]:
        """Return a new draft with the resolver's patch written into it."""
        return apply_patch(draft, self.apply(source, draft, rules, tracker))
