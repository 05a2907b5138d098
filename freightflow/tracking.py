"""Per-draft record of which fields a user has touched."""

from __future__ import annotations

from typing import FrozenSet, Iterator, Optional, Set


class FieldEditTracker:
    """Set of field paths the user explicitly edited in one draft.

    A name, once added, stays until :meth:`reset` is called for a brand-new
    shipment, even if the user clears the field back to empty. Editing a
    parent path such as ``commodities`` covers every field beneath it. The
    tracker may wrap a set owned elsewhere (the workflow state) so that edits
    travel with draft snapshots.
    """

    def __init__(self, edited: Optional[Set[str]] = None) -> None:
        self._edited: Set[str] = edited if edited is not None else set()

    def mark_edited(self, field_name: str) -> None:
        self._edited.add(field_name)

    def is_edited(self, field_name: str) -> bool:
        """True if ``field_name`` or any dotted parent of it was edited."""
        if field_name in self._edited:
            return True
        parts = field_name.split(".")
        return any(".".join(parts[:i]) in self._edited for i in range(1, len(parts)))

    def reset(self) -> None:
        self._edited.clear()

    @property
    def edited_fields(self) -> FrozenSet[str]:
        return frozenset(self._edited)

    def __contains__(self, field_name: object) -> bool:
        return field_name in self._edited

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._edited))

    def __len__(self) -> int:
        return len(self._edited)
