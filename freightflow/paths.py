"""Helpers for reading and writing dotted paths inside nested drafts.

Paths look like ``consignee.address.postalCd`` or ``commodities.0.pieceCnt``;
numeric segments index into lists.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Mapping

_MISSING = object()


def split_path(path: str) -> List[str]:
    return [part for part in path.split(".") if part]


def get_path(data: Any, path: str, default: Any = None) -> Any:
    """Return the value at ``path`` or ``default`` when any segment is absent."""
    current = data
    for part in split_path(path):
        if isinstance(current, Mapping):
            current = current.get(part, _MISSING)
        elif isinstance(current, list) and part.isdigit():
            index = int(part)
            current = current[index] if index < len(current) else _MISSING
        else:
            return default
        if current is _MISSING:
            return default
    return current


def set_path(data: Dict[str, Any], path: str, value: Any) -> None:
    """Write ``value`` at ``path``, creating intermediate dicts and list slots."""
    parts = split_path(path)
    if not parts:
        raise ValueError("empty field path")
    current: Any = data
    for part, following in zip(parts, parts[1:]):
        container = {} if not following.isdigit() else []
        if isinstance(current, list):
            index = int(part)
            while len(current) <= index:
                current.append({} if not following.isdigit() else [])
            if not isinstance(current[index], (dict, list)):
                current[index] = container
            current = current[index]
        else:
            nxt = current.get(part)
            if not isinstance(nxt, (dict, list)):
                nxt = container
                current[part] = nxt
            current = nxt
    last = parts[-1]
    if isinstance(current, list):
        index = int(last)
        while len(current) <= index:
            current.append(None)
        current[index] = value
    else:
        current[last] = value


def is_empty(value: Any) -> bool:
    """``None``, blank strings and empty containers count as empty; 0 does not."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (dict, list, tuple, set)):
        return len(value) == 0
    return False


def apply_patch(draft: Mapping[str, Any], patch: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a deep copy of ``draft`` with every ``{path: value}`` in ``patch`` written."""
    patched = copy.deepcopy(dict(draft))
    for path, value in patch.items():
        set_path(patched, path, copy.deepcopy(value))
    return patched
