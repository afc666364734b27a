"""
The shared requirements registry.

One RequirementRegistry exists per application and every connection
handler works against that same instance. None of the methods await, so
on a single event loop a mutation always runs to completion before the
next message is looked at. If handlers are ever spread across threads,
put a lock around this object.
"""

import copy
from collections.abc import Iterable

from bulletin.store import Registry


class RequirementRegistry:
    """LRN -> ordered, duplicate-free list of outstanding requirements."""

    def __init__(self, data: Registry | None = None):
        self._data: Registry = {}
        for lrn, reqs in (data or {}).items():
            # Persisted data isn't schema-checked. Normalise items to names and
            # drop duplicates so every list starts out clean.
            self._data[lrn] = _dedupe(_as_names(reqs))

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, lrn: object) -> bool:
        return lrn in self._data

    def snapshot(self) -> Registry:
        """Deep copy of the whole mapping, for sending or saving."""
        return copy.deepcopy(self._data)

    def lookup(self, lrn: str) -> list[str] | None:
        reqs = self._data.get(lrn)
        return list(reqs) if reqs is not None else None

    # -- Mutations --------------------------------------------------------

    def add_requirements(self, lrns: Iterable[str], reqs: Iterable[str]) -> None:
        """Append each requirement to each LRN, skipping ones already listed.

        Unknown LRNs are created. Order of first appearance is kept, so the
        same requirement sent twice in one call is only added once.
        """
        reqs = list(reqs)
        for lrn in lrns:
            current = self._data.setdefault(lrn, [])
            for req in reqs:
                if req not in current:
                    current.append(req)

    def clear_requirements(self, lrns: Iterable[str]) -> None:
        """Empty the list of every LRN present; the LRN itself stays."""
        for lrn in lrns:
            if lrn in self._data:
                self._data[lrn] = []

    def remove_students(self, lrns: Iterable[str]) -> None:
        for lrn in lrns:
            self._data.pop(lrn, None)

    def remove_requirement(self, lrn: str, idx: int) -> bool:
        """Drop the requirement at position `idx`. Returns True if one was removed."""
        reqs = self._data.get(lrn)
        if reqs is None or not 0 <= idx < len(reqs):
            return False
        del reqs[idx]
        return True


def _as_names(reqs: object) -> list[str]:
    """Requirement names from a persisted value: strings kept, numbers stringified, the rest dropped."""
    if not isinstance(reqs, list):
        return []
    names = []
    for item in reqs:
        if isinstance(item, str):
            names.append(item)
        elif isinstance(item, (int, float)) and not isinstance(item, bool):
            names.append(str(item))
    return names


def _dedupe(items: list) -> list:
    seen: list = []
    for item in items:
        if item not in seen:
            seen.append(item)
    return seen
