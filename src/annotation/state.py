"""In-memory set of region ids a reviewer has disabled.

This is a mock persistence layer: state lives for the process lifetime and
is lost on restart. The gateway constructs one store at startup and injects
it into request handlers; tests build their own instances.
"""

from __future__ import annotations

import threading
from typing import Iterable


class DisabledRegionStore:
    """Thread-safe, insertion-ordered set of disabled region ids."""

    def __init__(self, initial: Iterable[str] = ()) -> None:
        # dict keys keep insertion order for snapshot()
        self._ids: dict[str, None] = dict.fromkeys(initial)
        self._lock = threading.Lock()

    def set_disabled(self, region_id: str, disabled: bool) -> None:
        with self._lock:
            self._apply(region_id, disabled)

    def set_many_disabled(self, region_ids: Iterable[str], disabled: bool) -> None:
        with self._lock:
            for region_id in region_ids:
                self._apply(region_id, disabled)

    def is_disabled(self, region_id: str) -> bool:
        with self._lock:
            return region_id in self._ids

    def clear(self) -> None:
        with self._lock:
            self._ids.clear()

    def snapshot(self) -> list[str]:
        with self._lock:
            return list(self._ids)

    def __len__(self) -> int:
        with self._lock:
            return len(self._ids)

    def __contains__(self, region_id: object) -> bool:
        with self._lock:
            return region_id in self._ids

    def _apply(self, region_id: str, disabled: bool) -> None:
        if disabled:
            self._ids[region_id] = None
        else:
            self._ids.pop(region_id, None)
