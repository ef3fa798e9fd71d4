"""
In-process mutual exclusion keyed by an arbitrary hashable value.

Used to serialize score submissions for the same (board, contestant) pair
while letting submissions for different pairs run concurrently.
"""

import threading
from collections.abc import Hashable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict


@dataclass
class _Slot:
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0


class KeyedLock:
    """
    A lock per key, created on demand and discarded when nobody holds or waits for it.

    Usage:
        locks = KeyedLock()
        with locks.hold((board_id, contestant_id)):
            ...  # read-compare-write for this pair
    """

    def __init__(self):
        self._slots: Dict[Hashable, _Slot] = {}
        self._guard = threading.Lock()

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        with self._guard:
            slot = self._slots.get(key)
            if slot is None:
                slot = self._slots[key] = _Slot()
            slot.users += 1

        try:
            with slot.lock:
                yield
        finally:
            with self._guard:
                slot.users -= 1
                if slot.users == 0:
                    del self._slots[key]

    def __len__(self) -> int:
        """Number of keys currently held or waited on."""
        with self._guard:
            return len(self._slots)


__all__ = ["KeyedLock"]
