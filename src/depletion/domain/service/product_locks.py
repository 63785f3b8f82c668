"""Per-product mutual exclusion.

Every read-check-write sequence on a product (recording usage, editing,
removing) runs while holding that product's lock. Locks for different
products are independent.

An entry lives only while some caller holds or waits on it, so ids that
never resolve to a product leave nothing behind.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.users = 0


class ProductLocks:

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, _Entry] = {}

    @contextmanager
    def hold(self, product_id: str) -> Iterator[None]:
        entry = self._acquire_entry(product_id)
        try:
            with entry.lock:
                yield
        finally:
            self._release_entry(product_id, entry)

    def _acquire_entry(self, product_id: str) -> _Entry:
        with self._guard:
            entry = self._locks.get(product_id)
            if entry is None:
                entry = self._locks[product_id] = _Entry()
            entry.users += 1
            return entry

    def _release_entry(self, product_id: str, entry: _Entry) -> None:
        with self._guard:
            entry.users -= 1
            if entry.users == 0:
                del self._locks[product_id]
