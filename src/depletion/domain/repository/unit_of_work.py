"""Abstract unit of work spanning the product store and the event log.

Writes made through ``products`` and ``usages`` are staged until
``commit()``; they become visible to other units of work together or not at
all. Reads inside the unit see its own staged writes.

Leaving the ``with`` block without committing discards staged writes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from depletion.domain.repository.product_repository import ProductRepository
from depletion.domain.repository.usage_event_log import UsageEventLog


class UnitOfWork(ABC):

    products: ProductRepository
    usages: UsageEventLog

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(self, *exc) -> None:
        self.rollback()

    @abstractmethod
    def commit(self) -> None:
        """Atomically persist staged writes. Raises PersistenceError on failure."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard staged writes."""
