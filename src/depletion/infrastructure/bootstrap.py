"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from depletion.domain.repository.unit_of_work import UnitOfWork
from depletion.domain.service.depletion_tracker import DepletionTracker, utcnow
from depletion.domain.service.product_locks import ProductLocks
from depletion.domain.service.rate_estimator import DEFAULT_RATE_STRATEGY, RateStrategy
from depletion.infrastructure.persistence.json_unit_of_work import JsonUnitOfWork
from depletion.infrastructure.settings import Settings

# One lock registry per process: every entry point must share it for the
# per-product serialization to hold.
_PRODUCT_LOCKS = ProductLocks()


@dataclass(frozen=True)
class Container:
    uow_factory: Callable[[], UnitOfWork]
    locks: ProductLocks = field(default_factory=lambda: _PRODUCT_LOCKS)
    rate_strategy: RateStrategy = DEFAULT_RATE_STRATEGY
    clock: Callable[[], datetime] = utcnow

    def tracker(self) -> DepletionTracker:
        return DepletionTracker(
            uow_factory=self.uow_factory,
            locks=self.locks,
            strategy=self.rate_strategy,
            clock=self.clock,
        )


def build_container(settings: Settings | None = None) -> Container:
    settings = settings or Settings.from_env()
    store_file = settings.store_file
    return Container(
        uow_factory=lambda: JsonUnitOfWork(store_file),
        locks=_PRODUCT_LOCKS,
        rate_strategy=settings.rate_strategy,
    )
