"""Domain service: Depletion Tracker.

Records the consumption of one unit of a product. The whole sequence runs
while holding the product's lock, inside a single unit of work:

  1. load the product (absent, or owned by another store -> not found)
  2. reject if nothing is left in stock
  3. append the usage event
  4. decrement quantity, bump usage_count, stamp last_used
  5. recompute the depletion estimate from the refreshed history
  6. commit product and event together
  7. classify the committed product

Any failure before step 6 completes leaves nothing persisted: the unit of
work discards its staged writes when the ``with`` block exits without a
commit.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

import structlog

from depletion.domain.exceptions import EntityNotFoundError, OutOfStockError
from depletion.domain.model.product import Product
from depletion.domain.model.usage_event import UsageEvent
from depletion.domain.model.value_objects import AlertStatus, StoreScope
from depletion.domain.repository.unit_of_work import UnitOfWork
from depletion.domain.service.alert_classifier import classify
from depletion.domain.service.product_locks import ProductLocks
from depletion.domain.service.rate_estimator import (
    DEFAULT_RATE_STRATEGY,
    RateStrategy,
    estimate_depletion,
)

logger = structlog.get_logger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class UsageRecorded:
    """Outcome of a successful recording."""

    event: UsageEvent
    product: Product
    alert_status: AlertStatus


class DepletionTracker:

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        locks: ProductLocks,
        strategy: RateStrategy = DEFAULT_RATE_STRATEGY,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._uow_factory = uow_factory
        self._locks = locks
        self._strategy = strategy
        self._clock = clock

    def record_usage(
        self,
        scope: StoreScope,
        product_id: str,
        note: str | None = None,
    ) -> UsageRecorded:
        with structlog.contextvars.bound_contextvars(
            store_id=scope.store_id, product_id=product_id
        ):
            with self._locks.hold(product_id):
                with self._uow_factory() as uow:
                    product = uow.products.get_by_id(product_id)
                    if product is None or not scope.owns(product):
                        raise EntityNotFoundError(f"Product '{product_id}' not found")

                    now = self._clock()
                    try:
                        product.consume(now)
                    except OutOfStockError:
                        logger.warning("Usage rejected, product out of stock")
                        raise

                    event = UsageEvent.record(product.id, now, note)
                    uow.usages.append(event)

                    history = uow.usages.list_for_product(product.id)
                    product.apply_estimate(
                        estimate_depletion(history, product, now, self._strategy)
                    )

                    uow.products.save(product)
                    uow.commit()

            alert_status = classify(product)
            logger.info(
                "Usage recorded",
                event_id=event.id,
                quantity=product.quantity,
                usage_count=product.usage_count,
                average_uses_per_month=product.average_uses_per_month,
                estimated_days_left=product.estimated_days_left,
                is_low_stock=alert_status.is_low_stock,
            )
            return UsageRecorded(event=event, product=product, alert_status=alert_status)
