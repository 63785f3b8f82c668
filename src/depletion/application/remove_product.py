"""Application service: Remove Product use case.

The product and its whole usage history go in one commit, so no usage
event is ever left pointing at a missing product.
"""

from __future__ import annotations

from collections.abc import Callable

import structlog

from depletion.domain.exceptions import EntityNotFoundError
from depletion.domain.model.value_objects import StoreScope
from depletion.domain.repository.unit_of_work import UnitOfWork
from depletion.domain.service.product_locks import ProductLocks

logger = structlog.get_logger(__name__)


class RemoveProductHandler:

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        locks: ProductLocks,
    ) -> None:
        self._uow_factory = uow_factory
        self._locks = locks

    def handle(self, scope: StoreScope, product_id: str) -> None:
        with self._locks.hold(product_id):
            with self._uow_factory() as uow:
                product = uow.products.get_by_id(product_id)
                if product is None or not scope.owns(product):
                    raise EntityNotFoundError(f"Product '{product_id}' not found")

                purged = uow.usages.count_for_product(product_id)
                uow.usages.purge_product(product_id)
                uow.products.delete(product_id)
                uow.commit()

        logger.info(
            "Product removed",
            store_id=scope.store_id,
            product_id=product_id,
            purged_usage_events=purged,
        )
