"""Application service: Edit Product use case.

Catalog edits change descriptive fields, restock, or move the alert
threshold. They never touch ``usage_count``, ``last_used``, the derived
depletion fields or the event log; those belong to usage recording.

Edits take the product lock because a restock writes ``quantity``, the
same field usage recording decrements.
"""

from __future__ import annotations

from collections.abc import Callable

import structlog

from depletion.application.commands import EditProductDetails
from depletion.application.dto import ProductDTO, product_to_dto
from depletion.domain.exceptions import EntityNotFoundError
from depletion.domain.model.value_objects import Money, StoreScope
from depletion.domain.repository.unit_of_work import UnitOfWork
from depletion.domain.service.product_locks import ProductLocks

logger = structlog.get_logger(__name__)


class EditProductHandler:

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        locks: ProductLocks,
    ) -> None:
        self._uow_factory = uow_factory
        self._locks = locks

    def handle(self, scope: StoreScope, command: EditProductDetails) -> ProductDTO:
        with self._locks.hold(command.product_id):
            with self._uow_factory() as uow:
                product = uow.products.get_by_id(command.product_id)
                if product is None or not scope.owns(product):
                    raise EntityNotFoundError(
                        f"Product '{command.product_id}' not found"
                    )

                product.revise(
                    name=command.name,
                    brand=command.brand,
                    color_code=command.color_code,
                    color_name=command.color_name,
                    category=command.category,
                    price=Money.of(command.price) if command.price is not None else None,
                    quantity=command.quantity,
                    min_stock_alert=command.min_stock_alert,
                )
                uow.products.save(product)
                uow.commit()

        logger.info(
            "Product edited",
            store_id=scope.store_id,
            product_id=product.id,
            quantity=product.quantity,
            min_stock_alert=product.min_stock_alert,
        )
        return product_to_dto(product)
