"""Application service: Add Product use case."""

from __future__ import annotations

from collections.abc import Callable

import structlog

from depletion.application.commands import ProvisionProduct
from depletion.application.dto import ProductDTO, product_to_dto
from depletion.domain.model.product import Product
from depletion.domain.model.value_objects import Money, StoreScope
from depletion.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)


class AddProductHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, scope: StoreScope, command: ProvisionProduct) -> ProductDTO:
        """Provision a new product in the caller's store."""
        product = Product.provision(
            store_id=scope.store_id,
            name=command.name,
            quantity=command.quantity,
            brand=command.brand,
            color_code=command.color_code,
            color_name=command.color_name,
            category=command.category,
            price=Money.of(command.price),
            min_stock_alert=command.min_stock_alert,
        )

        with self._uow_factory() as uow:
            uow.products.save(product)
            uow.commit()

        logger.info(
            "Product provisioned",
            store_id=scope.store_id,
            product_id=product.id,
            quantity=product.quantity,
        )
        return product_to_dto(product)
