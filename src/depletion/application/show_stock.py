"""Application service: Show Stock use case (query)."""

from __future__ import annotations

from collections.abc import Callable

from depletion.application.dto import ProductDTO, product_to_dto
from depletion.domain.model.value_objects import StoreScope
from depletion.domain.repository.unit_of_work import UnitOfWork
from depletion.domain.service.alert_classifier import classify


class ShowStockHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, scope: StoreScope, low_stock_only: bool = False) -> list[ProductDTO]:
        """List the store's products, optionally only those at or below threshold."""
        with self._uow_factory() as uow:
            products = uow.products.list_by_store(scope.store_id)

        lines: list[ProductDTO] = []
        for product in sorted(products, key=lambda p: (p.brand.lower(), p.name.lower())):
            status = classify(product)
            if low_stock_only and not status.is_low_stock:
                continue
            lines.append(product_to_dto(product, status))
        return lines
