"""Application service: Show Product use case (query)."""

from __future__ import annotations

from collections.abc import Callable

from depletion.application.dto import ProductDTO, product_to_dto
from depletion.domain.exceptions import EntityNotFoundError
from depletion.domain.model.value_objects import StoreScope
from depletion.domain.repository.unit_of_work import UnitOfWork


class ShowProductHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, scope: StoreScope, product_id: str) -> ProductDTO:
        with self._uow_factory() as uow:
            product = uow.products.get_by_id(product_id)
        if product is None or not scope.owns(product):
            raise EntityNotFoundError(f"Product '{product_id}' not found")
        return product_to_dto(product)
