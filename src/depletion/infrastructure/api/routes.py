"""FastAPI endpoints for usage recording and the product catalog.

Endpoints are plain ``def`` functions: FastAPI runs them in its threadpool,
which is where the blocking per-product lock is taken.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Query, Request, Response

from depletion.application.add_product import AddProductHandler
from depletion.application.commands import (
    EditProductDetails,
    ProvisionProduct,
    RecordUsage,
)
from depletion.application.edit_product import EditProductHandler
from depletion.application.list_usage_history import ListUsageHistoryHandler
from depletion.application.record_usage import RecordUsageHandler
from depletion.application.remove_product import RemoveProductHandler
from depletion.application.show_product import ShowProductHandler
from depletion.application.show_stock import ShowStockHandler
from depletion.domain.model.value_objects import StoreScope
from depletion.infrastructure.api.schemas import (
    CreateProductRequest,
    ErrorResponse,
    ProductResponse,
    RecordUsageRequest,
    UpdateProductRequest,
    UsageEventResponse,
    UsageHistoryResponse,
    UsageRecordedResponse,
)
from depletion.infrastructure.bootstrap import Container

product_router = APIRouter(
    prefix="/products",
    tags=["products"],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


def get_container(request: Request) -> Container:
    return request.app.state.container


def store_scope(x_store_id: str | None = Header(None, alias="X-Store-Id")) -> StoreScope:
    """Resolve the caller's store. Raises ValidationError (400) when missing."""
    return StoreScope(x_store_id or "")


# --- Usage endpoints ---


@product_router.post(
    "/{product_id}/usage", status_code=201, response_model=UsageRecordedResponse
)
def record_usage(
    product_id: str,
    body: RecordUsageRequest | None = None,
    scope: StoreScope = Depends(store_scope),
    container: Container = Depends(get_container),
) -> UsageRecordedResponse:
    handler = RecordUsageHandler(container.tracker())
    note = body.note if body is not None else None
    dto = handler.handle(scope, RecordUsage(product_id=product_id, note=note))
    return UsageRecordedResponse.from_dto(dto)


@product_router.get("/{product_id}/usage", response_model=UsageHistoryResponse)
def list_usage_history(
    product_id: str,
    scope: StoreScope = Depends(store_scope),
    container: Container = Depends(get_container),
) -> UsageHistoryResponse:
    handler = ListUsageHistoryHandler(container.uow_factory)
    events = handler.handle(scope, product_id)
    return UsageHistoryResponse(usages=[UsageEventResponse.from_dto(e) for e in events])


# --- Catalog endpoints ---


@product_router.post("", status_code=201, response_model=ProductResponse)
def create_product(
    body: CreateProductRequest,
    scope: StoreScope = Depends(store_scope),
    container: Container = Depends(get_container),
) -> ProductResponse:
    command = ProvisionProduct(
        name=body.name,
        quantity=body.quantity,
        brand=body.brand,
        color_code=body.color_code,
        color_name=body.color_name,
        category=body.category,
        price=body.price,
        min_stock_alert=body.min_stock_alert,
    )
    dto = AddProductHandler(container.uow_factory).handle(scope, command)
    return ProductResponse.from_dto(dto)


@product_router.get("", response_model=list[ProductResponse])
def list_products(
    low_stock: bool = Query(False, alias="lowStock"),
    scope: StoreScope = Depends(store_scope),
    container: Container = Depends(get_container),
) -> list[ProductResponse]:
    lines = ShowStockHandler(container.uow_factory).handle(scope, low_stock_only=low_stock)
    return [ProductResponse.from_dto(line) for line in lines]


@product_router.get("/{product_id}", response_model=ProductResponse)
def get_product(
    product_id: str,
    scope: StoreScope = Depends(store_scope),
    container: Container = Depends(get_container),
) -> ProductResponse:
    dto = ShowProductHandler(container.uow_factory).handle(scope, product_id)
    return ProductResponse.from_dto(dto)


@product_router.put("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: str,
    body: UpdateProductRequest,
    scope: StoreScope = Depends(store_scope),
    container: Container = Depends(get_container),
) -> ProductResponse:
    command = EditProductDetails(
        product_id=product_id,
        name=body.name,
        brand=body.brand,
        color_code=body.color_code,
        color_name=body.color_name,
        category=body.category,
        price=body.price,
        quantity=body.quantity,
        min_stock_alert=body.min_stock_alert,
    )
    handler = EditProductHandler(container.uow_factory, container.locks)
    return ProductResponse.from_dto(handler.handle(scope, command))


@product_router.delete("/{product_id}", status_code=204)
def delete_product(
    product_id: str,
    scope: StoreScope = Depends(store_scope),
    container: Container = Depends(get_container),
) -> Response:
    RemoveProductHandler(container.uow_factory, container.locks).handle(scope, product_id)
    return Response(status_code=204)
