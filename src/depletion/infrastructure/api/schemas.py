"""Pydantic request/response schemas for the HTTP API.

Keys are camelCase on the wire; Python attributes stay snake_case.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from depletion.application.dto import (
    AlertStatusDTO,
    ProductDTO,
    UsageEventDTO,
    UsageRecordedDTO,
)
from depletion.domain.model.product import MAX_QUANTITY


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Requests -----------------------------------------------------------------


class RecordUsageRequest(_CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={"examples": [{"note": "trial on a client"}]},
    )

    note: str | None = Field(None, max_length=500)


class CreateProductRequest(_CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "brand": "Lumina",
                    "name": "Classic Polish",
                    "colorCode": "#c0392b",
                    "colorName": "Cherry",
                    "category": "POLISH",
                    "price": "1200",
                    "quantity": 10,
                    "minStockAlert": 5,
                }
            ]
        },
    )

    name: str = Field(..., max_length=200)
    quantity: int = Field(..., ge=0, le=MAX_QUANTITY)
    brand: str = Field("", max_length=100)
    color_code: str = Field("", max_length=20)
    color_name: str = Field("", max_length=100)
    category: str = Field("", max_length=50)
    price: str = "0"
    min_stock_alert: int = Field(5, ge=1, le=MAX_QUANTITY)


class UpdateProductRequest(_CamelModel):
    name: str | None = Field(None, max_length=200)
    brand: str | None = Field(None, max_length=100)
    color_code: str | None = Field(None, max_length=20)
    color_name: str | None = Field(None, max_length=100)
    category: str | None = Field(None, max_length=50)
    price: str | None = None
    quantity: int | None = Field(None, ge=0, le=MAX_QUANTITY)
    min_stock_alert: int | None = Field(None, ge=1, le=MAX_QUANTITY)


# --- Responses ----------------------------------------------------------------


class AlertStatusResponse(_CamelModel):
    is_low_stock: bool
    estimated_days_left: int
    low_stock_threshold: int

    @classmethod
    def from_dto(cls, dto: AlertStatusDTO) -> AlertStatusResponse:
        return cls(
            is_low_stock=dto.is_low_stock,
            estimated_days_left=dto.estimated_days_left,
            low_stock_threshold=dto.low_stock_threshold,
        )


class UsageEventResponse(_CamelModel):
    event_id: str
    date: str
    note: str | None = None

    @classmethod
    def from_dto(cls, dto: UsageEventDTO) -> UsageEventResponse:
        return cls(event_id=dto.id, date=dto.date, note=dto.note)


class UsageHistoryResponse(_CamelModel):
    usages: list[UsageEventResponse]


class ProductStateResponse(_CamelModel):
    """The fields usage recording changes."""

    id: str
    quantity: int
    usage_count: int
    last_used: str | None
    average_uses_per_month: float
    estimated_days_left: int


class UsageRecordedResponse(_CamelModel):
    event_id: str
    date: str
    note: str | None = None
    product: ProductStateResponse
    alert_status: AlertStatusResponse

    @classmethod
    def from_dto(cls, dto: UsageRecordedDTO) -> UsageRecordedResponse:
        product = dto.product
        return cls(
            event_id=dto.event.id,
            date=dto.event.date,
            note=dto.event.note,
            product=ProductStateResponse(
                id=product.id,
                quantity=product.quantity,
                usage_count=product.usage_count,
                last_used=product.last_used,
                average_uses_per_month=product.average_uses_per_month,
                estimated_days_left=product.estimated_days_left,
            ),
            alert_status=AlertStatusResponse.from_dto(dto.alert_status),
        )


class ProductResponse(_CamelModel):
    id: str
    store_id: str
    name: str
    brand: str
    color_code: str
    color_name: str
    category: str
    price: str
    currency: str
    quantity: int
    min_stock_alert: int
    usage_count: int
    created_at: str
    last_used: str | None
    average_uses_per_month: float
    estimated_days_left: int
    alert_status: AlertStatusResponse

    @classmethod
    def from_dto(cls, dto: ProductDTO) -> ProductResponse:
        return cls(
            id=dto.id,
            store_id=dto.store_id,
            name=dto.name,
            brand=dto.brand,
            color_code=dto.color_code,
            color_name=dto.color_name,
            category=dto.category,
            price=dto.price,
            currency=dto.currency,
            quantity=dto.quantity,
            min_stock_alert=dto.min_stock_alert,
            usage_count=dto.usage_count,
            created_at=dto.created_at,
            last_used=dto.last_used,
            average_uses_per_month=dto.average_uses_per_month,
            estimated_days_left=dto.estimated_days_left,
            alert_status=AlertStatusResponse.from_dto(dto.alert_status),
        )


class ErrorResponse(BaseModel):
    error: str
