"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data from the application layer to the CLI and HTTP surfaces
without exposing domain objects. Timestamps are ISO-8601 strings.
"""

from __future__ import annotations

from dataclasses import dataclass

from depletion.domain.model.product import Product
from depletion.domain.model.usage_event import UsageEvent
from depletion.domain.model.value_objects import AlertStatus
from depletion.domain.service.alert_classifier import classify


@dataclass(frozen=True)
class UsageEventDTO:
    id: str
    date: str
    note: str | None


@dataclass(frozen=True)
class AlertStatusDTO:
    is_low_stock: bool
    estimated_days_left: int
    low_stock_threshold: int


@dataclass(frozen=True)
class ProductDTO:
    """A product as displayed to the user, with its current alert status."""

    id: str
    store_id: str
    name: str
    brand: str
    color_code: str
    color_name: str
    category: str
    price: str  # decimal amount, e.g. "1200.00"
    currency: str
    quantity: int
    min_stock_alert: int
    usage_count: int
    created_at: str
    last_used: str | None
    average_uses_per_month: float
    estimated_days_left: int
    alert_status: AlertStatusDTO


@dataclass(frozen=True)
class UsageRecordedDTO:
    event: UsageEventDTO
    product: ProductDTO
    alert_status: AlertStatusDTO


# --- Mapping ------------------------------------------------------------------


def event_to_dto(event: UsageEvent) -> UsageEventDTO:
    return UsageEventDTO(id=event.id, date=event.date.isoformat(), note=event.note)


def alert_to_dto(status: AlertStatus) -> AlertStatusDTO:
    return AlertStatusDTO(
        is_low_stock=status.is_low_stock,
        estimated_days_left=status.estimated_days_left,
        low_stock_threshold=status.low_stock_threshold,
    )


def product_to_dto(product: Product, status: AlertStatus | None = None) -> ProductDTO:
    return ProductDTO(
        id=product.id,
        store_id=product.store_id,
        name=product.name,
        brand=product.brand,
        color_code=product.color_code,
        color_name=product.color_name,
        category=product.category,
        price=f"{product.price.amount:.2f}",
        currency=product.price.currency,
        quantity=product.quantity,
        min_stock_alert=product.min_stock_alert,
        usage_count=product.usage_count,
        created_at=product.created_at.isoformat(),
        last_used=product.last_used.isoformat() if product.last_used else None,
        average_uses_per_month=product.average_uses_per_month,
        estimated_days_left=product.estimated_days_left,
        alert_status=alert_to_dto(status or classify(product)),
    )
