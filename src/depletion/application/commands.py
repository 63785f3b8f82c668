"""Commands: the inputs each use case accepts.

Usage recording and catalog editing are separate command types: only
``RecordUsage`` reaches the event log and the derived depletion fields.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RecordUsage:
    product_id: str
    note: str | None = None


@dataclass(frozen=True)
class ProvisionProduct:
    name: str
    quantity: int
    brand: str = ""
    color_code: str = ""
    color_name: str = ""
    category: str = ""
    price: str = "0"
    min_stock_alert: int = 5


@dataclass(frozen=True)
class EditProductDetails:
    """Catalog edit. Fields left as None are not changed."""

    product_id: str
    name: str | None = None
    brand: str | None = None
    color_code: str | None = None
    color_name: str | None = None
    category: str | None = None
    price: str | None = None
    quantity: int | None = None
    min_stock_alert: int | None = None
