"""Product aggregate: current stock and derived consumption metrics.

A product belongs to exactly one store. Two kinds of change reach it:
catalog edits (descriptive fields, restocking, the alert threshold) and
usage recordings. Only the latter touch ``usage_count``, ``last_used`` and
the derived depletion fields.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from depletion.domain.exceptions import OutOfStockError, ValidationError
from depletion.domain.model.value_objects import DepletionEstimate, Money

DEFAULT_MIN_STOCK_ALERT = 5
MAX_QUANTITY = 1_000_000


@dataclass
class Product:
    """Aggregate root for a consumable item.

    Invariants:
    - ``quantity`` is never negative and never above ``MAX_QUANTITY``
    - ``usage_count`` only ever grows, by exactly one per usage
    - ``min_stock_alert`` is between 1 and ``MAX_QUANTITY``

    Use ``Product.provision()`` for new products; ``__init__`` stays plain
    so repositories can reconstitute stored records without re-validating.
    """

    id: str
    store_id: str
    name: str
    brand: str = ""
    color_code: str = ""
    color_name: str = ""
    category: str = ""
    price: Money = field(default_factory=lambda: Money.of("0"))
    quantity: int = 0
    min_stock_alert: int = DEFAULT_MIN_STOCK_ALERT
    usage_count: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    last_used: datetime | None = None
    average_uses_per_month: float = 0.0
    estimated_days_left: int = 0

    # --- Factory (used for NEW products only) ---------------------------------

    @staticmethod
    def provision(
        store_id: str,
        name: str,
        quantity: int,
        *,
        brand: str = "",
        color_code: str = "",
        color_name: str = "",
        category: str = "",
        price: Money | None = None,
        min_stock_alert: int = DEFAULT_MIN_STOCK_ALERT,
        created_at: datetime | None = None,
    ) -> Product:
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        _check_quantity(quantity)
        _check_threshold(min_stock_alert)

        return Product(
            id=uuid.uuid4().hex,
            store_id=store_id,
            name=name.strip(),
            brand=brand.strip(),
            color_code=color_code,
            color_name=color_name.strip(),
            category=category,
            price=price if price is not None else Money.of("0"),
            quantity=quantity,
            min_stock_alert=min_stock_alert,
            created_at=created_at or datetime.now(timezone.utc),
        )

    # --- Usage ----------------------------------------------------------------

    def consume(self, at: datetime) -> None:
        """Take one unit out of stock.

        Raises OutOfStockError, leaving the product untouched, when nothing
        is left.
        """
        if self.quantity <= 0:
            raise OutOfStockError(f"Product '{self.name}' is out of stock")
        self.quantity -= 1
        self.usage_count += 1
        self.last_used = at

    def apply_estimate(self, estimate: DepletionEstimate) -> None:
        self.average_uses_per_month = estimate.average_uses_per_month
        self.estimated_days_left = estimate.estimated_days_left

    # --- Catalog edits --------------------------------------------------------

    def revise(
        self,
        *,
        name: str | None = None,
        brand: str | None = None,
        color_code: str | None = None,
        color_name: str | None = None,
        category: str | None = None,
        price: Money | None = None,
        quantity: int | None = None,
        min_stock_alert: int | None = None,
    ) -> None:
        """Apply a catalog edit. Fields left as None keep their value.

        Everything is validated before anything is assigned so a rejected
        edit never leaves the product half-updated.
        """
        if name is not None and not name.strip():
            raise ValidationError("Product name is required")
        if quantity is not None:
            _check_quantity(quantity)
        if min_stock_alert is not None:
            _check_threshold(min_stock_alert)

        if name is not None:
            self.name = name.strip()
        if brand is not None:
            self.brand = brand.strip()
        if color_code is not None:
            self.color_code = color_code
        if color_name is not None:
            self.color_name = color_name.strip()
        if category is not None:
            self.category = category
        if price is not None:
            self.price = price
        if quantity is not None:
            self.quantity = quantity
        if min_stock_alert is not None:
            self.min_stock_alert = min_stock_alert


def _check_quantity(quantity: int) -> None:
    if not isinstance(quantity, int) or isinstance(quantity, bool):
        raise ValidationError(
            f"Quantity must be an integer, got {type(quantity).__name__}"
        )
    if quantity < 0:
        raise ValidationError("Quantity cannot be negative")
    if quantity > MAX_QUANTITY:
        raise ValidationError(f"Quantity cannot exceed {MAX_QUANTITY}")


def _check_threshold(min_stock_alert: int) -> None:
    if not isinstance(min_stock_alert, int) or isinstance(min_stock_alert, bool):
        raise ValidationError(
            f"Minimum stock alert must be an integer, got {type(min_stock_alert).__name__}"
        )
    if min_stock_alert < 1:
        raise ValidationError("Minimum stock alert must be at least 1")
    if min_stock_alert > MAX_QUANTITY:
        raise ValidationError(f"Minimum stock alert cannot exceed {MAX_QUANTITY}")
