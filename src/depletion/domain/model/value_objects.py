"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from depletion.domain.exceptions import ValidationError


@dataclass(frozen=True)
class Money:
    """Shelf price of a product.

    Opaque to the depletion core; kept as Decimal so catalog round trips
    through JSON never drift.
    """

    amount: Decimal
    currency: str = "JPY"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency}"

    @staticmethod
    def of(amount: str | float | int | Decimal, currency: str = "JPY") -> Money:
        """Convenient factory that coerces to Decimal safely."""
        try:
            return Money(Decimal(str(amount)), currency)
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc


@dataclass(frozen=True)
class StoreScope:
    """The tenant a caller has been resolved to.

    Passed explicitly into every operation; nothing in the core infers the
    store from ambient state.
    """

    store_id: str

    def __post_init__(self) -> None:
        if not self.store_id or not self.store_id.strip():
            raise ValidationError("Store ID is required")

    def owns(self, product) -> bool:
        return product.store_id == self.store_id


@dataclass(frozen=True)
class DepletionEstimate:
    """Rate of consumption and the days of stock it leaves."""

    average_uses_per_month: float
    estimated_days_left: int


@dataclass(frozen=True)
class AlertStatus:
    is_low_stock: bool
    estimated_days_left: int
    low_stock_threshold: int
