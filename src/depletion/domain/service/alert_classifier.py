"""Domain service: low-stock classification."""

from __future__ import annotations

from depletion.domain.model.product import Product
from depletion.domain.model.value_objects import AlertStatus


def classify(product: Product) -> AlertStatus:
    """A product is low on stock once quantity reaches its alert threshold."""
    return AlertStatus(
        is_low_stock=product.quantity <= product.min_stock_alert,
        estimated_days_left=product.estimated_days_left,
        low_stock_threshold=product.min_stock_alert,
    )
