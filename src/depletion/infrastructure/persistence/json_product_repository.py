"""JSON-document-backed implementation of ProductRepository.

Reads come from the committed document overlaid with this unit of work's
staged saves and deletes. Writes are staged until the unit commits.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from depletion.domain.exceptions import PersistenceError
from depletion.domain.model.product import MAX_QUANTITY, Product
from depletion.domain.model.value_objects import Money
from depletion.domain.repository.product_repository import ProductRepository
from depletion.infrastructure.persistence.json_store import JsonDocumentStore


class JsonProductRepository(ProductRepository):

    def __init__(self, store: JsonDocumentStore) -> None:
        self._store = store
        # product_id -> staged product, or None for a staged delete
        self._pending: dict[str, Product | None] = {}

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        if product_id in self._pending:
            return self._pending[product_id]
        for raw in self._store.load()["products"]:
            if raw["id"] == product_id:
                return self._to_domain(raw)
        return None

    def list_by_store(self, store_id: str) -> list[Product]:
        products = {
            raw["id"]: self._to_domain(raw)
            for raw in self._store.load()["products"]
            if raw["store_id"] == store_id
        }
        for product_id, product in self._pending.items():
            if product is None:
                products.pop(product_id, None)
            elif product.store_id == store_id:
                products[product_id] = product
        return list(products.values())

    def save(self, product: Product) -> None:
        self._pending[product.id] = product

    def delete(self, product_id: str) -> None:
        self._pending[product_id] = None

    # --- Unit of work hooks ---------------------------------------------------

    def apply_to(self, document: dict) -> None:
        records = document["products"]
        for product_id, product in self._pending.items():
            records[:] = [raw for raw in records if raw["id"] != product_id]
            if product is not None:
                records.append(self._to_raw(product))

    def discard(self) -> None:
        self._pending.clear()

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "store_id": product.store_id,
            "name": product.name,
            "brand": product.brand,
            "color_code": product.color_code,
            "color_name": product.color_name,
            "category": product.category,
            "price": str(product.price.amount),
            "currency": product.price.currency,
            "quantity": product.quantity,
            "min_stock_alert": product.min_stock_alert,
            "usage_count": product.usage_count,
            "created_at": product.created_at.isoformat(),
            "last_used": product.last_used.isoformat() if product.last_used else None,
            "average_uses_per_month": product.average_uses_per_month,
            "estimated_days_left": product.estimated_days_left,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        if not 0 <= raw["quantity"] <= MAX_QUANTITY:
            raise PersistenceError(
                f"Stored product '{raw['id']}' has an out-of-range quantity"
            )
        last_used = raw.get("last_used")
        return Product(
            id=raw["id"],
            store_id=raw["store_id"],
            name=raw["name"],
            brand=raw.get("brand", ""),
            color_code=raw.get("color_code", ""),
            color_name=raw.get("color_name", ""),
            category=raw.get("category", ""),
            price=Money(Decimal(raw.get("price", "0")), raw.get("currency", "JPY")),
            quantity=raw["quantity"],
            min_stock_alert=raw.get("min_stock_alert", 5),
            usage_count=raw.get("usage_count", 0),
            created_at=datetime.fromisoformat(raw["created_at"]),
            last_used=datetime.fromisoformat(last_used) if last_used else None,
            average_uses_per_month=raw.get("average_uses_per_month", 0.0),
            estimated_days_left=raw.get("estimated_days_left", 0),
        )
