"""JSON-document-backed UnitOfWork."""

from __future__ import annotations

from pathlib import Path

from depletion.domain.repository.unit_of_work import UnitOfWork
from depletion.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from depletion.infrastructure.persistence.json_store import JsonDocumentStore
from depletion.infrastructure.persistence.json_usage_event_log import (
    JsonUsageEventLog,
)


class JsonUnitOfWork(UnitOfWork):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonDocumentStore(file_path)
        self.products = JsonProductRepository(self._store)
        self.usages = JsonUsageEventLog(self._store)

    def commit(self) -> None:
        def apply(document: dict) -> None:
            self.products.apply_to(document)
            self.usages.apply_to(document)

        self._store.update(apply)
        self.rollback()

    def rollback(self) -> None:
        self.products.discard()
        self.usages.discard()
