"""JSON-document-backed implementation of UsageEventLog."""

from __future__ import annotations

from datetime import datetime

from depletion.domain.model.usage_event import UsageEvent
from depletion.domain.repository.usage_event_log import UsageEventLog
from depletion.infrastructure.persistence.json_store import JsonDocumentStore


class JsonUsageEventLog(UsageEventLog):

    def __init__(self, store: JsonDocumentStore) -> None:
        self._store = store
        self._appended: list[UsageEvent] = []
        self._purged: set[str] = set()

    # --- UsageEventLog interface ----------------------------------------------

    def append(self, event: UsageEvent) -> None:
        self._appended.append(event)

    def list_for_product(self, product_id: str) -> list[UsageEvent]:
        events = []
        if product_id not in self._purged:
            events = [
                self._to_domain(raw)
                for raw in self._store.load()["usages"]
                if raw["product_id"] == product_id
            ]
        events.extend(e for e in self._appended if e.product_id == product_id)
        return sorted(events, key=lambda e: e.date, reverse=True)

    def count_for_product(self, product_id: str) -> int:
        return len(self.list_for_product(product_id))

    def purge_product(self, product_id: str) -> None:
        self._purged.add(product_id)
        self._appended = [e for e in self._appended if e.product_id != product_id]

    # --- Unit of work hooks ---------------------------------------------------

    def apply_to(self, document: dict) -> None:
        records = document["usages"]
        if self._purged:
            records[:] = [raw for raw in records if raw["product_id"] not in self._purged]
        records.extend(self._to_raw(e) for e in self._appended)

    def discard(self) -> None:
        self._appended.clear()
        self._purged.clear()

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(event: UsageEvent) -> dict:
        return {
            "id": event.id,
            "product_id": event.product_id,
            "date": event.date.isoformat(),
            "note": event.note,
        }

    @staticmethod
    def _to_domain(raw: dict) -> UsageEvent:
        return UsageEvent(
            id=raw["id"],
            product_id=raw["product_id"],
            date=datetime.fromisoformat(raw["date"]),
            note=raw.get("note"),
        )
