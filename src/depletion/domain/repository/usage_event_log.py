"""Abstract append-only log of usage events."""

from __future__ import annotations

from abc import ABC, abstractmethod

from depletion.domain.model.usage_event import UsageEvent


class UsageEventLog(ABC):

    @abstractmethod
    def append(self, event: UsageEvent) -> None:
        """Add an event. The only mutation the depletion core uses."""

    @abstractmethod
    def list_for_product(self, product_id: str) -> list[UsageEvent]:
        """Return a product's events, newest first."""

    @abstractmethod
    def count_for_product(self, product_id: str) -> int:
        """Return how many events a product has."""

    @abstractmethod
    def purge_product(self, product_id: str) -> None:
        """Drop every event of a product. Used only when the product is removed."""
