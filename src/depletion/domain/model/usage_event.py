"""UsageEvent: one consumed unit, recorded once and never changed."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class UsageEvent:
    """Immutable entry in a product's usage history.

    Dates are assigned at recording time, but nothing downstream relies on
    events arriving in date order.
    """

    id: str
    product_id: str
    date: datetime
    note: str | None = None

    @staticmethod
    def record(product_id: str, date: datetime, note: str | None = None) -> UsageEvent:
        """Create a new event with a fresh opaque id."""
        if note is not None:
            note = note.strip() or None
        return UsageEvent(id=uuid.uuid4().hex, product_id=product_id, date=date, note=note)
