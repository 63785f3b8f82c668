"""Application service: Record Usage use case.

Thin wrapper over the DepletionTracker domain service; all invariants and
the locking/transaction boundary live there.
"""

from __future__ import annotations

from depletion.application.commands import RecordUsage
from depletion.application.dto import (
    UsageRecordedDTO,
    alert_to_dto,
    event_to_dto,
    product_to_dto,
)
from depletion.domain.model.value_objects import StoreScope
from depletion.domain.service.depletion_tracker import DepletionTracker


class RecordUsageHandler:

    def __init__(self, tracker: DepletionTracker) -> None:
        self._tracker = tracker

    def handle(self, scope: StoreScope, command: RecordUsage) -> UsageRecordedDTO:
        result = self._tracker.record_usage(scope, command.product_id, command.note)
        return UsageRecordedDTO(
            event=event_to_dto(result.event),
            product=product_to_dto(result.product, result.alert_status),
            alert_status=alert_to_dto(result.alert_status),
        )
