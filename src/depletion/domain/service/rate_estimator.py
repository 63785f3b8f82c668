"""Domain service: depletion-rate estimation.

Pure functions, no I/O. Two rate models exist; a deployment picks one and
every code path uses it:

- ``COUNT_OVER_AGE``: total uses divided by the product's age in months,
  with the age clamped to at least one month so brand-new products do
  not produce huge rates.
- ``SPAN_OVER_HISTORY``: number of events divided by the months between
  the oldest and newest event. Needs at least two events on distinct
  dates, otherwise the rate is 0.

Days left is quantity divided by the daily rate, rounded half up. A zero or
negligible rate means "no estimate" and yields 0 days.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from datetime import datetime, timedelta
from enum import Enum

from depletion.domain.model.product import Product
from depletion.domain.model.usage_event import UsageEvent
from depletion.domain.model.value_objects import DepletionEstimate

DAYS_PER_MONTH = 30
MONTH = timedelta(days=DAYS_PER_MONTH)

# Rates at or below this are treated as "not consuming".
MIN_RATE = 1e-9


class RateStrategy(Enum):
    COUNT_OVER_AGE = "count_over_age"
    SPAN_OVER_HISTORY = "span_over_history"


DEFAULT_RATE_STRATEGY = RateStrategy.COUNT_OVER_AGE


def estimate_depletion(
    history: Sequence[UsageEvent],
    product: Product,
    now: datetime,
    strategy: RateStrategy = DEFAULT_RATE_STRATEGY,
) -> DepletionEstimate:
    """Compute ``(average_uses_per_month, estimated_days_left)``."""
    if strategy is RateStrategy.COUNT_OVER_AGE:
        rate = count_over_age(product.usage_count, product.created_at, now)
    elif strategy is RateStrategy.SPAN_OVER_HISTORY:
        rate = span_over_history(history)
    else:
        raise ValueError(f"Unknown rate strategy: {strategy!r}")

    return DepletionEstimate(
        average_uses_per_month=rate,
        estimated_days_left=days_left(product.quantity, rate),
    )


def count_over_age(usage_count: int, created_at: datetime, now: datetime) -> float:
    months_since_creation = (now - created_at) / MONTH
    return usage_count / max(months_since_creation, 1.0)


def span_over_history(history: Sequence[UsageEvent]) -> float:
    if len(history) < 2:
        return 0.0
    # min/max rather than first/last: history order is not trusted
    dates = [event.date for event in history]
    months = (max(dates) - min(dates)) / MONTH
    if months <= 0:
        return 0.0
    return len(history) / months


def days_left(quantity: int, average_uses_per_month: float) -> int:
    if quantity <= 0 or average_uses_per_month <= MIN_RATE:
        return 0
    uses_per_day = average_uses_per_month / DAYS_PER_MONTH
    return _round_half_up(quantity / uses_per_day)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
