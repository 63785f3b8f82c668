"""Unit tests for the DepletionTracker domain service."""

import threading
from datetime import timedelta

import pytest

from depletion.domain.exceptions import (
    EntityNotFoundError,
    OutOfStockError,
    PersistenceError,
)
from depletion.domain.model.product import Product
from depletion.domain.model.value_objects import StoreScope
from depletion.domain.service.depletion_tracker import DepletionTracker
from depletion.domain.service.product_locks import ProductLocks
from depletion.domain.service.rate_estimator import RateStrategy
from tests.fakes import T0, FakeClock, FakeDatabase

STORE = StoreScope("store-a")


def _setup(quantity: int = 10, min_stock_alert: int = 5, strategy=RateStrategy.COUNT_OVER_AGE):
    product = Product(
        id="p1", store_id="store-a", name="Classic Polish",
        quantity=quantity, min_stock_alert=min_stock_alert, created_at=T0,
    )
    db = FakeDatabase([product])
    clock = FakeClock(T0)
    tracker = DepletionTracker(db.unit_of_work, ProductLocks(), strategy, clock)
    return db, clock, tracker


class TestRecordUsageHappyPath:

    def test_records_event_and_updates_product(self):
        db, clock, tracker = _setup(quantity=10)
        clock.advance(days=5)

        result = tracker.record_usage(STORE, "p1", "trial")

        stored = db.products["p1"]
        assert stored.quantity == 9
        assert stored.usage_count == 1
        assert stored.last_used == T0 + timedelta(days=5)
        assert stored.average_uses_per_month == pytest.approx(1.0)
        assert stored.estimated_days_left == 270

        assert result.event.note == "trial"
        assert result.event.date == T0 + timedelta(days=5)
        assert db.usages == [result.event]
        assert result.alert_status.is_low_stock is False
        assert result.alert_status.low_stock_threshold == 5

    def test_blank_note_stored_as_none(self):
        db, _, tracker = _setup()
        result = tracker.record_usage(STORE, "p1", "   ")
        assert result.event.note is None

    def test_one_commit_per_usage(self):
        db, _, tracker = _setup()
        tracker.record_usage(STORE, "p1")
        tracker.record_usage(STORE, "p1")
        assert db.commits == 2

    def test_span_strategy_uses_refreshed_history(self):
        db, clock, tracker = _setup(quantity=10, strategy=RateStrategy.SPAN_OVER_HISTORY)

        tracker.record_usage(STORE, "p1")
        assert db.products["p1"].average_uses_per_month == 0.0
        assert db.products["p1"].estimated_days_left == 0

        clock.advance(days=15)
        tracker.record_usage(STORE, "p1")

        # 2 events over half a month -> 4 uses/month; 8 left -> 60 days
        assert db.products["p1"].average_uses_per_month == pytest.approx(4.0)
        assert db.products["p1"].estimated_days_left == 60


class TestRecordUsageFailures:

    def test_unknown_product(self):
        _, _, tracker = _setup()
        with pytest.raises(EntityNotFoundError, match="not found"):
            tracker.record_usage(STORE, "nope")

    def test_other_store_product_looks_absent(self):
        db, _, tracker = _setup()
        with pytest.raises(EntityNotFoundError, match="not found"):
            tracker.record_usage(StoreScope("store-b"), "p1")
        assert db.products["p1"].quantity == 10
        assert db.usages == []

    def test_out_of_stock_changes_nothing(self):
        db, _, tracker = _setup(quantity=0)
        with pytest.raises(OutOfStockError):
            tracker.record_usage(STORE, "p1")
        assert db.products["p1"].usage_count == 0
        assert db.usages == []
        assert db.commits == 0


class TestNonNegativity:

    def test_q_plus_one_call_fails(self):
        db, clock, tracker = _setup(quantity=3)
        for _ in range(3):
            clock.advance(days=1)
            tracker.record_usage(STORE, "p1")

        with pytest.raises(OutOfStockError):
            tracker.record_usage(STORE, "p1")

        assert db.products["p1"].quantity == 0
        assert db.products["p1"].usage_count == 3
        assert len(db.events_for("p1")) == 3


class TestCounterConsistency:

    def test_usage_count_matches_event_log(self):
        db, clock, tracker = _setup(quantity=20)
        for _ in range(7):
            clock.advance(hours=6)
            tracker.record_usage(STORE, "p1")

        assert db.products["p1"].usage_count == 7
        assert db.products["p1"].quantity == 13
        assert len(db.events_for("p1")) == 7


class TestAtomicity:

    def test_failure_saving_product_after_append_persists_nothing(self):
        db, clock, _ = _setup(quantity=4)

        def failing_uow():
            uow = db.unit_of_work()
            uow.products.fail_on_save = True
            return uow

        tracker = DepletionTracker(failing_uow, ProductLocks(), clock=clock)
        with pytest.raises(PersistenceError):
            tracker.record_usage(STORE, "p1")

        assert db.products["p1"].quantity == 4
        assert db.products["p1"].usage_count == 0
        assert db.products["p1"].last_used is None
        assert db.usages == []

    def test_failure_on_commit_persists_nothing(self):
        db, _, tracker = _setup(quantity=4)
        db.fail_on_commit = True

        with pytest.raises(PersistenceError):
            tracker.record_usage(STORE, "p1")

        assert db.products["p1"].quantity == 4
        assert db.products["p1"].usage_count == 0
        assert db.usages == []

    def test_retry_after_failure_revalidates(self):
        db, _, tracker = _setup(quantity=1)
        db.fail_on_commit = True
        with pytest.raises(PersistenceError):
            tracker.record_usage(STORE, "p1")

        db.fail_on_commit = False
        tracker.record_usage(STORE, "p1")
        with pytest.raises(OutOfStockError):
            tracker.record_usage(STORE, "p1")

        assert db.products["p1"].quantity == 0
        assert len(db.usages) == 1


class TestConcurrency:

    def test_concurrent_usage_never_oversells(self):
        k, m = 20, 5
        db, _, tracker = _setup(quantity=m)
        barrier = threading.Barrier(k)
        successes, out_of_stock = [], []

        def worker():
            barrier.wait()
            try:
                successes.append(tracker.record_usage(STORE, "p1"))
            except OutOfStockError as exc:
                out_of_stock.append(exc)

        threads = [threading.Thread(target=worker) for _ in range(k)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)

        assert len(successes) == m
        assert len(out_of_stock) == k - m
        assert db.products["p1"].quantity == 0
        assert db.products["p1"].usage_count == m
        assert len(db.events_for("p1")) == m

    def test_last_unit_goes_to_exactly_one_caller(self):
        db, _, tracker = _setup(quantity=1)
        barrier = threading.Barrier(2)
        outcomes = []

        def worker():
            barrier.wait()
            try:
                tracker.record_usage(STORE, "p1")
                outcomes.append("ok")
            except OutOfStockError:
                outcomes.append("out")

        threads = [threading.Thread(target=worker) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)

        assert sorted(outcomes) == ["ok", "out"]


class TestEndToEndScenario:

    def test_month_of_usage_reaches_low_stock(self):
        db, clock, tracker = _setup(quantity=10, min_stock_alert=5)

        clock.advance(days=5)
        first = tracker.record_usage(STORE, "p1", "trial")
        assert first.product.quantity == 9
        assert first.product.usage_count == 1
        assert first.product.last_used == T0 + timedelta(days=5)
        assert first.alert_status.is_low_stock is False

        for _ in range(4):
            clock.advance(days=6)
            result = tracker.record_usage(STORE, "p1")

        assert result.product.usage_count == 5
        assert result.product.quantity == 5
        assert result.alert_status.is_low_stock is True
        # 5 uses within the first month -> 5/month, 5 left -> 30 days
        assert result.product.average_uses_per_month == pytest.approx(5.0)
        assert result.alert_status.estimated_days_left == 30
        assert len(db.events_for("p1")) == 5
