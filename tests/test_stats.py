"""Tests for operation statistics."""

import pytest

from admin_store.stats import OperationStats


def test_stats_initialization():
    """Test OperationStats starts empty."""
    stats = OperationStats()
    assert stats.total_calls == 0
    assert stats.avg_latency_ms == 0.0
    assert stats.summary()["by_operation"] == {}


def test_record_counts_calls_and_failures():
    """Test recording successes and failures."""
    stats = OperationStats()
    stats.record("list_products", 200)
    stats.record("list_products", 300)
    stats.record("delete_product", 250, success=False)

    assert stats.total_calls == 3
    assert stats.total_failures == 1
    assert stats.avg_latency_ms == pytest.approx(250.0)
    assert stats.by_operation["list_products"]["count"] == 2
    assert stats.by_operation["delete_product"]["failures"] == 1


def test_slow_calls_and_slowest_operation():
    """Test slow threshold and slowest tracking."""
    stats = OperationStats(slow_threshold_ms=400)
    stats.record("list_orders", 450)
    stats.record("get_analytics", 480)
    stats.record("list_customers", 210)

    assert stats.slow_calls == 2
    assert stats.slowest_ms == 480
    assert stats.slowest_operation == "get_analytics"


def test_summary_rounds_averages():
    """Test summary output shape."""
    stats = OperationStats()
    stats.record("list_products", 100.123)
    stats.record("list_products", 200.456)

    summary = stats.summary()

    assert summary["total_calls"] == 2
    assert summary["by_operation"]["list_products"] == {"count": 2, "failures": 0, "avg_ms": 150.29}


def test_reset_clears_counters():
    """Test reset returns to an empty state."""
    stats = OperationStats()
    stats.record("list_products", 100)
    stats.reset()

    assert stats.total_calls == 0
    assert stats.slowest_operation == ""
    assert stats.by_operation == {}


@pytest.mark.asyncio
async def test_store_records_every_operation(store):
    """Test the store feeds its stats on success and failure."""
    await store.list_products()
    await store.delete_product("missing")

    summary = store.stats.summary()

    assert summary["total_calls"] == 2
    assert summary["total_failures"] == 1
    assert set(summary["by_operation"]) == {"list_products", "delete_product"}
