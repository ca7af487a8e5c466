"""Tests for ServiceStats and active car tracking."""

from __future__ import annotations

import time

from drivescore.core.stats import ServiceStats


def test_initial_stats():
    stats = ServiceStats()
    snap = stats.snapshot()
    assert snap["readings_ingested"] == 0
    assert snap["reports_generated"] == 0
    assert snap["active_cars"]["total"] == 0
    assert snap["active_cars"]["window_seconds"] == 120.0


def test_record_ingested():
    stats = ServiceStats()
    stats.record_ingested(1, count=3, size_bytes=900)
    stats.record_ingested(2, count=1, size_bytes=300)

    snap = stats.snapshot()
    assert snap["readings_ingested"] == 4
    assert snap["bytes_ingested"] == 1200
    assert snap["active_cars"]["total"] == 2


def test_same_car_counted_once():
    stats = ServiceStats()
    stats.record_ingested(7, count=5, size_bytes=1500)
    stats.record_ingested(7, count=5, size_bytes=1500)

    stats.record_ingested(8, count=2, size_bytes=600)

    snap = stats.snapshot()
    assert snap["readings_ingested"] == 12
    assert snap["active_cars"]["total"] == 2
    assert snap["active_cars"]["readings_by_car"] == {"7": 10, "8": 2}


def test_stale_car_readings_dropped_from_snapshot():
    stats = ServiceStats(active_window_seconds=0.1)
    stats.record_ingested(4, count=3, size_bytes=900)
    time.sleep(0.15)

    snap = stats.snapshot()
    assert snap["active_cars"]["readings_by_car"] == {}
    assert snap["readings_ingested"] == 3


def test_stale_cars_pruned():
    """Cars older than the active window should be pruned from stats."""
    stats = ServiceStats(active_window_seconds=0.1)
    stats.record_ingested(3, count=1, size_bytes=300)

    snap = stats.snapshot()
    assert snap["active_cars"]["total"] == 1

    time.sleep(0.15)

    snap = stats.snapshot()
    assert snap["active_cars"]["total"] == 0


def test_report_counters():
    stats = ServiceStats()
    stats.record_decoded(18, 2)
    stats.record_decoded(10, 0)
    stats.record_report()
    stats.record_route()
    stats.record_empty_dataset()
    stats.record_fetch_timeout()

    snap = stats.snapshot()
    assert snap["records_decoded"] == 28
    assert snap["records_skipped"] == 2
    assert snap["reports_generated"] == 1
    assert snap["routes_generated"] == 1
    assert snap["empty_datasets"] == 1
    assert snap["fetch_timeouts"] == 1


def test_rejected_and_deleted_counters():
    stats = ServiceStats()
    stats.record_rejected(2)
    stats.record_rejected()
    stats.record_deleted(4)

    snap = stats.snapshot()
    assert snap["readings_rejected"] == 3
    assert snap["records_deleted"] == 4
