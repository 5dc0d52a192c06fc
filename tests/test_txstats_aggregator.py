"""
Pytest tests for the trailing-24h aggregator.
"""

from __future__ import annotations

import pytest

from backend_redeem.txstats import SignatureRecord, aggregate
from backend_redeem.txstats.aggregator import WINDOW_SEC, window_start

NOW_MS = 1_700_000_000_999
NOW_S = 1_700_000_000


def _records(in_window: int, total: int) -> list[SignatureRecord]:
    recent = [SignatureRecord(f"new-{i}", NOW_S - i) for i in range(in_window)]
    old = [SignatureRecord(f"old-{i}", NOW_S - WINDOW_SEC - 1 - i) for i in range(total - in_window)]
    return recent + old


@pytest.mark.parametrize("in_window,total", [(0, 0), (0, 5), (5, 5), (3, 250), (100, 101)])
def test_counts_total_and_window(in_window, total):
    stats = aggregate(_records(in_window, total), NOW_MS)
    assert stats.total_tx == total
    assert stats.last_24h_tx == in_window
    assert stats.last_24h_tx <= stats.total_tx


def test_window_start_floors_milliseconds():
    assert window_start(NOW_MS) == NOW_S - WINDOW_SEC


def test_window_boundary_inclusive():
    at_boundary = SignatureRecord("edge", NOW_S - WINDOW_SEC)
    just_outside = SignatureRecord("outside", NOW_S - WINDOW_SEC - 1)
    assert aggregate([at_boundary], NOW_MS).last_24h_tx == 1
    assert aggregate([just_outside], NOW_MS).last_24h_tx == 0


def test_missing_block_time_counts_only_in_total():
    stats = aggregate([SignatureRecord("pending", None), SignatureRecord("recent", NOW_S - 60)], NOW_MS)
    assert stats.total_tx == 2
    assert stats.last_24h_tx == 1


def test_future_block_time_still_counts():
    stats = aggregate([SignatureRecord("ahead", NOW_S + 3600)], NOW_MS)
    assert stats.last_24h_tx == 1


def test_last_updated_is_computation_time_in_ms():
    stats = aggregate([], NOW_MS)
    assert stats.last_updated == NOW_MS
    assert stats.to_dict() == {"totalTx": 0, "last24hTx": 0, "lastUpdated": NOW_MS}


def test_accepts_generator_input():
    stats = aggregate((SignatureRecord(str(i), NOW_S) for i in range(4)), NOW_MS)
    assert stats.total_tx == 4
    assert stats.last_24h_tx == 4
