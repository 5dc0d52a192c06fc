"""
Statistics aggregator: signature records -> TxStats snapshot.

Pure function of its inputs. The trailing window is whole seconds,
[now_s - WINDOW_SEC, now_s]; records without block_time never count toward it,
and a block_time after now still counts.
"""

from __future__ import annotations

from collections.abc import Iterable

from backend_redeem.txstats.models import SignatureRecord, TxStats

WINDOW_SEC = 86400


def window_start(now_ms: int) -> int:
    """First Unix second inside the trailing 24h window ending at now_ms."""
    return now_ms // 1000 - WINDOW_SEC


def aggregate(records: Iterable[SignatureRecord], now_ms: int) -> TxStats:
    """Return total and trailing-24h transaction counts, stamped with now_ms."""
    start = window_start(now_ms)
    total = 0
    recent = 0
    for rec in records:
        total += 1
        if rec.block_time is not None and rec.block_time >= start:
            recent += 1
    return TxStats(total_tx=total, last_24h_tx=recent, last_updated=now_ms)
