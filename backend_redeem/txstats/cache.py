"""
Single-slot cache for the current TxStats snapshot.

One writer (TxStatsRefresher) and any number of readers (request handlers).
The writer builds a complete snapshot first and swaps it in with one reference
assignment; readers take the reference without locking, so they see either the
old snapshot or the new one, never a mix.
"""

from __future__ import annotations

from backend_redeem.txstats.models import EMPTY_TX_STATS, TxStats


class StatsCache:
    def __init__(self, initial: TxStats = EMPTY_TX_STATS) -> None:
        self._current = initial

    def read(self) -> TxStats:
        """Return the last stored snapshot. Never triggers a refresh."""
        return self._current

    def replace(self, snapshot: TxStats) -> None:
        """Swap in a fully built snapshot. Only the refresher calls this."""
        if snapshot.last_24h_tx > snapshot.total_tx:
            raise ValueError("last_24h_tx cannot exceed total_tx")
        self._current = snapshot
