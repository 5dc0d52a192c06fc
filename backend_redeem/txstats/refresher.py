"""
Background refresher: fetch all signatures, aggregate, store into StatsCache.

start() runs one cycle in the calling thread so the API does not serve the zero
snapshot when the first fetch succeeds, then repeats the cycle every
interval_sec in a daemon thread until stop(). A failed cycle is logged and the
cached snapshot is left as it was.

At most one cycle runs at a time: a tick that finds a cycle in flight is skipped.
"""

from __future__ import annotations

import threading
import time
from typing import Callable

from backend_redeem.redeem_logging import get_logger
from backend_redeem.txstats.aggregator import aggregate
from backend_redeem.txstats.cache import StatsCache
from backend_redeem.txstats.fetcher import SignatureFetcher
from backend_redeem.txstats.models import TxStats

logger = get_logger(__name__)

DEFAULT_REFRESH_INTERVAL_SEC = 60 * 60.0
SHUTDOWN_JOIN_TIMEOUT_SEC = 15.0


def _now_ms() -> int:
    return int(time.time() * 1000)


class TxStatsRefresher:
    """Owns the refresh cycle for one address and is the only writer of its StatsCache."""

    def __init__(
        self,
        fetcher: SignatureFetcher,
        cache: StatsCache,
        address: str,
        *,
        interval_sec: float = DEFAULT_REFRESH_INTERVAL_SEC,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        if interval_sec <= 0:
            raise ValueError("interval_sec must be positive")
        self._fetcher = fetcher
        self._cache = cache
        self._address = address
        self._interval_sec = interval_sec
        self._clock = clock
        self._in_flight = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def cache(self) -> StatsCache:
        return self._cache

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def refresh_once(self) -> TxStats | None:
        """
        Run one cycle. Returns the new snapshot, or None when the cycle failed or
        was skipped because another one is in flight.
        """
        if not self._in_flight.acquire(blocking=False):
            logger.info("tx_stats_refresh_skipped", reason="in_flight", address=self._address)
            return None
        started = time.monotonic()
        try:
            records = self._fetcher.fetch_all_signatures(self._address)
            snapshot = aggregate(records, self._clock())
            self._cache.replace(snapshot)
        except Exception as e:
            logger.exception(
                "tx_stats_refresh_failed",
                address=self._address,
                error=str(e),
                last_updated=self._cache.read().last_updated,
            )
            return None
        finally:
            self._in_flight.release()
        logger.info(
            "tx_stats_refreshed",
            address=self._address,
            total_tx=snapshot.total_tx,
            last_24h_tx=snapshot.last_24h_tx,
            duration_ms=int((time.monotonic() - started) * 1000),
        )
        return snapshot

    def start(self) -> None:
        """Run the first cycle synchronously, then start the periodic thread."""
        if self.is_running:
            return
        self._stop_event.clear()
        self.refresh_once()
        self._thread = threading.Thread(
            target=self._run,
            name="tx-stats-refresher",
            daemon=True,
        )
        self._thread.start()
        logger.info("tx_stats_refresher_started", interval_sec=self._interval_sec, address=self._address)

    def stop(self, timeout: float = SHUTDOWN_JOIN_TIMEOUT_SEC) -> None:
        """Signal the thread to exit and wait up to timeout seconds. An in-flight fetch is not cancelled."""
        self._stop_event.set()
        thread = self._thread
        if thread is None:
            return
        thread.join(timeout=timeout)
        if thread.is_alive():
            logger.warning("tx_stats_refresher_shutdown_timeout", timeout_sec=timeout)
        else:
            logger.info("tx_stats_refresher_stopped")
            self._thread = None

    def _run(self) -> None:
        while not self._stop_event.wait(timeout=self._interval_sec):
            self.refresh_once()
