"""
Transaction statistics for the tracked program-derived address.

SignatureFetcher pages through getSignaturesForAddress, aggregate() rolls the
records up into a TxStats snapshot, StatsCache holds the current snapshot and
TxStatsRefresher drives the cycle on a timer.
"""

from backend_redeem.txstats.aggregator import aggregate
from backend_redeem.txstats.cache import StatsCache
from backend_redeem.txstats.fetcher import SIGNATURES_PAGE_LIMIT, SignatureFetcher
from backend_redeem.txstats.models import EMPTY_TX_STATS, SignatureRecord, TxStats
from backend_redeem.txstats.refresher import TxStatsRefresher

__all__ = [
    "EMPTY_TX_STATS",
    "SIGNATURES_PAGE_LIMIT",
    "SignatureFetcher",
    "SignatureRecord",
    "StatsCache",
    "TxStats",
    "TxStatsRefresher",
    "aggregate",
]
