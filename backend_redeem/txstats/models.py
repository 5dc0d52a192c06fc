"""
Data models for transaction statistics.

SignatureRecord mirrors one getSignaturesForAddress result item; TxStats is the
immutable snapshot held by the stats cache and served by GET /api/tx-stats.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class SignatureRecord:
    """One transaction signature observed for the tracked address. Never persisted."""

    signature: str
    block_time: int | None  # Unix seconds; None if the provider has not indexed it yet

    @classmethod
    def from_rpc_item(cls, item: dict[str, Any]) -> "SignatureRecord":
        """Build from a single getSignaturesForAddress result item."""
        block_time = item.get("blockTime")
        return cls(
            signature=str(item.get("signature") or ""),
            block_time=int(block_time) if block_time is not None else None,
        )


@dataclass(frozen=True)
class TxStats:
    """
    Aggregate snapshot of the tracked address.

    last_24h_tx <= total_tx. last_updated is Unix milliseconds (0 until the first
    successful refresh).
    """

    total_tx: int = 0
    last_24h_tx: int = 0
    last_updated: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "totalTx": self.total_tx,
            "last24hTx": self.last_24h_tx,
            "lastUpdated": self.last_updated,
        }


EMPTY_TX_STATS = TxStats()
