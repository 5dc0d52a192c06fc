"""
HTTP routes under /api: redemption codes and cached transaction stats.

Response bodies keep the shapes existing clients read: {"success": true},
{"codes": {...}}, {"error": "..."} and {totalTx, last24hTx, lastUpdated}.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from backend_redeem.core.exceptions import CodeStorageError
from backend_redeem.database import get_codes, save_code
from backend_redeem.redeem_logging import get_logger
from backend_redeem.txstats import StatsCache

logger = get_logger(__name__)

router = APIRouter()


class SaveCodeRequest(BaseModel):
    """
    POST /api/save-code body. Fields are untyped here so missing or wrong-typed
    values are rejected by the handler with a 400, not by pydantic with a 422.
    """

    model_config = ConfigDict(populate_by_name=True)

    wallet_address: Any = Field(None, alias="walletAddress", description="Wallet address the code belongs to")
    code: Any = Field(None, description="Redemption code value")
    amount: Any = Field(None, description="Amount redeemable with this code")

    def is_complete(self) -> bool:
        """Non-empty string walletAddress and code, numeric amount (0 allowed, bool rejected)."""
        return (
            isinstance(self.wallet_address, str)
            and bool(self.wallet_address)
            and isinstance(self.code, str)
            and bool(self.code)
            and isinstance(self.amount, (int, float))
            and not isinstance(self.amount, bool)
        )


class TxStatsResponse(BaseModel):
    """GET /api/tx-stats response."""

    totalTx: int = Field(..., ge=0, description="Transactions fetched in the last refresh")
    last24hTx: int = Field(..., ge=0, description="Transactions with blockTime in the trailing 24h")
    lastUpdated: int = Field(..., description="Unix ms of the last successful refresh; 0 if none yet")


def get_stats_cache(request: Request) -> StatsCache:
    """Dependency: the app-scoped stats cache."""
    return request.app.state.stats_cache


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post("/save-code")
async def save_code_route(body: SaveCodeRequest) -> Any:
    """Upsert a redemption code for a wallet. Empty walletAddress or code count as missing; amount 0 is allowed."""
    if not body.is_complete():
        return _error(400, "Missing required fields")
    try:
        await run_in_threadpool(save_code, body.wallet_address, body.code, body.amount)
    except ValueError:
        return _error(400, "Missing required fields")
    except CodeStorageError as e:
        logger.warning("save_code_failed", error=str(e))
        return _error(500, "Failed to save code")
    return {"success": True}


@router.get("/get-codes/{wallet_address}")
async def get_codes_route(wallet_address: str) -> Any:
    """Return all codes for a wallet; {"codes": {}} when the wallet is unknown."""
    try:
        codes = await run_in_threadpool(get_codes, wallet_address)
    except CodeStorageError as e:
        logger.warning("get_codes_failed", error=str(e))
        return _error(500, "Failed to get codes")
    return {"codes": codes}


@router.get("/tx-stats", response_model=TxStatsResponse)
def tx_stats(cache: StatsCache = Depends(get_stats_cache)) -> dict[str, int]:
    """Current cached snapshot. Never triggers a refresh; lastUpdated is the only staleness signal."""
    return cache.read().to_dict()
