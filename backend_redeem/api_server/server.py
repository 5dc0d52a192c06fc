"""
FastAPI server — redemption codes and cached transaction stats.

Startup (lifespan): create code tables, run the first stats refresh, then keep
refreshing in a background thread. Reads of /api/tx-stats only ever look at the
cache. Config via env (see backend_redeem.config).
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend_redeem.api_server.routes import router as api_router
from backend_redeem.config import Settings, get_settings
from backend_redeem.core.exceptions import CodeStorageError
from backend_redeem.database import init_db
from backend_redeem.redeem_logging import get_logger
from backend_redeem.redeem_logging.logger import mask_api_key
from backend_redeem.txstats import SignatureFetcher, StatsCache, TxStatsRefresher

logger = get_logger(__name__)


def build_refresher(
    settings: Settings,
    cache: StatsCache,
    fetcher: SignatureFetcher | None = None,
) -> TxStatsRefresher | None:
    """Return a refresher for settings.pda_address, or None when no RPC endpoint is configured."""
    if fetcher is None:
        if not settings.rpc_url:
            logger.warning(
                "tx_stats_refresher_skip",
                reason="missing SOLANA_RPC_URL or HELIUS_API_KEY",
            )
            return None
        fetcher = SignatureFetcher(
            settings.rpc_url,
            request_timeout_sec=settings.request_timeout_sec,
        )
        logger.info(
            "tx_stats_rpc_configured",
            rpc_url=mask_api_key(settings.rpc_url),
            network=settings.solana_network,
        )
    return TxStatsRefresher(
        fetcher,
        cache,
        settings.pda_address,
        interval_sec=settings.refresh_interval_sec,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Init DB, run the first refresh before serving, start the refresher; stop it on shutdown."""
    try:
        await asyncio.to_thread(init_db)
    except CodeStorageError as e:
        logger.warning("codes_db_init_skip", error=str(e))

    refresher: TxStatsRefresher | None = app.state.refresher
    if refresher is not None:
        await asyncio.to_thread(refresher.start)

    yield

    if refresher is not None:
        await asyncio.to_thread(refresher.stop)


def create_app(
    settings: Settings | None = None,
    *,
    fetcher: SignatureFetcher | None = None,
    cache: StatsCache | None = None,
) -> FastAPI:
    """
    Build the ASGI app. Tests pass a fetcher backed by a mock transport; in
    production the fetcher is built from settings.
    """
    settings = settings or get_settings()
    cache = cache or StatsCache()

    app = FastAPI(
        title="Backend Redeem API",
        description="Redemption codes per wallet and cached transaction stats for the program PDA.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.stats_cache = cache
    app.state.refresher = build_refresher(settings, cache, fetcher)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(api_router, prefix="/api", tags=["Redeem"])

    @app.get("/health")
    def health() -> dict[str, str]:
        """Liveness probe: API is up."""
        return {"status": "ok"}

    return app
