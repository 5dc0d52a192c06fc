"""
Main entrypoint: FastAPI server for redemption codes and transaction stats.

The stats refresher is started by the app lifespan (first refresh before the
server accepts requests, then every TXSTATS_REFRESH_INTERVAL_SEC).

Env: DATABASE_URL, HELIUS_API_KEY or SOLANA_RPC_URL, TXSTATS_PDA_ADDRESS, PORT, LOG_LEVEL, etc.

Equivalent: uvicorn backend_redeem.api_server.app:app --host 0.0.0.0 --port 3001
"""

import uvicorn

from backend_redeem.config import get_settings
from backend_redeem.redeem_logging import get_logger

logger = get_logger("main")


def main() -> None:
    """Build the app from env settings and serve it."""
    settings = get_settings()

    from backend_redeem.api_server.server import create_app

    app = create_app(settings)
    logger.info("main_server_starting", host=settings.api_host, port=settings.api_port)
    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_level=settings.log_level)


if __name__ == "__main__":
    main()
