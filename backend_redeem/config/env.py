"""
Environment variable loading and validation for Backend Redeem.

- SOLANA_NETWORK: devnet | mainnet (default: devnet)
- SOLANA_RPC_URL: RPC endpoint; overrides the Helius URL when set
- HELIUS_API_KEY: Helius API key (NEXT_PUBLIC_HELIUS_API_KEY accepted as a fallback)
- TXSTATS_PDA_ADDRESS: program-derived address whose transactions are counted
- DATABASE_URL / DB_CONNECTION_STRING: Postgres URL; SQLite file otherwise
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is backend_redeem/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_BACKEND_DIR = _CONFIG_DIR.parent
_ROOT = _BACKEND_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_PDA_ADDRESS = "2pf7Zx4PitoVB5rJZvGvm2jxKVH8A68uA5StujXdkiP3"
DEFAULT_SQLITE_PATH = "redeem.db"

HELIUS_MAINNET_URL_TEMPLATE = "https://mainnet.helius-rpc.com/?api-key={key}"
HELIUS_DEVNET_URL_TEMPLATE = "https://devnet.helius-rpc.com/?api-key={key}"


def load_redeem_env() -> None:
    """Load .env from project root. Existing process env wins. Safe to call multiple times."""
    load_dotenv(_ENV_PATH, override=False)


def get_solana_network() -> str:
    """
    Return SOLANA_NETWORK from env: devnet | mainnet.
    Default: devnet.
    """
    load_redeem_env()
    raw = (os.getenv("SOLANA_NETWORK") or os.getenv("SOLANA_CLUSTER") or "devnet").strip().lower()
    if raw in ("mainnet", "mainnet-beta"):
        return "mainnet"
    return "devnet"


def get_helius_api_key() -> str:
    load_redeem_env()
    return (os.getenv("HELIUS_API_KEY") or os.getenv("NEXT_PUBLIC_HELIUS_API_KEY") or "").strip()


def get_solana_rpc_url() -> str | None:
    """
    Resolve the RPC URL used for transaction stats.
    Order: SOLANA_RPC_URL > HELIUS_API_KEY (network-specific). None when neither is set.
    """
    load_redeem_env()
    url = (os.getenv("SOLANA_RPC_URL") or "").strip()
    if url:
        return url
    key = get_helius_api_key()
    if not key:
        return None
    if get_solana_network() == "devnet":
        return HELIUS_DEVNET_URL_TEMPLATE.format(key=key)
    return HELIUS_MAINNET_URL_TEMPLATE.format(key=key)


def get_pda_address() -> str:
    """Return TXSTATS_PDA_ADDRESS from env, or the deployed default."""
    load_redeem_env()
    return (os.getenv("TXSTATS_PDA_ADDRESS") or "").strip() or DEFAULT_PDA_ADDRESS


def get_database_url() -> str:
    """
    Return DATABASE_URL or DB_CONNECTION_STRING if set; else SQLite from DATABASE_PATH.
    Heroku-style postgres:// is rewritten to postgresql:// for SQLAlchemy.
    """
    load_redeem_env()
    url = (os.getenv("DATABASE_URL") or os.getenv("DB_CONNECTION_STRING") or "").strip()
    if url:
        if url.startswith("postgres://"):
            url = "postgresql://" + url[len("postgres://"):]
        return url
    path = (os.getenv("DATABASE_PATH") or "").strip() or DEFAULT_SQLITE_PATH
    return f"sqlite:///{path}"


def is_production() -> bool:
    """Return True if APP_ENV (or NODE_ENV) is production."""
    load_redeem_env()
    raw = (os.getenv("APP_ENV") or os.getenv("NODE_ENV") or "").strip().lower()
    return raw == "production"
