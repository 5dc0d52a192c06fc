"""
Application settings and environment configuration.

Responsibilities:
- Load configuration from environment variables and .env files.
- Validate required settings and provide defaults for optional ones.
- Expose typed settings (RPC URL, PDA address, API port, DB URL, refresh interval)
  for use by the stats refresher, the code storage layer and the API server.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from solders.pubkey import Pubkey

from backend_redeem.config.env import (
    get_pda_address,
    get_solana_network,
    get_solana_rpc_url,
    load_redeem_env,
)
from backend_redeem.core.exceptions import ConfigError
from backend_redeem.txstats.fetcher import REQUEST_TIMEOUT_SEC
from backend_redeem.txstats.refresher import DEFAULT_REFRESH_INTERVAL_SEC

DEFAULT_API_PORT = 3001


@dataclass(frozen=True)
class Settings:
    """Typed view of the process environment. Built once by get_settings()."""

    api_host: str
    api_port: int
    cors_origins: tuple[str, ...]
    solana_network: str
    rpc_url: str | None
    pda_address: str
    refresh_interval_sec: float
    request_timeout_sec: float
    log_level: str


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value


def _env_port() -> int:
    raw = (os.getenv("PORT") or os.getenv("API_PORT") or "").strip()
    if not raw:
        return DEFAULT_API_PORT
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"PORT must be an integer, got {raw!r}") from e


def _validate_pda(address: str) -> str:
    """Validate the stats address as a Solana public key. Raises ConfigError if invalid."""
    try:
        Pubkey.from_string(address)
    except Exception as e:
        raise ConfigError(f"Invalid TXSTATS_PDA_ADDRESS {address!r}: {e}") from e
    return address


def get_settings() -> Settings:
    """
    Return the current application settings.

    Raises:
        ConfigError: a numeric setting does not parse or the PDA address is not a valid public key.
    """
    load_redeem_env()
    origins_raw = (os.getenv("CORS_ORIGINS") or "*").strip()
    origins = tuple(o.strip() for o in origins_raw.split(",") if o.strip()) or ("*",)
    return Settings(
        api_host=(os.getenv("API_HOST") or "0.0.0.0").strip(),
        api_port=_env_port(),
        cors_origins=origins,
        solana_network=get_solana_network(),
        rpc_url=get_solana_rpc_url(),
        pda_address=_validate_pda(get_pda_address()),
        refresh_interval_sec=_env_float("TXSTATS_REFRESH_INTERVAL_SEC", DEFAULT_REFRESH_INTERVAL_SEC),
        request_timeout_sec=_env_float("TXSTATS_REQUEST_TIMEOUT_SEC", REQUEST_TIMEOUT_SEC),
        log_level=(os.getenv("LOG_LEVEL") or "info").strip().lower(),
    )
