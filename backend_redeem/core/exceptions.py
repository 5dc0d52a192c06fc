"""
Application-level exceptions.

API handlers map CodeStorageError to a 500 response; UpstreamRpcError never
reaches an HTTP caller, the stats refresher logs it and keeps the last snapshot.
"""

from __future__ import annotations


class RedeemBackendError(Exception):
    """Base class for all Backend Redeem errors."""


class ConfigError(RedeemBackendError):
    """A setting from the environment is missing or invalid."""


class UpstreamRpcError(RedeemBackendError):
    """Transport, HTTP status or JSON decoding failure talking to the Solana RPC provider."""

    def __init__(self, message: str, *, method: str | None = None, page: int | None = None) -> None:
        super().__init__(message)
        self.method = method
        self.page = page


class CodeStorageError(RedeemBackendError):
    """Reading or writing redemption codes in the database failed."""
