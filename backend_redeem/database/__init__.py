"""
Database layer — redemption codes per wallet address.

SQLite by default; PostgreSQL when DATABASE_URL is set.
"""

from backend_redeem.database.codes import (
    WalletCodes,
    get_codes,
    init_db,
    reset_engine_for_test,
    save_code,
)

__all__ = [
    "WalletCodes",
    "get_codes",
    "init_db",
    "reset_engine_for_test",
    "save_code",
]
