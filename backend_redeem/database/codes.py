"""
Redemption code storage — SQLAlchemy-backed wallet_addresses table.

Uses DATABASE_URL for PostgreSQL when set; otherwise falls back to SQLite
(DATABASE_PATH or redeem.db). One row per wallet; codes is a JSON object keyed
by code value.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Iterator

from sqlalchemy import JSON, Column, Text, create_engine
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from backend_redeem.config.env import get_database_url, is_production
from backend_redeem.core.exceptions import CodeStorageError
from backend_redeem.redeem_logging import get_logger

logger = get_logger(__name__)

Base = declarative_base()

# Postgres pool: max clients, idle recycle, connect timeout (seconds)
POOL_SIZE = 20
POOL_RECYCLE_SEC = 30
CONNECT_TIMEOUT_SEC = 2


class WalletCodes(Base):
    """All redemption codes issued to one wallet address."""

    __tablename__ = "wallet_addresses"

    wallet_address = Column(Text, primary_key=True)
    codes = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False, default=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "wallet_address": self.wallet_address,
            "codes": dict(self.codes or {}),
        }


_engine = None
_SessionLocal: sessionmaker | None = None


def _redacted(url: str) -> str:
    return url.split("?")[0].split("@")[-1]


def _get_engine():
    """Create or return cached engine."""
    global _engine
    if _engine is None:
        url = get_database_url()
        if url.startswith("sqlite"):
            _engine = create_engine(url, connect_args={"check_same_thread": False})
        else:
            connect_args: dict[str, Any] = {"connect_timeout": CONNECT_TIMEOUT_SEC}
            if is_production():
                connect_args["sslmode"] = "require"
            _engine = create_engine(
                url,
                connect_args=connect_args,
                pool_size=POOL_SIZE,
                pool_recycle=POOL_RECYCLE_SEC,
                pool_pre_ping=True,
            )
        logger.info("codes_db_engine", url=_redacted(url))
    return _engine


def _get_session_factory() -> sessionmaker:
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_get_engine())
    return _SessionLocal


@contextmanager
def _session_scope() -> Iterator[Session]:
    """Context manager for a single session. Commits on success, rolls back on error."""
    session = _get_session_factory()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db() -> None:
    """Create the wallet_addresses table if it does not exist. Safe to call on every startup."""
    try:
        Base.metadata.create_all(bind=_get_engine())
        logger.info("codes_db_init", url=_redacted(get_database_url()))
    except SQLAlchemyError as e:
        logger.exception("codes_db_init_failed", error=str(e))
        raise CodeStorageError("Failed to create code tables") from e


def build_code_record(code: str, amount: int | float) -> dict[str, Any]:
    return {
        "value": code,
        "created_at": datetime.now(timezone.utc).isoformat(),
        "is_used": False,
        "amount": amount,
    }


def _upsert_code(session: Session, wallet_address: str, code: str, record: dict[str, Any]) -> None:
    row = (
        session.query(WalletCodes)
        .filter(WalletCodes.wallet_address == wallet_address)
        .with_for_update()
        .first()
    )
    if row is None:
        session.add(WalletCodes(wallet_address=wallet_address, codes={code: record}))
    else:
        # JSON columns do not track in-place mutation; assign a new dict
        row.codes = {**(row.codes or {}), code: record}
    session.flush()


def save_code(wallet_address: str, code: str, amount: int | float) -> dict[str, Any]:
    """
    Store code for wallet_address, creating the wallet row if needed.
    An existing entry for the same code is overwritten; other codes are kept.
    Returns the stored code record.
    """
    wallet_address = (wallet_address or "").strip()
    code = (code or "").strip()
    if not wallet_address or not code:
        raise ValueError("wallet_address and code are required")
    record = build_code_record(code, amount)
    try:
        try:
            with _session_scope() as session:
                _upsert_code(session, wallet_address, code, record)
        except IntegrityError:
            # Another request created the row first; update it instead
            with _session_scope() as session:
                _upsert_code(session, wallet_address, code, record)
    except SQLAlchemyError as e:
        logger.exception("codes_save_failed", wallet=wallet_address[:16], error=str(e))
        raise CodeStorageError("Failed to save code") from e
    logger.info("codes_saved", wallet=wallet_address[:16], amount=amount)
    return record


def get_codes(wallet_address: str) -> dict[str, Any]:
    """Return the codes object for wallet_address, or {} if the wallet has none."""
    wallet_address = (wallet_address or "").strip()
    if not wallet_address:
        return {}
    try:
        with _session_scope() as session:
            row = session.query(WalletCodes).filter(WalletCodes.wallet_address == wallet_address).first()
            return row.to_dict()["codes"] if row else {}
    except SQLAlchemyError as e:
        logger.exception("codes_get_failed", wallet=wallet_address[:16], error=str(e))
        raise CodeStorageError("Failed to get codes") from e


def reset_engine_for_test() -> None:
    """
    Dispose and clear the cached engine and session factory. For tests only; use with a new DATABASE_PATH.
    """
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None
