"""
Test that redeem_logging can be imported without circular import and logger works.
"""

from __future__ import annotations


def test_logging_import():
    """Import get_logger from redeem_logging and use the logger."""
    from backend_redeem.redeem_logging import get_logger

    logger = get_logger("test")
    assert logger is not None
    assert hasattr(logger, "info")
    assert hasattr(logger, "warning")
    assert hasattr(logger, "exception")
    logger.info("test_message", key="value")


def test_mask_api_key():
    from backend_redeem.redeem_logging.logger import mask_api_key

    assert mask_api_key("https://devnet.helius-rpc.com/?api-key=secret") == "https://devnet.helius-rpc.com/?api-key=***"
    assert mask_api_key("http://localhost:8899") == "http://localhost:8899"


def test_stamp_event_renames_event():
    from backend_redeem.redeem_logging.logger import _stamp_event

    out = _stamp_event(None, "info", {"event": "tx_stats_refreshed", "total_tx": 3})
    assert "event" not in out
    assert out["event_type"] == "tx_stats_refreshed"
    assert out["message"] == "tx_stats_refreshed"
    assert out["total_tx"] == 3
    assert out["timestamp"]


def test_configure_logging_json_and_level(monkeypatch):
    import io
    import json
    import sys

    from backend_redeem.redeem_logging import get_logger
    from backend_redeem.redeem_logging.logger import configure_logging

    buf = io.StringIO()
    monkeypatch.setattr(sys, "stdout", buf)
    try:
        configure_logging(level="warning", fmt="json")
        logger = get_logger("test")
        logger.info("dropped_below_level")
        logger.warning("save_code_failed", error="boom")
    finally:
        monkeypatch.undo()
        configure_logging()

    lines = [line for line in buf.getvalue().splitlines() if line.strip()]
    assert len(lines) == 1
    record = json.loads(lines[0])
    assert record["event_type"] == "save_code_failed"
    assert record["level"] == "warning"
    assert record["logger"] == "test"
    assert record["error"] == "boom"
