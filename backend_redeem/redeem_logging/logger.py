"""
structlog setup for Backend Redeem.

Every line is one event: a snake_case event_type plus keyword fields, stamped
with an ISO timestamp and level. JSON by default (LOG_FORMAT=json); LOG_FORMAT=console
for local runs. No backend_redeem imports here, config and storage both log.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

_Processor = Any


def _stamp_event(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Add timestamp; expose structlog's positional event as event_type and message."""
    event_dict.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
    if "event" in event_dict:
        event_dict.setdefault("event_type", event_dict.pop("event"))
    if "event_type" in event_dict:
        event_dict.setdefault("message", str(event_dict["event_type"]))
    return event_dict


def _renderer(fmt: str) -> _Processor:
    if fmt == "console":
        return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    return structlog.processors.JSONRenderer()


def configure_logging(level: str | None = None, fmt: str | None = None) -> None:
    """
    (Re)configure structlog. Defaults come from LOG_LEVEL (INFO) and LOG_FORMAT (json).
    Called once on import; main or tests may call it again to switch level or format.
    """
    level_name = (level or os.getenv("LOG_LEVEL") or "INFO").strip().upper()
    fmt = (fmt or os.getenv("LOG_FORMAT") or "json").strip().lower()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _stamp_event,
            _renderer(fmt),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level_name, logging.INFO)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_logging()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Logger bound to the module name:

        logger = get_logger(__name__)
        logger.info("tx_stats_refreshed", total_tx=237, last_24h_tx=12)
    """
    return structlog.get_logger(name).bind(logger=name)


def mask_api_key(url: str) -> str:
    """Hide the api-key query value of an RPC URL before it is logged."""
    if "api-key=" in url:
        return url.split("api-key=")[0] + "api-key=***"
    return url
