"""
Structured logging for Backend Redeem.

JSON logs with timestamp, level and event_type. Use get_logger() in all modules.
"""

from backend_redeem.redeem_logging.logger import get_logger

__all__ = ["get_logger"]
