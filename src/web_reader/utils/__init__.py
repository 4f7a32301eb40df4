"""
Utilities module for web-reader.

Provides logging setup and the bounded polling primitive.
"""

from web_reader.utils.logging import setup_logging, get_logger, reset_logging
from web_reader.utils.waiting import wait_until

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "reset_logging",
    # Polling
    "wait_until",
]
