"""
web-reader - Read web pages through a real browser, for LLMs.

Loads a page in a browser bound to a persistent profile, optionally
fills and submits a form (with Phoenix LiveView awareness) or injects a
script, and returns the page as markdown together with its console
output.
"""

__version__ = "0.1.0"

from web_reader.config import Settings, load_config
from web_reader.utils.logging import setup_logging, get_logger
from web_reader.core.exceptions import WebReaderError
from web_reader.session.models import SessionConfig, SessionResult
from web_reader.interaction.orchestrator import Orchestrator

__all__ = [
    "Settings",
    "load_config",
    "setup_logging",
    "get_logger",
    "WebReaderError",
    "SessionConfig",
    "SessionResult",
    "Orchestrator",
]
