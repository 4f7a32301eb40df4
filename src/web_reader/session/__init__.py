"""
Session module for web-reader.

Provides the data that flows through one run:
- Session configuration and its normalisation rules
- Console record collection
- Session result
- Final report assembly (truncation, header, console section)
"""

from web_reader.session.models import (
    ButtonChoice,
    ConsoleLog,
    ConsoleRecord,
    FieldFill,
    SessionConfig,
    SessionResult,
    ensure_protocol,
)
from web_reader.session.report import (
    build_report,
    format_console_section,
    truncate_content,
)

__all__ = [
    # Models
    "ButtonChoice",
    "ConsoleLog",
    "ConsoleRecord",
    "FieldFill",
    "SessionConfig",
    "SessionResult",
    "ensure_protocol",
    # Report
    "build_report",
    "format_console_section",
    "truncate_content",
]
