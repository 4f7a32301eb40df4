"""
Core module for web-reader.

Contains the exception hierarchy and the stage outcome type used
throughout the application.
"""

from web_reader.core.outcome import StageOutcome, StageStatus
from web_reader.core.exceptions import (
    WebReaderError,
    ConfigurationError,
    BrowserError,
    BrowserInstallError,
    NavigationError,
    ElementError,
    ScreenshotError,
    PageLoadError,
    ExtractionError,
)

__all__ = [
    # Base
    "WebReaderError",
    "ConfigurationError",
    # Browser
    "BrowserError",
    "BrowserInstallError",
    "NavigationError",
    "ElementError",
    "ScreenshotError",
    "PageLoadError",
    # Extraction
    "ExtractionError",
    # Stage outcomes
    "StageOutcome",
    "StageStatus",
]
