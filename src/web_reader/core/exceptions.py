"""
Custom exceptions for web-reader.

Provides a hierarchy of exceptions for precise error handling across
all subsystems. All exceptions inherit from WebReaderError.

Exception Hierarchy:
    WebReaderError (base)
    ├── ConfigurationError
    ├── BrowserError
    │   ├── BrowserInstallError
    │   ├── NavigationError
    │   ├── ElementError
    │   ├── ScreenshotError
    │   └── PageLoadError
    └── ExtractionError
"""

from typing import Any


class WebReaderError(Exception):
    """
    Base exception for all web-reader errors.

    All custom exceptions inherit from this class, allowing for
    catch-all handling when needed.

    Attributes:
        message: Human-readable error description
        details: Optional dictionary with additional context
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(
                f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(WebReaderError):
    """
    Error in configuration loading or validation.

    Raised when:
    - Configuration file is missing or malformed
    - A profile name is not filesystem-safe
    - Session options fail validation
    """

    pass


# =============================================================================
# Browser Errors
# =============================================================================


class BrowserError(WebReaderError):
    """
    Base error for browser/Playwright operations.

    Raised for general browser-related failures not covered by
    more specific subclasses, e.g. a session that cannot be created.
    """

    pass


class BrowserInstallError(BrowserError):
    """
    Error acquiring a browser build.

    Raised when:
    - The configured executable does not exist
    - Downloading the browser build fails
    - The executable is still missing after installation
    """

    def __init__(
        self,
        message: str,
        executable: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if executable:
            details["executable"] = executable
        super().__init__(message, details)
        self.executable = executable


class NavigationError(BrowserError):
    """
    Error during page navigation.

    Raised when:
    - URL is unreachable
    - Navigation times out
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if url:
            details["url"] = url
        super().__init__(message, details)
        self.url = url


class ElementError(BrowserError):
    """
    Error locating or interacting with a page element.

    Raised when a fill, click or key press cannot find its target
    within the configured timeout.
    """

    def __init__(
        self,
        message: str,
        selector: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if selector:
            details["selector"] = selector
        super().__init__(message, details)
        self.selector = selector


class ScreenshotError(BrowserError):
    """Error capturing or writing a screenshot."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if path:
            details["path"] = path
        super().__init__(message, details)
        self.path = path


class PageLoadError(BrowserError):
    """
    Error retrieving page content.

    Raised when the current document's markup cannot be read,
    e.g. because the page crashed or was closed.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if url:
            details["url"] = url
        super().__init__(message, details)
        self.url = url


# =============================================================================
# Extraction Errors
# =============================================================================


class ExtractionError(WebReaderError):
    """
    Error rendering page markup into text.

    Raised when the HTML cannot be parsed or converted.
    """

    pass
