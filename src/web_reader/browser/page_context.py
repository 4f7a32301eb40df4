"""
Page context wrapper with the operations a run needs.

Provides a small, consistent interface over a Playwright Page:
navigation, script evaluation, element interaction, screenshots,
content retrieval and console subscription. Playwright errors are
translated into the web-reader exception hierarchy.
"""

import time
from pathlib import Path
from typing import Any, Callable

from playwright.async_api import ConsoleMessage, Page, Response

from web_reader.core.exceptions import (
    BrowserError,
    ElementError,
    NavigationError,
    PageLoadError,
    ScreenshotError,
)
from web_reader.utils.logging import get_logger

logger = get_logger(__name__)

ConsoleCallback = Callable[[str, str], None]


class PageContext:
    """
    Wrapper around Playwright Page with utility methods.

    Example:
        >>> page = await context.new_page()
        >>> ctx = PageContext(page)
        >>> await ctx.navigate("https://example.com")
        >>> html = await ctx.content()
    """

    def __init__(self, page: Page) -> None:
        """
        Initialize page context.

        Args:
            page: Playwright Page instance
        """
        self.page = page
        self._last_response: Response | None = None

    @property
    def current_url(self) -> str:
        """Get the current page URL."""
        return self.page.url

    def on_console(self, callback: ConsoleCallback) -> None:
        """
        Subscribe to console messages for the life of the page.

        Args:
            callback: Called with (level, text) for every message,
                where level is Playwright's type, e.g. "log" or "warning"
        """

        def handle(message: ConsoleMessage) -> None:
            callback(message.type, message.text)

        self.page.on("console", handle)

    async def navigate(
        self,
        url: str,
        wait_until: str = "load",
    ) -> Response | None:
        """
        Navigate to URL and wait for page load.

        Args:
            url: Target URL to navigate to
            wait_until: Load state to wait for ("load", "domcontentloaded",
                "networkidle" or "commit")

        Returns:
            Response object if available

        Raises:
            NavigationError: If navigation fails or times out
        """
        start_time = time.perf_counter()

        try:
            logger.debug(f"Navigating to: {url}")
            response = await self.page.goto(url, wait_until=wait_until)
        except Exception as e:
            error_msg = str(e)

            if "timeout" in error_msg.lower():
                raise NavigationError(
                    f"Navigation timeout: {error_msg}", url=url) from e

            if any(x in error_msg.lower() for x in ["net::", "ns_error", "dns", "connection"]):
                raise NavigationError(
                    f"Network error: {error_msg}", url=url) from e

            raise NavigationError(
                f"Navigation failed: {error_msg}", url=url) from e

        self._last_response = response

        elapsed = (time.perf_counter() - start_time) * 1000
        logger.debug(f"Navigation complete in {elapsed:.0f}ms")

        # Error pages are still pages worth reading
        if response is not None and response.status >= 400:
            logger.warning(f"HTTP {response.status} from {url}")

        return response

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        """
        Evaluate JavaScript in the page.

        Args:
            script: Expression, statements, or function source
            arg: Optional argument passed to a function source

        Returns:
            The JSON-serialisable result of the evaluation

        Raises:
            BrowserError: If evaluation throws or the context is destroyed
        """
        try:
            if arg is None:
                return await self.page.evaluate(script)
            return await self.page.evaluate(script, arg)
        except Exception as e:
            raise BrowserError(f"Script evaluation failed: {e}") from e

    async def has_element(self, selector: str) -> bool:
        """Check whether any element currently matches the selector."""
        try:
            return await self.page.query_selector(selector) is not None
        except Exception as e:
            raise BrowserError(
                f"Element lookup failed: {e}", details={"selector": selector}) from e

    async def ready_state(self) -> str:
        """Return document.readyState."""
        return await self.evaluate("document.readyState")

    async def fill(self, selector: str, value: str, timeout_ms: int | None = None) -> None:
        """
        Replace the value of an input element.

        Raises:
            ElementError: If no fillable element appears in time
        """
        try:
            await self.page.fill(selector, value, timeout=timeout_ms)
        except Exception as e:
            raise ElementError(f"Could not fill element: {e}", selector=selector) from e

    async def click(self, selector: str, timeout_ms: int | None = None) -> None:
        """
        Click the first element matching the selector.

        Raises:
            ElementError: If no clickable element appears in time
        """
        try:
            await self.page.click(selector, timeout=timeout_ms)
        except Exception as e:
            raise ElementError(f"Could not click element: {e}", selector=selector) from e

    async def press(self, selector: str, key: str, timeout_ms: int | None = None) -> None:
        """
        Focus an element and press a key on it.

        Raises:
            ElementError: If the element does not appear in time
        """
        try:
            await self.page.press(selector, key, timeout=timeout_ms)
        except Exception as e:
            raise ElementError(f"Could not press {key}: {e}", selector=selector) from e

    async def screenshot(self, path: Path | str, full_page: bool = True) -> Path:
        """
        Capture the page into an image file.

        The image format follows the file extension (png or jpeg).

        Raises:
            ScreenshotError: If the capture or the write fails
        """
        path = Path(path)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            await self.page.screenshot(path=str(path), full_page=full_page)
        except Exception as e:
            raise ScreenshotError(f"Screenshot failed: {e}", path=str(path)) from e

        logger.debug(f"Screenshot saved: {path}")
        return path

    async def content(self) -> str:
        """
        Return the serialised markup of the current document.

        Waits for the load event first, so a navigation still in flight
        (e.g. after a form submit) finishes before the markup is read.

        Raises:
            PageLoadError: If the markup cannot be retrieved
        """
        try:
            await self.page.wait_for_load_state("load")
            return await self.page.content()
        except Exception as e:
            raise PageLoadError(
                f"Could not get page content: {e}", url=self.page.url) from e

    async def close(self) -> None:
        """Close the page."""
        try:
            await self.page.close()
        except Exception as e:
            logger.warning(f"Error closing page: {e}")
