"""
Shared pytest fixtures for web-reader tests.

Provides reusable fixtures for:
- Configuration and settings
- An in-memory page implementing the page-context operations
- A session factory yielding that page
- Temporary resources
"""

import tempfile
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Callable, Generator

import pytest

from web_reader.config import Settings
from web_reader.core.exceptions import (
    BrowserError,
    ElementError,
    NavigationError,
    PageLoadError,
    ScreenshotError,
)
from web_reader.utils.logging import reset_logging


class FakePage:
    """
    In-memory stand-in for PageContext.

    The DOM is modelled as the set of selectors that currently match
    something. Effects let a test make a click, key press or script
    change the page: they are called with the page after the action.
    """

    def __init__(
        self,
        url: str = "http://example.test/",
        html: str = "<html><body><h1>Hello</h1><p>World</p></body></html>",
        elements: set[str] | None = None,
    ) -> None:
        self.url = url
        self.html = html
        self.elements: set[str] = set(elements or ())
        self.pages: dict[str, str] = {}
        self.values: dict[str, str] = {}
        self.actions: list[tuple] = []
        self.effects: dict[tuple[str, str], Callable[["FakePage"], None]] = {}
        self.unreachable: set[str] = set()
        self.script_error: str | None = None
        self.script_result: Any = None
        self.ready = "complete"
        self.screenshot_error: str | None = None
        self.content_error: str | None = None
        self._console_callbacks: list[Callable[[str, str], None]] = []

    @property
    def current_url(self) -> str:
        return self.url

    def emit_console(self, level: str, text: str) -> None:
        for callback in self._console_callbacks:
            callback(level, text)

    def go(self, url: str) -> None:
        """Simulate the browser landing on another document."""
        self.url = url
        self.html = self.pages.get(url, self.html)

    def _effect(self, kind: str, target: str) -> None:
        effect = self.effects.get((kind, target))
        if effect is not None:
            effect(self)

    def on_console(self, callback: Callable[[str, str], None]) -> None:
        self._console_callbacks.append(callback)

    async def navigate(self, url: str, wait_until: str = "load") -> None:
        self.actions.append(("navigate", url))
        if url in self.unreachable:
            raise NavigationError("Network error: net::ERR_CONNECTION_REFUSED", url=url)
        self.go(url)

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        self.actions.append(("evaluate", script))
        self._effect("evaluate", script)
        if self.script_error is not None:
            raise BrowserError(f"Script evaluation failed: {self.script_error}")
        return self.script_result

    async def has_element(self, selector: str) -> bool:
        return selector in self.elements

    async def ready_state(self) -> str:
        return self.ready

    async def fill(self, selector: str, value: str, timeout_ms: int | None = None) -> None:
        if selector not in self.elements:
            raise ElementError("Timeout waiting for element", selector=selector)
        self.actions.append(("fill", selector, value))
        self.values[selector] = value

    async def click(self, selector: str, timeout_ms: int | None = None) -> None:
        if selector not in self.elements:
            raise ElementError("Timeout waiting for element", selector=selector)
        self.actions.append(("click", selector))
        self._effect("click", selector)

    async def press(self, selector: str, key: str, timeout_ms: int | None = None) -> None:
        if selector not in self.elements:
            raise ElementError("Timeout waiting for element", selector=selector)
        self.actions.append(("press", selector, key))
        self._effect("press", selector)

    async def screenshot(self, path: Path | str, full_page: bool = True) -> Path:
        if self.screenshot_error is not None:
            raise ScreenshotError(self.screenshot_error, path=str(path))
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"\x89PNG\r\n\x1a\n")
        self.actions.append(("screenshot", str(path)))
        return path

    async def content(self) -> str:
        if self.content_error is not None:
            raise PageLoadError(self.content_error, url=self.url)
        return self.html


@pytest.fixture(autouse=True)
def reset_logging_state():
    """
    Reset logging handlers before and after each test.

    setup_logging() attaches handlers to the package logger; tests
    that call it must not leak them into other tests.
    """
    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory that's cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_settings(temp_dir: Path) -> Settings:
    """
    Provide test settings with temporary profile and browser paths.

    Uses short waits so timeout paths finish quickly.
    """
    return Settings(
        install={"browsers_path": str(temp_dir / "browsers")},
        profiles={"root": str(temp_dir / "profiles")},
        waits={
            "connect_timeout_ms": 200,
            "submit_loading_timeout_ms": 200,
            "change_loading_timeout_ms": 200,
            "submit_grace_ms": 0,
            "submit_navigation_timeout_ms": 200,
            "script_navigation_timeout_ms": 200,
            "ready_state_timeout_ms": 200,
            "field_timeout_ms": 100,
            "click_timeout_ms": 100,
            "poll_interval_ms": 10,
        },
    )


@pytest.fixture
def fake_page() -> FakePage:
    """Provide a fresh in-memory page."""
    return FakePage()


@pytest.fixture
def fake_session(fake_page: FakePage):
    """
    Provide a session factory yielding the fake page.

    The factory records the profile names it was opened with and whether
    each session was closed.
    """

    @asynccontextmanager
    async def factory(profile: str):
        factory.opened.append(profile)
        try:
            yield fake_page
        finally:
            factory.closed += 1

    factory.opened = []
    factory.closed = 0
    return factory


@pytest.fixture
def sample_html() -> str:
    """Provide sample HTML for rendering tests."""
    return """
    <!DOCTYPE html>
    <html lang="en">
    <head>
        <meta charset="UTF-8">
        <title>Test Page Title</title>
        <style>body { color: red; }</style>
        <script>console.log("not content")</script>
    </head>
    <body>
        <main>
            <h1>Welcome to Our Website</h1>
            <p>This is the main content of our test page.</p>
            <h2>Our Products</h2>
            <ul>
                <li>Product A</li>
                <li>Product B</li>
            </ul>
            <p>Read the <a href="/docs">documentation</a>.</p>
        </main>
        <noscript>Enable JavaScript</noscript>
    </body>
    </html>
    """
