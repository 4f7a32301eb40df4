"""
Browser lifecycle management using Playwright.

Launches one browser bound to a named persistent profile, hands out the
page to drive, and tears everything down on exit.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from playwright.async_api import (
    async_playwright,
    BrowserContext,
    Playwright,
)

from web_reader.browser.installer import BrowserInstaller
from web_reader.browser.page_context import PageContext
from web_reader.browser.profiles import ProfileStore
from web_reader.config.settings import Settings
from web_reader.core.exceptions import BrowserError, WebReaderError
from web_reader.utils.logging import get_logger

logger = get_logger(__name__)


class BrowserManager:
    """
    Manages a Playwright browser running on a persistent profile.

    Provides async context manager for safe browser creation and cleanup.

    Example:
        >>> async with BrowserManager(settings, profile="work") as manager:
        ...     page = manager.page
        ...     await page.navigate("https://example.com")
    """

    def __init__(
        self,
        settings: Settings,
        profile: str | None = None,
        installer: BrowserInstaller | None = None,
        profiles: ProfileStore | None = None,
    ) -> None:
        """
        Initialize browser manager with configuration.

        Args:
            settings: Application settings
            profile: Profile name (defaults to the configured default profile)
            installer: Browser acquisition helper
            profiles: Profile directory store
        """
        self.settings = settings
        self.profile = profile or settings.profiles.default_profile
        self.installer = installer or BrowserInstaller(
            settings.browser, settings.install)
        self.profiles = profiles or ProfileStore(settings.profiles.root)
        self._playwright: Playwright | None = None
        self._context: BrowserContext | None = None
        self._page: PageContext | None = None

    @property
    def page(self) -> PageContext:
        """The page driven by this session."""
        if self._page is None:
            raise BrowserError("Browser not started. Call start() first.")
        return self._page

    async def start(self) -> None:
        """
        Start Playwright and launch the browser on the profile.

        Raises:
            BrowserError: If the browser fails to launch
        """
        if self._context is not None:
            logger.warning("Browser already started, skipping launch")
            return

        browser_settings = self.settings.browser

        try:
            profile_dir = self.profiles.ensure(self.profile)
            self.installer.configure_environment()
            self._playwright = await async_playwright().start()
            executable = await self.installer.ensure(self._playwright)

            logger.debug(
                f"Starting {browser_settings.browser_type} browser "
                f"(headless={browser_settings.headless}, profile={self.profile})"
            )

            browser_type = getattr(
                self._playwright, browser_settings.browser_type)

            context_options: dict = {
                "headless": browser_settings.headless,
                "executable_path": str(executable),
                "viewport": {
                    "width": browser_settings.viewport_width,
                    "height": browser_settings.viewport_height,
                },
                "ignore_https_errors": browser_settings.ignore_https_errors,
            }

            if browser_settings.user_agent:
                context_options["user_agent"] = browser_settings.user_agent

            self._context = await browser_type.launch_persistent_context(
                str(profile_dir), **context_options)

            self._context.set_default_timeout(browser_settings.timeout_ms)
            self._context.set_default_navigation_timeout(
                browser_settings.navigation_timeout_ms)

            # A persistent context opens with one blank page already
            pages = self._context.pages
            page = pages[0] if pages else await self._context.new_page()
            self._page = PageContext(page)

            logger.debug("Browser started successfully")

        except WebReaderError:
            await self._cleanup()
            raise
        except Exception as e:
            await self._cleanup()
            raise BrowserError(
                f"Failed to launch browser: {e}",
                details={
                    "browser_type": browser_settings.browser_type,
                    "profile": self.profile,
                },
            ) from e

    async def stop(self) -> None:
        """
        Stop browser and cleanup Playwright resources.

        Safe to call multiple times.
        """
        await self._cleanup()
        logger.debug("Browser stopped")

    async def _cleanup(self) -> None:
        """Internal cleanup of browser resources."""
        self._page = None

        if self._context is not None:
            try:
                await self._context.close()
            except Exception as e:
                logger.warning(f"Error closing browser: {e}")
            self._context = None

        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.warning(f"Error stopping Playwright: {e}")
            self._playwright = None

    async def __aenter__(self) -> "BrowserManager":
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit with cleanup."""
        await self.stop()


@asynccontextmanager
async def open_session(
    settings: Settings,
    profile: str,
) -> AsyncGenerator[PageContext, None]:
    """
    Convenience context manager yielding the page of a fresh session.

    Args:
        settings: Application settings
        profile: Profile name

    Yields:
        PageContext bound to the profile's browser

    Example:
        >>> async with open_session(settings, "default") as page:
        ...     await page.navigate("https://example.com")
    """
    manager = BrowserManager(settings, profile=profile)
    try:
        await manager.start()
        yield manager.page
    finally:
        await manager.stop()
