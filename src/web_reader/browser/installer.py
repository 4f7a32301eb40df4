"""
Browser build acquisition.

Keeps Playwright's browser builds in a cache directory owned by
web-reader and downloads the configured engine the first time it is
needed. An existing executable at the expected path is reused as is.
"""

import asyncio
import os
import subprocess
import sys
from pathlib import Path
from typing import Callable

from playwright.async_api import Playwright

from web_reader.config.settings import BrowserSettings, InstallSettings
from web_reader.core.exceptions import BrowserInstallError
from web_reader.utils.logging import get_logger

logger = get_logger(__name__)

BROWSERS_PATH_ENV = "PLAYWRIGHT_BROWSERS_PATH"


class BrowserInstaller:
    """
    Resolves (and if needed downloads) the browser executable.

    configure_environment() must run before Playwright is started so the
    driver looks for builds under the managed cache directory.

    Example:
        >>> installer = BrowserInstaller(settings.browser, settings.install)
        >>> installer.configure_environment()
        >>> playwright = await async_playwright().start()
        >>> executable = await installer.ensure(playwright)
    """

    def __init__(
        self,
        browser: BrowserSettings,
        install: InstallSettings,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ) -> None:
        """
        Args:
            browser: Browser settings (engine, explicit executable)
            install: Cache location and auto-install switch
            runner: subprocess.run compatible callable used for installs
        """
        self.browser = browser
        self.install = install
        self._runner = runner

    def configure_environment(self) -> None:
        """Point Playwright at the managed browser cache."""
        if self.browser.executable_path is not None:
            return
        self.install.browsers_path.mkdir(parents=True, exist_ok=True)
        os.environ[BROWSERS_PATH_ENV] = str(self.install.browsers_path)

    async def ensure(self, playwright: Playwright) -> Path:
        """
        Return the browser executable, downloading it if absent.

        Args:
            playwright: A started Playwright instance

        Returns:
            Path to the browser executable

        Raises:
            BrowserInstallError: If no usable executable can be provided
        """
        explicit = self.browser.executable_path
        if explicit is not None:
            if not explicit.exists():
                raise BrowserInstallError(
                    "Configured browser executable does not exist",
                    executable=str(explicit),
                )
            return explicit

        engine = self.browser.browser_type
        executable = Path(getattr(playwright, engine).executable_path)

        if executable.exists():
            logger.info(f"Using cached {engine} at: {self.install.browsers_path}")
            return executable

        if not self.install.auto_install:
            raise BrowserInstallError(
                f"{engine} is not installed and auto_install is disabled",
                executable=str(executable),
            )

        logger.info(f"{engine} not found, downloading...")
        await asyncio.to_thread(self._install, engine)

        if not executable.exists():
            raise BrowserInstallError(
                f"{engine} executable not found after download",
                executable=str(executable),
            )

        logger.info(f"{engine} downloaded to: {self.install.browsers_path}")
        return executable

    def _install(self, engine: str) -> None:
        """Run `playwright install <engine>` against the managed cache."""
        env = dict(os.environ)
        env[BROWSERS_PATH_ENV] = str(self.install.browsers_path)

        try:
            completed = self._runner(
                [sys.executable, "-m", "playwright", "install", engine],
                env=env,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            raise BrowserInstallError(f"Could not run the Playwright installer: {e}") from e

        if completed.returncode != 0:
            output = (completed.stderr or completed.stdout or "").strip()
            raise BrowserInstallError(
                f"Failed to download {engine}: {output[-500:]}",
                details={"returncode": completed.returncode},
            )
