"""
Tests for browser plumbing that runs without a browser.

Tests the profile store, the browser installer and the page context's
error translation.
"""

import os
import subprocess
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from web_reader.browser import BrowserInstaller, PageContext, ProfileStore, validate_profile_name
from web_reader.browser.installer import BROWSERS_PATH_ENV
from web_reader.config import BrowserSettings, InstallSettings
from web_reader.core.exceptions import (
    BrowserError,
    BrowserInstallError,
    ConfigurationError,
    ElementError,
    NavigationError,
    PageLoadError,
    ScreenshotError,
)


class TestProfileStore:
    """Tests for ProfileStore."""

    def test_validate_names(self):
        """Profile names should reject separators, spaces and dot names."""
        assert validate_profile_name("work-2.test_a") == "work-2.test_a"

        for bad in ["", ".", "..", "a/b", "a b", "../x"]:
            with pytest.raises(ConfigurationError):
                validate_profile_name(bad)

    def test_ensure_creates_directory(self, temp_dir: Path):
        """ensure() should create the profile directory under the root."""
        store = ProfileStore(temp_dir / "profiles")

        path = store.ensure("work")

        assert path == temp_dir / "profiles" / "work"
        assert path.is_dir()
        assert store.names() == ["work"]

    def test_profiles_are_separate(self, temp_dir: Path):
        """Different names should map to different directories."""
        store = ProfileStore(temp_dir)

        assert store.ensure("a") != store.ensure("b")

    def test_names(self, temp_dir: Path):
        """Profile names should be listed sorted."""
        store = ProfileStore(temp_dir / "profiles")
        assert store.names() == []

        store.ensure("zeta")
        store.ensure("alpha")

        assert store.names() == ["alpha", "zeta"]

    def test_remove(self, temp_dir: Path):
        """remove() should delete a profile and report whether it existed."""
        store = ProfileStore(temp_dir)
        (store.ensure("old") / "cookies.sqlite").write_text("data")

        assert store.remove("old") is True
        assert not store.path_for("old").exists()
        assert store.remove("old") is False


class TestBrowserInstaller:
    """Tests for BrowserInstaller."""

    @pytest.fixture
    def install(self, temp_dir: Path) -> InstallSettings:
        return InstallSettings(browsers_path=temp_dir / "browsers")

    def playwright_with(self, executable: Path) -> SimpleNamespace:
        return SimpleNamespace(firefox=SimpleNamespace(executable_path=str(executable)))

    def test_configure_environment(self, install, monkeypatch):
        """The browsers path should be exported and created."""
        monkeypatch.delenv(BROWSERS_PATH_ENV, raising=False)
        installer = BrowserInstaller(BrowserSettings(), install)

        installer.configure_environment()

        assert os.environ[BROWSERS_PATH_ENV] == str(install.browsers_path)
        assert install.browsers_path.is_dir()

    def test_explicit_executable_skips_environment(self, install, temp_dir, monkeypatch):
        """An explicit executable should leave the environment alone."""
        monkeypatch.delenv(BROWSERS_PATH_ENV, raising=False)
        browser = BrowserSettings(executable_path=temp_dir / "firefox")

        BrowserInstaller(browser, install).configure_environment()

        assert BROWSERS_PATH_ENV not in os.environ

    @pytest.mark.asyncio
    async def test_uses_cached_build(self, install, temp_dir):
        """An existing build should be used without installing."""
        executable = temp_dir / "firefox-bin"
        executable.write_text("")
        runner = MagicMock()

        installer = BrowserInstaller(BrowserSettings(), install, runner=runner)
        path = await installer.ensure(self.playwright_with(executable))

        assert path == executable
        runner.assert_not_called()

    @pytest.mark.asyncio
    async def test_downloads_missing_build(self, install, temp_dir):
        """A missing build should be installed into the managed cache."""
        executable = temp_dir / "firefox-bin"

        def fake_install(cmd, **kwargs):
            executable.write_text("")
            return subprocess.CompletedProcess(cmd, 0, stdout="ok", stderr="")

        runner = MagicMock(side_effect=fake_install)
        installer = BrowserInstaller(BrowserSettings(), install, runner=runner)

        path = await installer.ensure(self.playwright_with(executable))

        assert path == executable
        cmd = runner.call_args.args[0]
        assert cmd[1:] == ["-m", "playwright", "install", "firefox"]
        assert runner.call_args.kwargs["env"][BROWSERS_PATH_ENV] == str(install.browsers_path)

    @pytest.mark.asyncio
    async def test_failed_download(self, install, temp_dir):
        """A failed install should raise with the installer output."""
        runner = MagicMock(return_value=subprocess.CompletedProcess(
            [], 1, stdout="", stderr="network unreachable"))
        installer = BrowserInstaller(BrowserSettings(), install, runner=runner)

        with pytest.raises(BrowserInstallError, match="network unreachable"):
            await installer.ensure(self.playwright_with(temp_dir / "missing"))

    @pytest.mark.asyncio
    async def test_auto_install_disabled(self, temp_dir):
        """A missing build should fail when auto install is off."""
        install = InstallSettings(browsers_path=temp_dir, auto_install=False)
        installer = BrowserInstaller(BrowserSettings(), install, runner=MagicMock())

        with pytest.raises(BrowserInstallError, match="auto_install"):
            await installer.ensure(self.playwright_with(temp_dir / "missing"))

    @pytest.mark.asyncio
    async def test_missing_explicit_executable(self, install, temp_dir):
        """A missing explicit executable should fail."""
        browser = BrowserSettings(executable_path=temp_dir / "nope")

        with pytest.raises(BrowserInstallError):
            await BrowserInstaller(browser, install).ensure(SimpleNamespace())


class TestPageContext:
    """Tests for PageContext error translation."""

    @pytest.fixture
    def page(self) -> MagicMock:
        page = MagicMock()
        page.url = "http://example.com/"
        page.goto = AsyncMock()
        page.evaluate = AsyncMock()
        page.fill = AsyncMock()
        page.click = AsyncMock()
        page.press = AsyncMock()
        page.screenshot = AsyncMock()
        page.content = AsyncMock(return_value="<html></html>")
        page.query_selector = AsyncMock(return_value=None)
        page.wait_for_load_state = AsyncMock()
        return page

    @pytest.mark.asyncio
    async def test_navigate_timeout(self, page):
        """Navigation timeouts should raise NavigationError."""
        page.goto.side_effect = Exception("Timeout 30000ms exceeded")

        with pytest.raises(NavigationError, match="Navigation timeout"):
            await PageContext(page).navigate("http://example.com")

    @pytest.mark.asyncio
    async def test_navigate_network_error(self, page):
        """Connection failures should be reported as network errors."""
        page.goto.side_effect = Exception("NS_ERROR_CONNECTION_REFUSED")

        with pytest.raises(NavigationError, match="Network error"):
            await PageContext(page).navigate("http://localhost:1")

    @pytest.mark.asyncio
    async def test_http_error_status_is_not_fatal(self, page):
        """Error status codes should still return the response."""
        page.goto.return_value = SimpleNamespace(status=404)

        response = await PageContext(page).navigate("http://example.com/missing")

        assert response.status == 404

    @pytest.mark.asyncio
    async def test_evaluate_error(self, page):
        """Script errors should raise BrowserError."""
        page.evaluate.side_effect = Exception("ReferenceError")

        with pytest.raises(BrowserError):
            await PageContext(page).evaluate("nope()")

    @pytest.mark.asyncio
    async def test_fill_error(self, page):
        """Fill failures should carry the selector."""
        page.fill.side_effect = Exception("Timeout")

        with pytest.raises(ElementError) as exc_info:
            await PageContext(page).fill('[name="q"]', "x", timeout_ms=100)

        assert exc_info.value.selector == '[name="q"]'

    @pytest.mark.asyncio
    async def test_has_element(self, page):
        """has_element() should reflect whether the selector matches."""
        assert await PageContext(page).has_element(".phx-connected") is False

        page.query_selector.return_value = object()
        assert await PageContext(page).has_element(".phx-connected") is True

    @pytest.mark.asyncio
    async def test_screenshot_creates_parent(self, page, temp_dir):
        """Screenshots should create missing parent directories."""
        path = temp_dir / "shots" / "page.png"

        result = await PageContext(page).screenshot(path)

        assert result == path
        assert path.parent.is_dir()
        page.screenshot.assert_awaited_once_with(path=str(path), full_page=True)

    @pytest.mark.asyncio
    async def test_screenshot_error(self, page, temp_dir):
        """Screenshot failures should raise ScreenshotError."""
        page.screenshot.side_effect = Exception("Permission denied")

        with pytest.raises(ScreenshotError):
            await PageContext(page).screenshot(temp_dir / "page.png")

    @pytest.mark.asyncio
    async def test_content_error(self, page):
        """Content failures should raise PageLoadError."""
        page.content.side_effect = Exception("Target closed")

        with pytest.raises(PageLoadError):
            await PageContext(page).content()

    def test_console_callback(self, page):
        """Console events should reach the callback as (level, text)."""
        received = []
        context = PageContext(page)

        context.on_console(lambda level, text: received.append((level, text)))
        event, handler = page.on.call_args.args
        handler(SimpleNamespace(type="warning", text="careful"))

        assert event == "console"
        assert received == [("warning", "careful")]
