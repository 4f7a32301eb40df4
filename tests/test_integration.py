"""
Integration tests for web-reader.

Runs the real orchestrator and browser against a small local site.
Skipped when no Playwright browser build is installed.
"""

import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from html import escape
from pathlib import Path
from typing import Generator
from urllib.parse import parse_qsl, urlparse

import pytest
import pytest_asyncio
from playwright.async_api import async_playwright

from web_reader.browser.manager import open_session
from web_reader.config import Settings
from web_reader.interaction import Orchestrator
from web_reader.session.models import ButtonChoice, FieldFill, SessionConfig

PAGES = {
    "/": "<h1>Home</h1><p>Welcome to the test site.</p>",
    "/blank": "<p>Blank</p>",
    "/next": "<h1>Next page</h1>",
    "/form": """
        <h1>Login</h1>
        <form id="login" action="/submitted" method="get">
            <input name="email">
            <input name="password" type="password">
            <button name="user[remember_me]" value="true">Remember me</button>
            <input type="submit" value="Log in">
        </form>
    """,
}


class SiteHandler(BaseHTTPRequestHandler):
    """Serves PAGES and echoes submitted form fields."""

    def do_GET(self) -> None:
        parsed = urlparse(self.path)

        if parsed.path == "/submitted":
            fields = "".join(
                f"<li>{escape(k)}={escape(v)}</li>" for k, v in parse_qsl(parsed.query))
            body = f"<h1>Submitted</h1><ul>{fields}</ul>"
        elif parsed.path in PAGES:
            body = PAGES[parsed.path]
        else:
            self.send_error(404)
            return

        data = f"<!DOCTYPE html><html><body>{body}</body></html>".encode()
        self.send_response(200)
        self.send_header("Content-Type", "text/html; charset=utf-8")
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)

    def log_message(self, format: str, *args) -> None:
        pass


@pytest.fixture(scope="module")
def site() -> Generator[str, None, None]:
    """Serve the test site on a free local port."""
    server = ThreadingHTTPServer(("127.0.0.1", 0), SiteHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_address[1]}"
    server.shutdown()
    server.server_close()


async def installed_firefox() -> Path | None:
    async with async_playwright() as playwright:
        path = Path(playwright.firefox.executable_path)
    return path if path.exists() else None


@pytest_asyncio.fixture
async def settings(temp_dir: Path) -> Settings:
    executable = await installed_firefox()
    if executable is None:
        pytest.skip("No Playwright firefox build installed")
    return Settings(
        browser={"executable_path": str(executable)},
        install={"auto_install": False},
        profiles={"root": str(temp_dir / "profiles")},
        waits={"submit_navigation_timeout_ms": 3000},
    )


async def read(settings: Settings, **options):
    orchestrator = Orchestrator(
        settings, lambda profile: open_session(settings, profile))
    return await orchestrator.run(SessionConfig(**options))


class TestBrowserRuns:
    """End-to-end runs against the local site."""

    @pytest.mark.asyncio
    async def test_reads_page(self, settings, site):
        """A plain page should be read as markdown."""
        result = await read(settings, url=f"{site}/")

        assert result.ok, result.error
        assert "# Home" in result.content
        assert result.framework_active is False

    @pytest.mark.asyncio
    async def test_truncation(self, settings, site):
        """Long output should be truncated with a notice."""
        result = await read(settings, url=f"{site}/", raw=True, truncate_after=50)

        assert result.truncated
        assert "output truncated after 50 chars" in result.content

    @pytest.mark.asyncio
    async def test_console_levels(self, settings, site):
        """Console messages should be captured with their levels."""
        result = await read(
            settings,
            url=f"{site}/blank",
            script="console.log('one'); console.warn('two'); console.error('three')",
        )

        assert [r.format() for r in result.console] == [
            "[LOG] one", "[WARNING] two", "[ERROR] three",
        ]

    @pytest.mark.asyncio
    async def test_profile_persistence_and_isolation(self, settings, site):
        """Local storage should persist per profile only."""
        url = f"{site}/blank"

        await read(settings, url=url, profile="one",
                   script="localStorage.setItem('token', 'secret')")
        same = await read(settings, url=url, profile="one",
                          script="console.log(localStorage.getItem('token'))")
        other = await read(settings, url=url, profile="two",
                           script="console.log(localStorage.getItem('token'))")

        assert [r.text for r in same.console] == ["secret"]
        assert [r.text for r in other.console] == ["null"]

    @pytest.mark.asyncio
    async def test_form_with_bracketed_button(self, settings, site):
        """A button with brackets in its name should submit the form."""
        result = await read(
            settings,
            url=f"{site}/form",
            form_id="login",
            inputs=(FieldFill("email", "test@example.com"), FieldFill("password", "pw")),
            button=ButtonChoice("user[remember_me]", "true"),
        )

        assert result.ok, result.error
        assert "/submitted" in result.final_url
        assert "email=test@example.com" in result.content
        assert "user[remember_me]=true" in result.content

    @pytest.mark.asyncio
    async def test_form_generic_submit(self, settings, site):
        """A form without --button should be submitted."""
        result = await read(
            settings,
            url=f"{site}/form",
            form_id="login",
            inputs=(FieldFill("email", "a@b.c"),),
        )

        assert result.ok, result.error

    @pytest.mark.asyncio
    async def test_missing_field_is_fatal(self, settings, site):
        """A missing field should stop the run at form submission."""
        result = await read(
            settings,
            url=f"{site}/form",
            form_id="login",
            inputs=(FieldFill("nonexistent", "x"),),
        )

        assert result.failed_stage == "submit-form"

    @pytest.mark.asyncio
    async def test_script_navigation(self, settings, site):
        """A navigating script should be followed to the new page."""
        result = await read(
            settings,
            url=f"{site}/blank",
            script="setTimeout(() => { location.href = '/next' }, 300)",
            wait_for_navigation=True,
            navigation_timeout_ms=3000,
        )

        assert result.ok, result.error
        assert "Next page" in result.content
