"""
Main CLI application for web-reader.

Fetches one page in a real browser bound to a persistent profile,
optionally fills and submits a form or runs a script, and prints the
page as markdown (or raw markup) for a language model to read.
"""

import asyncio
import sys
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console

from web_reader import __version__
from web_reader.browser.manager import open_session
from web_reader.browser.profiles import ProfileStore
from web_reader.cli.arguments import OrderedOptions, split_ordered_options
from web_reader.config import Settings, get_default_config_path, load_config
from web_reader.core.exceptions import ConfigurationError
from web_reader.interaction.orchestrator import Orchestrator
from web_reader.session.models import SessionConfig, SessionResult
from web_reader.session.report import build_report
from web_reader.utils.logging import get_logger, setup_logging

EPILOG = """\
Form and script options (order matters):

--input NAME  Name attribute of a form field to fill; repeatable.

--value VALUE  Value for the preceding --input or --button.

--button NAME  Click this submit button instead of the generic submit.

--wait-for-navigation [MS]  After --js, wait for the page to navigate (default 5000 ms, configurable).

Phoenix LiveView Support:
This tool automatically detects Phoenix LiveView applications and waits
for the connection (.phx-connected), submits forms with Enter and waits
for the loading states (.phx-submit-loading, .phx-change-loading) to
clear, and keeps session state in the profile between interactions.

Examples:

web https://example.com

web https://example.com --screenshot page.png --truncate-after 5000

web localhost:4000/login --form login_form --input email --value test@example.com --input password --value secret

web localhost:4000/login --form login_form --input email --value a@b.c --button user[remember_me] --value true --after-submit localhost:4000/dashboard

web example.com --js "document.querySelector('a').click()" --wait-for-navigation 2000

web example.com --profile work
"""

app = typer.Typer(
    name="web",
    help="Portable web page reader for LLMs",
    add_completion=False,
    no_args_is_help=True,
)

# Results go to stdout; everything else goes to stderr
err_console = Console(stderr=True)
logger = get_logger(__name__)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"web-reader v{__version__}")
        raise typer.Exit()


def _fail(message: str, code: int = 1) -> NoReturn:
    err_console.print(f"[red]Error:[/red] {message}", highlight=False)
    raise typer.Exit(code)


def _list_profiles(settings: Settings) -> None:
    names = ProfileStore(settings.profiles.root).names()
    if not names:
        err_console.print(
            f"[dim]No profiles under {settings.profiles.root}[/dim]")
    for name in names:
        typer.echo(name)


async def _run_async(settings: Settings, config: SessionConfig) -> SessionResult:
    """Run the page session against a real browser."""
    orchestrator = Orchestrator(
        settings,
        session_factory=lambda profile: open_session(settings, profile),
    )
    return await orchestrator.run(config)


@app.command(epilog=EPILOG)
def main(
    ctx: typer.Context,
    url: Optional[str] = typer.Argument(
        None,
        help="URL to read; http:// is added when no scheme is given",
        show_default=False,
    ),
    raw: bool = typer.Option(
        False,
        "--raw",
        help="Output raw page markup instead of converting to markdown",
    ),
    truncate_after: Optional[int] = typer.Option(
        None,
        "--truncate-after",
        help="Truncate output after this many characters and append a notice "
             "[default: 100000]",
        min=1,
    ),
    screenshot: Optional[Path] = typer.Option(
        None,
        "--screenshot",
        help="Take a full-page screenshot and save it to this path",
        dir_okay=False,
    ),
    form: Optional[str] = typer.Option(
        None,
        "--form",
        help="The id of the form for --input and --button",
    ),
    after_submit: Optional[str] = typer.Option(
        None,
        "--after-submit",
        help="After form submission, load this URL before extracting content",
    ),
    js: Optional[str] = typer.Option(
        None,
        "--js",
        help="Execute JavaScript code on the page after it loads",
    ),
    profile: Optional[str] = typer.Option(
        None,
        "--profile",
        help="Use or create a named session profile [default: default]",
    ),
    headless: Optional[bool] = typer.Option(
        None,
        "--headless/--no-headless",
        help="Run the browser headless (overrides configuration)",
        show_default=False,
    ),
    list_profiles: bool = typer.Option(
        False,
        "--list-profiles",
        help="List stored session profiles and exit",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file",
        exists=True,
        dir_okay=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable verbose logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only log warnings and errors",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """
    Read a web page through a real browser and print it as markdown.
    """
    ordered = ctx.obj if isinstance(ctx.obj, OrderedOptions) else OrderedOptions()

    try:
        settings = load_config(config_file or get_default_config_path())
    except ConfigurationError as e:
        _fail(str(e), code=2)

    # Override with CLI options
    log_level = "DEBUG" if verbose else "WARNING" if quiet else None
    if headless is not None:
        settings.browser.headless = headless
    setup_logging(settings.logging, level=log_level)

    if list_profiles:
        _list_profiles(settings)
        raise typer.Exit()

    if not url:
        _fail("Missing URL. Run 'web --help' for usage.", code=2)

    try:
        config = SessionConfig(
            url=url,
            profile=profile or settings.profiles.default_profile,
            raw=raw,
            truncate_after=truncate_after or settings.output.truncate_after,
            screenshot_path=screenshot,
            form_id=form,
            inputs=tuple(ordered.inputs),
            button=ordered.button,
            after_submit_url=after_submit,
            script=js,
            wait_for_navigation=ordered.wait_for_navigation,
            navigation_timeout_ms=ordered.navigation_timeout_ms,
        )
    except ConfigurationError as e:
        _fail(str(e), code=2)

    try:
        result = asyncio.run(_run_async(settings, config))
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Cancelled by user[/yellow]")
        raise typer.Exit(130)
    except Exception as e:
        logger.exception("Unexpected error during run")
        _fail(str(e))

    if not result.ok:
        logger.debug(f"Run failed at stage {result.failed_stage}")
        _fail(result.error)

    typer.echo(build_report(result, raw=raw, header=settings.output.header))


def run() -> None:
    """Console script entry point."""
    try:
        args, ordered = split_ordered_options(sys.argv[1:])
    except ConfigurationError as e:
        err_console.print(f"[red]Error:[/red] {e}", highlight=False)
        sys.exit(2)
    app(args=args, obj=ordered, prog_name="web")


if __name__ == "__main__":
    run()
