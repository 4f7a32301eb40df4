"""
Run orchestration for web-reader.

Sequences one run against one SessionConfig:

    navigate → detect-framework → [submit-form] → [run-script]
    → [screenshot] → [follow-up-navigate] → extract-content
    → [render] → [truncate]

Each stage reports a StageOutcome. Warnings are collected and the run
continues; the first fatal outcome ends it. The browser session is
always torn down, whatever happened.
"""

from contextlib import AbstractAsyncContextManager
from typing import Awaitable, Callable

from web_reader.browser.page_context import PageContext
from web_reader.config.settings import Settings
from web_reader.core.exceptions import (
    ExtractionError,
    NavigationError,
    PageLoadError,
    ScreenshotError,
    WebReaderError,
)
from web_reader.core.outcome import StageOutcome
from web_reader.extraction.renderer import ContentRenderer
from web_reader.interaction.forms import FormSubmitter
from web_reader.interaction.framework import FrameworkDetector
from web_reader.interaction.scripting import ScriptCoordinator
from web_reader.session.models import (
    ConsoleLog,
    ConsoleRecord,
    SessionConfig,
    SessionResult,
)
from web_reader.session.report import truncate_content
from web_reader.utils.logging import get_logger

logger = get_logger(__name__)

# Opens a browser session on a profile and yields its page
SessionFactory = Callable[[str], AbstractAsyncContextManager[PageContext]]

Stage = Callable[[PageContext, SessionConfig, SessionResult],
                 Awaitable[StageOutcome | None]]


class Orchestrator:
    """
    Drives one page through the stages of a run.

    All collaborators are passed in; the session factory decides which
    browser (or test double) backs the page.

    Example:
        >>> orchestrator = Orchestrator(
        ...     settings, lambda profile: open_session(settings, profile))
        >>> result = await orchestrator.run(SessionConfig(url="example.com"))
        >>> print(result.content)
    """

    def __init__(
        self,
        settings: Settings,
        session_factory: SessionFactory,
        renderer: ContentRenderer | None = None,
        detector: FrameworkDetector | None = None,
        submitter: FormSubmitter | None = None,
        scripts: ScriptCoordinator | None = None,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            settings: Application settings
            session_factory: Callable returning an async context manager
                that yields a page for a profile name
            renderer: Markup-to-markdown renderer
            detector: LiveView detector
            submitter: Form submitter
            scripts: Script and navigation coordinator
        """
        self.settings = settings
        self._session_factory = session_factory
        self.renderer = renderer or ContentRenderer()
        self.detector = detector or FrameworkDetector(
            settings.framework, settings.waits)
        self.submitter = submitter or FormSubmitter(
            settings.framework, settings.waits)
        self.scripts = scripts or ScriptCoordinator(settings.waits)

        self._stages: list[Stage] = [
            self._navigate,
            self._detect_framework,
            self._submit_form,
            self._run_script,
            self._screenshot,
            self._follow_up_navigate,
            self._extract_content,
        ]

    async def run(self, config: SessionConfig) -> SessionResult:
        """
        Execute a run.

        Never raises for run failures: a fatal problem is reported
        through SessionResult.error and SessionResult.failed_stage.

        Args:
            config: Immutable run configuration

        Returns:
            The session result
        """
        result = SessionResult(url=config.url)
        console = ConsoleLog()

        try:
            async with self._session_factory(config.profile) as page:
                page.on_console(
                    lambda level, text: console.append(ConsoleRecord(level, text)))

                for stage in self._stages:
                    outcome = await stage(page, config, result)
                    if outcome is not None and not self._record(result, outcome):
                        break

        except WebReaderError as e:
            if result.error is None:
                result.error = str(e)
                result.failed_stage = "open-session"
                logger.debug(f"Session failed: {e}")

        result.console = console.snapshot()
        return result

    def _record(self, result: SessionResult, outcome: StageOutcome) -> bool:
        """Fold an outcome into the result. Returns False to stop the run."""
        result.warnings.extend(outcome.warnings)
        if outcome.is_fatal:
            result.error = outcome.error
            result.failed_stage = outcome.stage
            logger.debug(f"Stage {outcome.stage} failed: {outcome.error}")
            return False
        return True

    async def _navigate(
        self, page: PageContext, config: SessionConfig, result: SessionResult
    ) -> StageOutcome:
        try:
            await page.navigate(config.url)
        except NavigationError as e:
            return StageOutcome.fatal(
                "navigate", f"Could not navigate to {config.url}: {e.message}")
        return StageOutcome.ok("navigate")

    async def _detect_framework(
        self, page: PageContext, config: SessionConfig, result: SessionResult
    ) -> StageOutcome:
        outcome = await self.detector.detect(page)
        result.framework_active = bool(outcome.value)
        return outcome

    async def _submit_form(
        self, page: PageContext, config: SessionConfig, result: SessionResult
    ) -> StageOutcome | None:
        if config.has_orphan_form_options:
            message = "Form inputs and buttons are ignored without --form"
            logger.warning(message)
            return StageOutcome.warning(FormSubmitter.STAGE, message)

        if not config.wants_form_submission:
            return None

        return await self.submitter.submit(
            page,
            config.form_id,
            config.inputs,
            config.button,
            framework_active=result.framework_active,
        )

    async def _run_script(
        self, page: PageContext, config: SessionConfig, result: SessionResult
    ) -> StageOutcome | None:
        if not config.script:
            if config.wait_for_navigation:
                message = "--wait-for-navigation has no effect without --js"
                logger.warning(message)
                return StageOutcome.warning(ScriptCoordinator.STAGE, message)
            return None

        return await self.scripts.run(
            page,
            config.script,
            wait_for_navigation=config.wait_for_navigation,
            navigation_timeout_ms=config.navigation_timeout_ms,
        )

    async def _screenshot(
        self, page: PageContext, config: SessionConfig, result: SessionResult
    ) -> StageOutcome | None:
        if config.screenshot_path is None:
            return None

        try:
            result.screenshot_path = await page.screenshot(
                config.screenshot_path, full_page=True)
        except ScreenshotError as e:
            return StageOutcome.fatal("screenshot", f"Error taking screenshot: {e.message}")

        logger.info(f"Screenshot saved to {config.screenshot_path}")
        return StageOutcome.ok("screenshot")

    async def _follow_up_navigate(
        self, page: PageContext, config: SessionConfig, result: SessionResult
    ) -> StageOutcome | None:
        if not config.after_submit_url:
            return None

        logger.info(f"Navigating to after-submit URL: {config.after_submit_url}")
        try:
            await page.navigate(config.after_submit_url)
        except NavigationError as e:
            return StageOutcome.fatal(
                "follow-up-navigate",
                f"Could not navigate to after-submit URL {config.after_submit_url}: {e.message}",
            )
        return StageOutcome.ok("follow-up-navigate")

    async def _extract_content(
        self, page: PageContext, config: SessionConfig, result: SessionResult
    ) -> StageOutcome:
        try:
            html = await page.content()
        except PageLoadError as e:
            return StageOutcome.fatal("extract-content", e.message)

        result.final_url = page.current_url

        if config.raw:
            text = html
        else:
            try:
                text = self.renderer.render(html)
            except ExtractionError as e:
                return StageOutcome.fatal("render", e.message)

        result.original_length = len(text)
        result.content, result.truncated = truncate_content(
            text, config.truncate_after)
        return StageOutcome.ok("extract-content")
