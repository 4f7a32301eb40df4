"""
Injected script execution with navigation handling.
"""

from web_reader.browser.page_context import PageContext
from web_reader.config.settings import WaitSettings
from web_reader.core.exceptions import BrowserError
from web_reader.core.outcome import StageOutcome
from web_reader.utils.logging import get_logger
from web_reader.utils.waiting import wait_until

logger = get_logger(__name__)


class ScriptCoordinator:
    """
    Runs caller-supplied JavaScript and optionally waits out the
    navigation it triggers.

    Script errors and navigation timeouts are warnings only.
    """

    STAGE = "run-script"

    def __init__(self, waits: WaitSettings) -> None:
        self.waits = waits

    async def run(
        self,
        page: PageContext,
        script: str,
        wait_for_navigation: bool = False,
        navigation_timeout_ms: int | None = None,
    ) -> StageOutcome:
        """
        Evaluate the script in the page.

        Args:
            page: Page to run the script in
            script: JavaScript source
            wait_for_navigation: Wait for the URL to change afterwards
            navigation_timeout_ms: Bound on that wait (configured default if None)

        Returns:
            Stage outcome, never fatal
        """
        outcome = StageOutcome.ok(self.STAGE)
        url_before = page.current_url

        try:
            await page.evaluate(script)
        except BrowserError as e:
            # A script that navigates destroys its own execution context
            if wait_for_navigation and page.current_url != url_before:
                logger.debug(f"Script evaluation interrupted by navigation: {e}")
            else:
                message = f"JavaScript execution failed: {e.message}"
                logger.warning(message)
                outcome.warn(message)

        if wait_for_navigation:
            await self._wait_for_navigation(
                page,
                url_before,
                navigation_timeout_ms
                if navigation_timeout_ms is not None
                else self.waits.script_navigation_timeout_ms,
                outcome,
            )

        return outcome

    async def _wait_for_navigation(
        self,
        page: PageContext,
        url_before: str,
        timeout_ms: int,
        outcome: StageOutcome,
    ) -> None:
        interval_ms = self.waits.poll_interval_ms

        async def navigated() -> bool:
            return page.current_url != url_before

        async def loaded() -> bool:
            return await page.ready_state() == "complete"

        logger.info(f"Waiting up to {timeout_ms}ms for navigation...")
        if await wait_until(navigated, timeout_ms, interval_ms, "navigation after script"):
            logger.info(f"Navigated to {page.current_url}")
        else:
            message = f"No navigation detected within {timeout_ms}ms"
            logger.warning(message)
            outcome.warn(message)

        ready_timeout_ms = self.waits.ready_state_timeout_ms
        if not await wait_until(loaded, ready_timeout_ms, interval_ms, "document ready"):
            message = f"Page did not finish loading within {ready_timeout_ms}ms"
            logger.warning(message)
            outcome.warn(message)
