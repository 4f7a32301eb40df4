"""
Phoenix LiveView detection.

A LiveView page carries a session attribute on its root element and
gains a "connected" class once its socket is up. Forms on such pages
must be driven differently, so the detection result is handed on to
the form submitter.
"""

from web_reader.browser.page_context import PageContext
from web_reader.config.settings import FrameworkSettings, WaitSettings
from web_reader.core.exceptions import BrowserError
from web_reader.core.outcome import StageOutcome
from web_reader.interaction.selectors import attribute_selector, class_selector
from web_reader.utils.logging import get_logger
from web_reader.utils.waiting import wait_until

logger = get_logger(__name__)


class FrameworkDetector:
    """
    Detects LiveView pages and waits for their connection.

    The outcome's value is the framework-active flag. A missing
    connection is a warning; detection never stops a run.
    """

    STAGE = "detect-framework"

    def __init__(self, framework: FrameworkSettings, waits: WaitSettings) -> None:
        self.framework = framework
        self.waits = waits

    async def detect(self, page: PageContext) -> StageOutcome:
        """
        Inspect the loaded page.

        Args:
            page: Page that has finished its initial navigation

        Returns:
            Outcome whose value is True when the page is a LiveView page
        """
        marker = attribute_selector(self.framework.marker_attribute)

        try:
            active = await page.has_element(marker)
        except BrowserError as e:
            message = f"Could not check for LiveView markers: {e}"
            logger.warning(message)
            return StageOutcome.warning(self.STAGE, message, value=False)

        if not active:
            return StageOutcome.ok(self.STAGE, value=False)

        logger.info("Detected Phoenix LiveView page, waiting for connection...")
        connected_selector = class_selector(self.framework.connected_class)

        async def connected() -> bool:
            return await page.has_element(connected_selector)

        timeout_ms = self.waits.connect_timeout_ms
        if await wait_until(
            connected,
            timeout_ms,
            self.waits.poll_interval_ms,
            description="LiveView connection",
        ):
            logger.info("Phoenix LiveView connected")
            return StageOutcome.ok(self.STAGE, value=True)

        message = f"Could not detect LiveView connection within {timeout_ms}ms"
        logger.warning(message)
        return StageOutcome.warning(self.STAGE, message, value=True)
