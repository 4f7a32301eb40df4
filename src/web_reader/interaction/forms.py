"""
Form filling and submission.

Fills named fields inside a form container, then submits it in the way
that suits the page: a named button if one was requested, the Enter key
on LiveView forms, otherwise the form's own submit control. Afterwards
it waits for the page to settle.
"""

import asyncio
from typing import Sequence

from web_reader.browser.page_context import PageContext
from web_reader.config.settings import FrameworkSettings, WaitSettings
from web_reader.core.exceptions import BrowserError, ElementError
from web_reader.core.outcome import StageOutcome
from web_reader.interaction.selectors import (
    button_selector,
    class_selector,
    field_selector,
    form_selector,
    submit_selector,
)
from web_reader.session.models import ButtonChoice, FieldFill
from web_reader.utils.logging import get_logger
from web_reader.utils.waiting import wait_until

logger = get_logger(__name__)

ACTIVATION_KEY = "Enter"


class FormSubmitter:
    """
    Fills and submits one form.

    Failing to fill a field or to click a requested button is fatal.
    Loading and navigation waits that time out are warnings.

    Example:
        >>> submitter = FormSubmitter(settings.framework, settings.waits)
        >>> outcome = await submitter.submit(
        ...     page, "login", [FieldFill("user", "a")], None, framework_active=False)
    """

    STAGE = "submit-form"

    def __init__(self, framework: FrameworkSettings, waits: WaitSettings) -> None:
        self.framework = framework
        self.waits = waits

    async def submit(
        self,
        page: PageContext,
        form_id: str,
        inputs: Sequence[FieldFill],
        button: ButtonChoice | None,
        framework_active: bool,
    ) -> StageOutcome:
        """
        Fill the fields in order, submit, and wait for the result.

        Args:
            page: Page holding the form
            form_id: id attribute of the form container
            inputs: Fields to fill, in caller order
            button: Button to click instead of the default submission
            framework_active: Whether the page was detected as LiveView

        Returns:
            Stage outcome (fatal if a field or the button was not usable)
        """
        outcome = StageOutcome.ok(self.STAGE)

        for field in inputs:
            try:
                await page.fill(
                    field_selector(form_id, field.name),
                    field.value,
                    timeout_ms=self.waits.field_timeout_ms,
                )
            except ElementError as e:
                return StageOutcome.fatal(
                    self.STAGE, f"Could not fill input {field.name!r}: {e.message}")
            logger.debug(f"Filled input {field.name!r}")

        url_before = page.current_url

        if button is not None:
            try:
                await page.click(
                    button_selector(form_id, button),
                    timeout_ms=self.waits.click_timeout_ms,
                )
            except ElementError as e:
                return StageOutcome.fatal(
                    self.STAGE, f"Could not click button {button.name!r}: {e.message}")
            logger.info(f"Clicked button {button.name!r}")
        elif framework_active:
            try:
                await page.press(
                    form_selector(form_id),
                    ACTIVATION_KEY,
                    timeout_ms=self.waits.field_timeout_ms,
                )
            except ElementError as e:
                return StageOutcome.fatal(
                    self.STAGE, f"Could not submit LiveView form: {e.message}")
        else:
            fatal = await self._submit_plain(page, form_id)
            if fatal is not None:
                return fatal

        if framework_active:
            await self._wait_for_loading(page, outcome)
            logger.info("LiveView form submitted and loading completed")
        elif button is not None:
            await self._wait_for_navigation(page, url_before, outcome)
            logger.info("Form submitted")
        else:
            logger.info("Form submitted")

        return outcome

    async def _submit_plain(self, page: PageContext, form_id: str) -> StageOutcome | None:
        """Click the form's submit control, or press Enter on the form."""
        selector = submit_selector(form_id)

        try:
            if await page.has_element(selector):
                await page.click(selector, timeout_ms=self.waits.click_timeout_ms)
                return None
        except BrowserError as e:
            logger.debug(f"Submit button click failed, falling back to {ACTIVATION_KEY}: {e}")

        try:
            await page.press(
                form_selector(form_id),
                ACTIVATION_KEY,
                timeout_ms=self.waits.field_timeout_ms,
            )
        except ElementError as e:
            return StageOutcome.fatal(self.STAGE, f"Could not submit form: {e.message}")
        return None

    async def _wait_for_loading(self, page: PageContext, outcome: StageOutcome) -> None:
        """Wait for the LiveView loading classes to disappear, one after the other."""
        markers = [
            (self.framework.submit_loading_class, self.waits.submit_loading_timeout_ms),
            (self.framework.change_loading_class, self.waits.change_loading_timeout_ms),
        ]

        for class_name, timeout_ms in markers:
            selector = class_selector(class_name)

            async def cleared(selector: str = selector) -> bool:
                return not await page.has_element(selector)

            if not await wait_until(
                cleared,
                timeout_ms,
                self.waits.poll_interval_ms,
                description=f"{class_name} to clear",
            ):
                message = f"Could not wait for {class_name} to clear within {timeout_ms}ms"
                logger.warning(message)
                outcome.warn(message)

    async def _wait_for_navigation(
        self,
        page: PageContext,
        url_before: str,
        outcome: StageOutcome,
    ) -> None:
        """Give the click a grace period, then wait for the URL to change."""
        await asyncio.sleep(self.waits.submit_grace_ms / 1000)

        async def navigated() -> bool:
            return page.current_url != url_before

        timeout_ms = self.waits.submit_navigation_timeout_ms
        if await wait_until(
            navigated,
            timeout_ms,
            self.waits.poll_interval_ms,
            description="navigation after submit",
        ):
            logger.info(f"Navigated to {page.current_url}")
            return

        message = f"No navigation detected within {timeout_ms}ms after submitting"
        logger.warning(message)
        outcome.warn(message)
