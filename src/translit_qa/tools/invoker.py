"""
translit-qa Translation Invoker

Drives one round trip against the service: make sure the page shows the
target, type the scenario input, wait for the asynchronous conversion to
settle, and read back the output text.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Optional, Union

from translit_qa.core.config import SettleMode, Settings, settings as default_settings
from translit_qa.core.exceptions import ElementNotFound
from translit_qa.core.state import ScenarioRecord
from translit_qa.tools.page import PageSurface, Role, ensure_current
from translit_qa.tools.resolver import ElementResolver

logger = logging.getLogger(__name__)


@dataclass
class FixedSettle:
    """Wait a flat delay for the conversion to finish."""

    delay_ms: int = 2000

    async def wait(self, page: PageSurface, resolver: ElementResolver) -> None:
        await asyncio.sleep(self.delay_ms / 1000)


@dataclass
class PollUntilStable:
    """
    Read the output at intervals until two consecutive non-empty reads agree.

    At the deadline the wait simply ends and the caller reads whatever is
    shown. If the output surface never resolved, ElementNotFound is raised.
    """

    interval_ms: int = 250
    timeout_ms: int = 5000

    async def wait(self, page: PageSurface, resolver: ElementResolver) -> None:
        deadline = time.monotonic() + self.timeout_ms / 1000
        previous: Optional[str] = None
        last_error: Optional[ElementNotFound] = None
        resolved_once = False

        while True:
            await asyncio.sleep(self.interval_ms / 1000)
            try:
                handle = await resolver.resolve(page, Role.OUTPUT)
                current = (await page.text_content(ensure_current(page, handle))).strip()
                resolved_once = True
            except ElementNotFound as e:
                last_error = e
                current = None

            if current and current == previous:
                return
            previous = current

            if time.monotonic() >= deadline:
                if not resolved_once and last_error is not None:
                    raise last_error
                logger.warning(
                    f"Output did not stabilise within {self.timeout_ms}ms; "
                    "using the last observed state"
                )
                return


SettleStrategy = Union[FixedSettle, PollUntilStable]


def settle_from_settings(config: Settings) -> SettleStrategy:
    """Build the configured settle strategy."""
    if config.settle_mode == SettleMode.FIXED:
        return FixedSettle(delay_ms=config.settle_delay_ms)
    return PollUntilStable(
        interval_ms=config.poll_interval_ms,
        timeout_ms=config.poll_timeout_ms,
    )


class TranslationInvoker:
    """
    Runs a scenario's input through the service and returns the output text.

    Each call is single-shot: nothing is retried.
    """

    def __init__(
        self,
        resolver: Optional[ElementResolver] = None,
        settle: Optional[SettleStrategy] = None,
        config: Optional[Settings] = None,
    ):
        self.config = config or default_settings
        self.resolver = resolver or ElementResolver(
            content_scan_limit=self.config.content_scan_limit,
            script=self.config.target_script,
        )
        self.settle = settle or settle_from_settings(self.config)

    def is_on_target(self, page: PageSurface) -> bool:
        """Check whether the page already shows the target service."""
        return bool(self.config.target_host) and self.config.target_host in page.url

    async def ensure_target(self, page: PageSurface) -> None:
        """Navigate to the target and wait for network quiescence if needed."""
        if self.is_on_target(page):
            return
        logger.info(f"Navigating to {self.config.target_url}")
        await page.goto(self.config.target_url, timeout_ms=self.config.navigation_timeout_ms)
        await page.wait_for_quiescence(timeout_ms=self.config.navigation_timeout_ms)

    async def invoke(self, page: PageSurface, scenario: ScenarioRecord) -> str:
        """
        Execute one round trip for a scenario.

        Args:
            page: Surface showing (or able to navigate to) the service
            scenario: Scenario whose input text is entered

        Returns:
            Trimmed text of the output surface

        Raises:
            ElementNotFound: If the input or output surface cannot be located
            TimeoutExceeded: If navigation or quiescence overruns its timeout
        """
        logger.info(f"Testing: {scenario.title}")
        await self.ensure_target(page)

        input_handle = await self.resolver.resolve(page, Role.INPUT)
        logger.info(f"Found input using strategy: {input_handle.strategy}")
        input_ref = ensure_current(page, input_handle)
        await page.clear(input_ref)
        await page.fill(input_ref, scenario.input_text)
        logger.info(f"Entered input: {scenario.input_text!r}")

        settle = self.settle
        if scenario.settle_ms is not None:
            settle = FixedSettle(delay_ms=scenario.settle_ms)
        await settle.wait(page, self.resolver)

        output_handle = await self.resolver.resolve(page, Role.OUTPUT)
        logger.info(f"Found output using strategy: {output_handle.strategy}")
        actual = (await page.text_content(ensure_current(page, output_handle))).strip()
        logger.info(f"Actual output: {actual!r}")
        return actual
