"""
translit-qa Scenario Runner

Main entry point for validating a corpus against the live service. Each
scenario runs on its own page surface; fatal browser errors abort only the
affected scenario and leave a full-page screenshot behind.
"""

import asyncio
import logging
import time
from contextlib import AbstractAsyncContextManager
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from translit_qa.core.config import Settings, settings as default_settings
from translit_qa.core.corpus import Corpus
from translit_qa.core.error_handler import handle_scenario_error
from translit_qa.core.exceptions import ElementNotFound, TranslitQAError, is_fatal
from translit_qa.core.policies import policy_for
from translit_qa.core.state import (
    RunReport,
    ScenarioOutcome,
    ScenarioRecord,
    ScenarioStatus,
)
from translit_qa.tools.invoker import TranslationInvoker
from translit_qa.tools.page import PageSurface

logger = logging.getLogger(__name__)

SurfaceFactory = Callable[[], AbstractAsyncContextManager[PageSurface]]


class ScenarioRunner:
    """
    Runs scenarios through the invoker and applies their acceptance policy.

    Scenarios are executed in corpus order. With more than one worker they
    run concurrently, each on its own surface, and are still reported in
    corpus order.
    """

    def __init__(
        self,
        open_surface: SurfaceFactory,
        invoker: Optional[TranslationInvoker] = None,
        config: Optional[Settings] = None,
    ):
        """
        Initialize the runner.

        Args:
            open_surface: Callable returning an async context manager that
                yields a fresh page surface for one scenario
            invoker: Invoker to use; built from config when omitted
            config: Settings; the global settings when omitted
        """
        self.config = config or default_settings
        self.open_surface = open_surface
        self.invoker = invoker or TranslationInvoker(config=self.config)
        self.screenshot_dir = Path(self.config.screenshot_dir)

    async def run(self, corpus: Corpus, max_workers: Optional[int] = None) -> RunReport:
        """
        Run every scenario of the corpus.

        Args:
            corpus: Scenarios to execute
            max_workers: Concurrent scenarios; defaults to settings.max_workers

        Returns:
            RunReport with one outcome per scenario, in corpus order
        """
        workers = max_workers or self.config.max_workers
        report = RunReport(target_url=self.config.target_url)
        logger.info(f"Running {len(corpus)} scenarios against {self.config.target_url}")

        if workers <= 1:
            for scenario in corpus:
                report.outcomes.append(await self.run_scenario(scenario))
        else:
            semaphore = asyncio.Semaphore(workers)

            async def bounded(scenario: ScenarioRecord) -> ScenarioOutcome:
                async with semaphore:
                    return await self.run_scenario(scenario)

            report.outcomes.extend(
                await asyncio.gather(*(bounded(s) for s in corpus))
            )

        report.finished_at = datetime.now()
        logger.info(
            f"Run finished: {report.passed} passed, {report.failed} failed, "
            f"{report.errored} errored of {report.total}"
        )
        return report

    async def run_scenario(self, scenario: ScenarioRecord) -> ScenarioOutcome:
        """
        Execute one scenario on a fresh surface.

        Fatal browser errors, including failures to open or close the
        surface, become an ERROR outcome; any other exception propagates.
        """
        started = time.monotonic()
        try:
            async with self.open_surface() as page:
                return await self._execute(page, scenario, started)
        except Exception as e:
            if not is_fatal(e):
                raise
            # No page to screenshot: the surface itself failed
            return self._error_outcome(scenario, e, None, started)

    async def _execute(
        self,
        page: PageSurface,
        scenario: ScenarioRecord,
        started: float,
    ) -> ScenarioOutcome:
        try:
            actual = await self.invoker.invoke(page, scenario)
        except Exception as e:
            if not is_fatal(e):
                raise
            suffix = "error"
            if isinstance(e, ElementNotFound) and e.role == "output":
                suffix = "no-output"
            diagnostics = await self.capture_diagnostics(page, scenario, suffix)
            return self._error_outcome(scenario, e, diagnostics, started)

        policy = policy_for(
            scenario,
            script=self.config.target_script,
            strict_exploratory=self.config.strict_exploratory,
        )
        decision = policy.evaluate(scenario, actual)

        diagnostics = None
        if decision.passed:
            logger.info(f"{scenario.id} PASSED ({decision.mode.value})")
        else:
            logger.warning(f"{scenario.id} FAILED: {'; '.join(decision.warnings)}")
            diagnostics = await self.capture_diagnostics(page, scenario, "mismatch")

        return ScenarioOutcome(
            scenario_id=scenario.id,
            passed=decision.passed,
            status=ScenarioStatus.PASSED if decision.passed else ScenarioStatus.FAILED,
            actual_output=actual,
            diagnostics=diagnostics,
            decision=decision,
            duration_ms=_elapsed_ms(started),
        )

    def _error_outcome(
        self,
        scenario: ScenarioRecord,
        error: Exception,
        diagnostics: Optional[str],
        started: float,
    ) -> ScenarioOutcome:
        record = handle_scenario_error(error, scenario.id)
        return ScenarioOutcome(
            scenario_id=scenario.id,
            passed=False,
            status=ScenarioStatus.ERROR,
            diagnostics=diagnostics,
            error=record.to_dict(),
            duration_ms=_elapsed_ms(started),
        )

    async def capture_diagnostics(
        self,
        page: PageSurface,
        scenario: ScenarioRecord,
        suffix: str,
    ) -> Optional[str]:
        """Save a full-page screenshot for a failed scenario, if the page allows it."""
        path = str(self.screenshot_dir / f"{scenario.id}-{suffix}.png")
        try:
            saved = await page.screenshot(path)
        except TranslitQAError as e:
            logger.error(f"Could not capture screenshot for {scenario.id}: {e}")
            return None
        logger.info(f"Screenshot saved to {saved}")
        return saved


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


async def run_corpus(
    corpus: Corpus,
    config: Optional[Settings] = None,
    headless: Optional[bool] = None,
    max_workers: Optional[int] = None,
) -> RunReport:
    """
    Convenience function to run a corpus in a real browser.

    Args:
        corpus: Scenarios to execute
        config: Settings; the global settings when omitted
        headless: Override the configured headless flag
        max_workers: Override the configured worker count

    Returns:
        RunReport of the run
    """
    from translit_qa.tools.browser import BrowserTool

    config = config or default_settings
    tool = BrowserTool(headless=headless, config=config)
    async with tool.get_browser() as browser:
        runner = ScenarioRunner(
            open_surface=lambda: tool.get_page(browser),
            config=config,
        )
        return await runner.run(corpus, max_workers=max_workers)
