"""
translit-qa Browser Tool

Playwright browser lifecycle: one browser per run, one isolated context and
page surface per scenario.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from playwright.async_api import Browser, async_playwright

from translit_qa import __version__
from translit_qa.core.config import Settings, settings as default_settings
from translit_qa.tools.page import PlaywrightSurface, browser_errors
from translit_qa.tools.resolver import ElementResolver


class BrowserTool:
    """
    Browser automation tool using Playwright.

    Provides:
    - Browser and page lifecycle management
    - Isolated page surfaces for scenario execution
    - Debug snapshots of the target service
    """

    def __init__(self, headless: Optional[bool] = None, config: Optional[Settings] = None):
        self.config = config or default_settings
        self.headless = self.config.headless if headless is None else headless

    @asynccontextmanager
    async def get_browser(self) -> AsyncIterator[Browser]:
        """Context manager for browser instance."""
        async with async_playwright() as p:
            with browser_errors("Launching browser", headless=self.headless):
                browser = await p.chromium.launch(headless=self.headless)
            try:
                yield browser
            finally:
                await browser.close()

    @asynccontextmanager
    async def get_page(self, browser: Browser) -> AsyncIterator[PlaywrightSurface]:
        """Context manager for an isolated page surface."""
        with browser_errors("Opening page"):
            context = await browser.new_context(
                viewport={
                    "width": self.config.viewport_width,
                    "height": self.config.viewport_height,
                },
                user_agent=f"translit-qa/{__version__} (Functional Validator)",
            )
        try:
            with browser_errors("Opening page"):
                page = await context.new_page()
            yield PlaywrightSurface(page)
        finally:
            with browser_errors("Closing page"):
                await context.close()

    async def take_snapshot(
        self,
        path: str,
        resolver: Optional[ElementResolver] = None,
    ) -> dict[str, Any]:
        """
        Navigate to the target service and save a full-page screenshot.

        Args:
            path: Where to save the screenshot
            resolver: When given, also report which strategy finds each role

        Returns:
            Dict with the screenshot path, page title and resolved strategies
        """
        async with self.get_browser() as browser:
            async with self.get_page(browser) as surface:
                await surface.goto(
                    self.config.target_url,
                    timeout_ms=self.config.navigation_timeout_ms,
                )
                await surface.wait_for_quiescence(timeout_ms=self.config.navigation_timeout_ms)

                snapshot = {
                    "url": surface.url,
                    "title": await surface.page.title(),
                    "path": await surface.screenshot(path),
                    "strategies": {},
                }
                if resolver is not None:
                    snapshot["strategies"] = await resolver.probe(surface)
                return snapshot
