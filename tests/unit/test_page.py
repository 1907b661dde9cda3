"""
test_page.py - Page surface tests

- Playwright failures are translated into BrowserErrors
- navigation invalidates handles
- form controls are read through their value
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from fakes import FakeSurface
from translit_qa.core.exceptions import (
    BrowserError,
    NavigationError,
    StaleElementHandle,
    TimeoutExceeded,
)
from translit_qa.tools.page import (
    ElementHandle,
    PageSurface,
    PlaywrightSurface,
    Role,
    ensure_current,
)


@pytest.fixture
def mock_page():
    page = MagicMock()
    page.url = "https://translit.example/"
    page.goto = AsyncMock()
    page.wait_for_load_state = AsyncMock()
    page.screenshot = AsyncMock()
    return page


def _locator(tag: str = "DIV", value: str = "", text: str = "") -> MagicMock:
    locator = MagicMock()
    locator.evaluate = AsyncMock(return_value=tag)
    locator.input_value = AsyncMock(return_value=value)
    locator.text_content = AsyncMock(return_value=text)
    return locator


class TestEnsureCurrent:
    def test_current_handle_returns_ref(self):
        surface = FakeSurface()
        handle = ElementHandle(ref="el", role=Role.INPUT, strategy="tag:textarea", epoch=0)

        assert ensure_current(surface, handle) == "el"

    @pytest.mark.asyncio
    async def test_handle_goes_stale_after_navigation(self):
        surface = FakeSurface()
        handle = ElementHandle(ref="el", role=Role.OUTPUT, strategy="tag:readonly-textarea", epoch=0)

        await surface.goto("https://translit.example/", timeout_ms=1000)

        with pytest.raises(StaleElementHandle) as exc_info:
            ensure_current(surface, handle)
        assert exc_info.value.details == {"handle_epoch": 0, "page_epoch": 1}

    def test_fake_follows_protocol(self):
        assert isinstance(FakeSurface(), PageSurface)


class TestPlaywrightSurface:
    def test_follows_protocol(self, mock_page):
        assert isinstance(PlaywrightSurface(mock_page), PageSurface)

    @pytest.mark.asyncio
    async def test_goto_increments_epoch(self, mock_page):
        surface = PlaywrightSurface(mock_page)

        await surface.goto("https://translit.example/", timeout_ms=30000)

        assert surface.epoch == 1
        mock_page.goto.assert_awaited_once_with("https://translit.example/", timeout=30000)

    @pytest.mark.asyncio
    async def test_goto_timeout(self, mock_page):
        mock_page.goto.side_effect = PlaywrightTimeoutError("Timeout 30000ms exceeded")
        surface = PlaywrightSurface(mock_page)

        with pytest.raises(TimeoutExceeded):
            await surface.goto("https://translit.example/", timeout_ms=30000)

        # A failed navigation still invalidates earlier handles
        assert surface.epoch == 1

    @pytest.mark.asyncio
    async def test_goto_failure(self, mock_page):
        mock_page.goto.side_effect = PlaywrightError("net::ERR_NAME_NOT_RESOLVED")
        surface = PlaywrightSurface(mock_page)

        with pytest.raises(NavigationError) as exc_info:
            await surface.goto("https://translit.example/", timeout_ms=30000)

        assert "ERR_NAME_NOT_RESOLVED" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_quiescence_timeout(self, mock_page):
        mock_page.wait_for_load_state.side_effect = PlaywrightTimeoutError("Timeout")
        surface = PlaywrightSurface(mock_page)

        with pytest.raises(TimeoutExceeded):
            await surface.wait_for_quiescence(timeout_ms=100)

        mock_page.wait_for_load_state.assert_awaited_once_with("networkidle", timeout=100)

    @pytest.mark.asyncio
    async def test_query_respects_limit(self, mock_page):
        locator = MagicMock()
        locator.count = AsyncMock(return_value=120)
        locator.nth.side_effect = lambda i: f"nth-{i}"
        mock_page.locator.return_value = locator
        surface = PlaywrightSurface(mock_page)

        found = await surface.query("body *", limit=50)

        assert len(found) == 50
        assert found[0] == "nth-0"
        mock_page.locator.assert_called_once_with("body *")

    @pytest.mark.asyncio
    async def test_query_without_matches(self, mock_page):
        locator = MagicMock()
        locator.count = AsyncMock(return_value=0)
        mock_page.locator.return_value = locator

        assert await PlaywrightSurface(mock_page).query("textarea[readonly]") == []

    @pytest.mark.asyncio
    async def test_textarea_read_through_value(self, mock_page):
        locator = _locator(tag="TEXTAREA", value="මම ගෙදර යනවා", text="")

        text = await PlaywrightSurface(mock_page).text_content(locator)

        assert text == "මම ගෙදර යනවා"
        locator.text_content.assert_not_called()

    @pytest.mark.asyncio
    async def test_div_read_through_text(self, mock_page):
        locator = _locator(tag="DIV", text=None)

        assert await PlaywrightSurface(mock_page).text_content(locator) == ""

    @pytest.mark.asyncio
    async def test_detached_element_is_browser_error(self, mock_page):
        locator = MagicMock()
        locator.fill = AsyncMock(side_effect=PlaywrightError("Element is not attached to the DOM"))

        with pytest.raises(BrowserError):
            await PlaywrightSurface(mock_page).fill(locator, "mama")

    @pytest.mark.asyncio
    async def test_screenshot_creates_directory(self, mock_page, tmp_path):
        path = tmp_path / "shots" / "Pos_Fun_0001-mismatch.png"

        saved = await PlaywrightSurface(mock_page).screenshot(str(path))

        assert saved == str(path)
        assert path.parent.is_dir()
        mock_page.screenshot.assert_awaited_once_with(path=str(path), full_page=True)
