"""
translit-qa Page Surface

The narrow capability interface the resolver and invoker talk to, plus the
Playwright implementation used against the live service. Unit tests
substitute an in-memory surface that follows the same protocol.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Iterator, Optional, Protocol, runtime_checkable

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from translit_qa.core.exceptions import (
    BrowserError,
    NavigationError,
    StaleElementHandle,
    TimeoutExceeded,
)

ElementRef = Any


class Role(str, Enum):
    """Role a located surface plays in a round trip."""

    INPUT = "input"
    OUTPUT = "output"


@dataclass(frozen=True)
class ElementHandle:
    """A located surface, valid only for the page state it was resolved in."""

    ref: ElementRef
    role: Role
    strategy: str
    epoch: int


@runtime_checkable
class PageSurface(Protocol):
    """Capabilities the interaction layer needs from a page."""

    @property
    def url(self) -> str: ...

    @property
    def epoch(self) -> int: ...

    async def goto(self, url: str, timeout_ms: int) -> None: ...

    async def wait_for_quiescence(self, timeout_ms: int) -> None: ...

    async def query(self, selector: str, limit: Optional[int] = None) -> list[ElementRef]: ...

    async def is_visible(self, ref: ElementRef) -> bool: ...

    async def text_content(self, ref: ElementRef) -> str: ...

    async def clear(self, ref: ElementRef) -> None: ...

    async def fill(self, ref: ElementRef, text: str) -> None: ...

    async def screenshot(self, path: str) -> str: ...


def ensure_current(surface: PageSurface, handle: ElementHandle) -> ElementRef:
    """
    Return the handle's element reference if the page has not navigated since.

    Raises:
        StaleElementHandle: If the handle was resolved against an older page state
    """
    if handle.epoch != surface.epoch:
        raise StaleElementHandle(
            f"{handle.role.value} handle is stale; the page navigated since it was resolved",
            tool_name="page",
            details={"handle_epoch": handle.epoch, "page_epoch": surface.epoch},
        )
    return handle.ref


@contextmanager
def browser_errors(action: str, **details: Any) -> Iterator[None]:
    """Translate Playwright failures into scenario-fatal BrowserErrors."""
    try:
        yield
    except PlaywrightTimeoutError as e:
        raise TimeoutExceeded(
            f"{action} timed out",
            tool_name="browser",
            details=details,
        ) from e
    except PlaywrightError as e:
        raise BrowserError(
            f"{action} failed: {e.message}",
            tool_name="browser",
            details=details,
        ) from e


class PlaywrightSurface:
    """PageSurface backed by a Playwright page."""

    def __init__(self, page: Page, action_timeout_ms: int = 10000):
        self.page = page
        self.action_timeout_ms = action_timeout_ms
        self._epoch = 0

    @property
    def url(self) -> str:
        return self.page.url

    @property
    def epoch(self) -> int:
        return self._epoch

    async def goto(self, url: str, timeout_ms: int) -> None:
        # Any navigation invalidates previously resolved handles
        self._epoch += 1
        try:
            await self.page.goto(url, timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise TimeoutExceeded(
                f"Navigation to {url} timed out",
                tool_name="browser",
                details={"url": url, "timeout_ms": timeout_ms},
            ) from e
        except PlaywrightError as e:
            raise NavigationError(
                f"Failed to navigate to {url}: {e.message}",
                tool_name="browser",
                details={"url": url},
            ) from e

    async def wait_for_quiescence(self, timeout_ms: int) -> None:
        with browser_errors("Waiting for network idle", url=self.page.url, timeout_ms=timeout_ms):
            await self.page.wait_for_load_state("networkidle", timeout=timeout_ms)

    async def query(self, selector: str, limit: Optional[int] = None) -> list[Locator]:
        locator = self.page.locator(selector)
        with browser_errors("Query", selector=selector):
            count = await locator.count()
        if limit is not None:
            count = min(count, limit)
        return [locator.nth(i) for i in range(count)]

    async def is_visible(self, ref: Locator) -> bool:
        with browser_errors("Visibility check"):
            return await ref.is_visible()

    async def text_content(self, ref: Locator) -> str:
        with browser_errors("Reading text"):
            # Form controls keep script-set text in their value, not in the DOM text
            tag = await ref.evaluate("el => el.tagName", timeout=self.action_timeout_ms)
            if tag in ("TEXTAREA", "INPUT"):
                return await ref.input_value(timeout=self.action_timeout_ms)
            return await ref.text_content(timeout=self.action_timeout_ms) or ""

    async def clear(self, ref: Locator) -> None:
        with browser_errors("Clearing input"):
            await ref.clear(timeout=self.action_timeout_ms)

    async def fill(self, ref: Locator, text: str) -> None:
        with browser_errors("Filling input", length=len(text)):
            await ref.fill(text, timeout=self.action_timeout_ms)

    async def screenshot(self, path: str) -> str:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with browser_errors("Screenshot", path=path):
            await self.page.screenshot(path=path, full_page=True)
        return path
