"""
translit-qa Element Resolver

Locates the input and output surfaces of a page whose markup we do not
control. Each role has an ordered chain of locator strategies; the first
strategy whose first match is visible wins. When the output chain is
exhausted, a bounded content scan looks for an element already showing
target-script text. Input has no such fallback.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from translit_qa.core.exceptions import ElementNotFound
from translit_qa.core.matching import SINHALA, ScriptRange, contains_script
from translit_qa.tools.page import ElementHandle, PageSurface, Role

logger = logging.getLogger(__name__)

CONTENT_SCAN_SELECTOR = "body *"
CONTENT_SCAN_LABEL = "content-scan"


@dataclass(frozen=True)
class LocatorStrategy:
    """One step of a strategy chain: a selector and a readable label."""

    selector: str
    label: str = ""

    @property
    def name(self) -> str:
        return self.label or self.selector


INPUT_STRATEGIES: tuple[LocatorStrategy, ...] = (
    LocatorStrategy("textarea", "tag:textarea"),
    LocatorStrategy('input[type="text"]', "tag:text-input"),
    LocatorStrategy("input", "tag:input"),
    LocatorStrategy('[contenteditable="true"]', "editable"),
    LocatorStrategy(".input-field", "class:input-field"),
    LocatorStrategy("#input-text", "id:input-text"),
    LocatorStrategy('[id*="singlish"]', "id~singlish"),
    LocatorStrategy('[class*="input"]', "class~input"),
)

OUTPUT_STRATEGIES: tuple[LocatorStrategy, ...] = (
    LocatorStrategy("textarea[readonly]", "tag:readonly-textarea"),
    LocatorStrategy('div[contenteditable="false"]', "non-editable-div"),
    LocatorStrategy(".output-field", "class:output-field"),
    LocatorStrategy("#output-text", "id:output-text"),
    LocatorStrategy('[id*="sinhala"]', "id~sinhala"),
    LocatorStrategy('[class*="output"]', "class~output"),
    LocatorStrategy(".result", "class:result"),
    LocatorStrategy(".translation-result", "class:translation-result"),
)


class ElementResolver:
    """
    Resolves a role to a visible element on the current page.

    Strategy chains are plain data and can be replaced per instance.
    """

    def __init__(
        self,
        input_strategies: tuple[LocatorStrategy, ...] = INPUT_STRATEGIES,
        output_strategies: tuple[LocatorStrategy, ...] = OUTPUT_STRATEGIES,
        content_scan_limit: int = 50,
        script: ScriptRange = SINHALA,
    ):
        self.strategies = {
            Role.INPUT: tuple(input_strategies),
            Role.OUTPUT: tuple(output_strategies),
        }
        self.content_scan_limit = content_scan_limit
        self.script = script

    async def resolve(self, page: PageSurface, role: Role) -> ElementHandle:
        """
        Find the best-matching element for a role.

        Args:
            page: Surface to search
            role: Which surface to locate

        Returns:
            ElementHandle bound to the page's current state

        Raises:
            ElementNotFound: If no strategy yields a present, visible element
        """
        role = Role(role)

        handle = await self._resolve_structural(page, role)
        if handle is None and role == Role.OUTPUT:
            handle = await self._scan_for_script(page)

        if handle is None:
            raise ElementNotFound(
                f"Could not find {role.value} field on the page",
                role=role.value,
                details={
                    "url": page.url,
                    "strategies": [s.name for s in self.strategies[role]],
                },
            )

        logger.debug(f"Found {role.value} using strategy: {handle.strategy}")
        return handle

    async def _resolve_structural(
        self, page: PageSurface, role: Role
    ) -> Optional[ElementHandle]:
        for strategy in self.strategies[role]:
            matches = await page.query(strategy.selector, limit=1)
            if not matches:
                continue
            if await page.is_visible(matches[0]):
                return ElementHandle(
                    ref=matches[0],
                    role=role,
                    strategy=strategy.name,
                    epoch=page.epoch,
                )
            logger.debug(f"Strategy {strategy.name} matched a hidden element")
        return None

    async def _scan_for_script(self, page: PageSurface) -> Optional[ElementHandle]:
        candidates = await page.query(CONTENT_SCAN_SELECTOR, limit=self.content_scan_limit)
        for ref in candidates:
            text = await page.text_content(ref)
            if text and contains_script(text, self.script):
                return ElementHandle(
                    ref=ref,
                    role=Role.OUTPUT,
                    strategy=CONTENT_SCAN_LABEL,
                    epoch=page.epoch,
                )
        return None

    async def probe(self, page: PageSurface) -> dict[str, Optional[str]]:
        """Report which strategy currently resolves each role, for debugging."""
        found = {}
        for role in Role:
            try:
                handle = await self.resolve(page, role)
                found[role.value] = handle.strategy
            except ElementNotFound:
                found[role.value] = None
        return found
