"""
translit-qa Tools Module

Contains the browser-facing interaction layer:
- Page surface: narrow capability interface over a page
- Resolver: prioritized strategy chains locating input and output
- Invoker: one round trip through the transliteration service
- Browser: Playwright lifecycle
"""

from translit_qa.tools.page import (
    ElementHandle,
    PageSurface,
    PlaywrightSurface,
    Role,
    ensure_current,
)
from translit_qa.tools.resolver import (
    ElementResolver,
    LocatorStrategy,
    INPUT_STRATEGIES,
    OUTPUT_STRATEGIES,
)
from translit_qa.tools.invoker import (
    TranslationInvoker,
    FixedSettle,
    PollUntilStable,
    settle_from_settings,
)
from translit_qa.tools.browser import BrowserTool

__all__ = [
    # Page
    "ElementHandle",
    "PageSurface",
    "PlaywrightSurface",
    "Role",
    "ensure_current",
    # Resolver
    "ElementResolver",
    "LocatorStrategy",
    "INPUT_STRATEGIES",
    "OUTPUT_STRATEGIES",
    # Invoker
    "TranslationInvoker",
    "FixedSettle",
    "PollUntilStable",
    "settle_from_settings",
    # Browser
    "BrowserTool",
]
