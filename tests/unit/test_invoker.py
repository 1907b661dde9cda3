"""
test_invoker.py - Translation invoker tests

- navigation only when the page is off target
- input is cleared, filled and the trimmed output returned
- fixed and polling settle strategies
- stale handles are refused
"""

import pytest

from fakes import TARGET_URL, FakeElement, FakeSurface, translator_page
from translit_qa.core.config import SettleMode
from translit_qa.core.exceptions import (
    ElementNotFound,
    StaleElementHandle,
    TimeoutExceeded,
)
from translit_qa.core.state import ScenarioRecord
from translit_qa.tools.invoker import (
    FixedSettle,
    PollUntilStable,
    TranslationInvoker,
    settle_from_settings,
)
from translit_qa.tools.page import ElementHandle, Role
from translit_qa.tools.resolver import ElementResolver

SINHALA_OUTPUT = {
    "mudhalaali siini kiranavaa": "මුදලාලි සීනි කිරනවා",
    "mama": "මම",
}


def _convert(text: str) -> str:
    return f"  {SINHALA_OUTPUT.get(text, text)} \n"


class _CountingSettle:
    def __init__(self):
        self.calls = 0

    async def wait(self, page, resolver):
        self.calls += 1


class _StaleResolver(ElementResolver):
    """Hands out handles from before the last navigation."""

    async def resolve(self, page, role):
        handle = await super().resolve(page, role)
        return ElementHandle(ref=handle.ref, role=handle.role, strategy="stale", epoch=page.epoch - 1)


class TestSettleFromSettings:
    def test_fixed(self, test_settings):
        settle = settle_from_settings(test_settings)

        assert settle == FixedSettle(delay_ms=0)

    def test_poll(self, test_settings):
        test_settings.settle_mode = SettleMode.POLL

        settle = settle_from_settings(test_settings)

        assert settle == PollUntilStable(interval_ms=0, timeout_ms=50)


class TestNavigation:
    @pytest.mark.asyncio
    async def test_navigates_when_off_target(self, test_settings, strict_scenario):
        page = translator_page(_convert)
        invoker = TranslationInvoker(config=test_settings)

        await invoker.invoke(page, strict_scenario)

        assert page.navigations == [TARGET_URL]

    @pytest.mark.asyncio
    async def test_skips_navigation_when_on_target(self, test_settings, strict_scenario):
        page = translator_page(_convert, url=TARGET_URL + "?lang=si")
        invoker = TranslationInvoker(config=test_settings)

        await invoker.invoke(page, strict_scenario)

        assert page.navigations == []

    @pytest.mark.asyncio
    async def test_quiescence_timeout_propagates(self, test_settings, strict_scenario):
        page = translator_page(_convert)
        page.quiescence_error = TimeoutExceeded("Waiting for network idle timed out")
        invoker = TranslationInvoker(config=test_settings)

        with pytest.raises(TimeoutExceeded):
            await invoker.invoke(page, strict_scenario)

        assert page.filled == []


class TestInvoke:
    @pytest.mark.asyncio
    async def test_returns_trimmed_output(self, test_settings, strict_scenario):
        page = translator_page(_convert, url=TARGET_URL)
        invoker = TranslationInvoker(config=test_settings)

        actual = await invoker.invoke(page, strict_scenario)

        assert actual == "මුදලාලි සීනි කිරනවා"
        assert page.filled == ["mudhalaali siini kiranavaa"]
        assert page.element("input").text == "mudhalaali siini kiranavaa"

    @pytest.mark.asyncio
    async def test_previous_input_is_cleared(self, test_settings, strict_scenario):
        page = translator_page(_convert, url=TARGET_URL)
        page.element("input").text = "left over"
        invoker = TranslationInvoker(config=test_settings)

        await invoker.invoke(page, strict_scenario)

        assert page.element("input").text == strict_scenario.input_text

    @pytest.mark.asyncio
    async def test_missing_input_raises(self, test_settings, strict_scenario):
        page = FakeSurface(elements=[FakeElement("p", {"p"})], url=TARGET_URL)
        invoker = TranslationInvoker(config=test_settings)

        with pytest.raises(ElementNotFound) as exc_info:
            await invoker.invoke(page, strict_scenario)

        assert exc_info.value.role == "input"

    @pytest.mark.asyncio
    async def test_missing_output_raises(self, test_settings, strict_scenario):
        page = FakeSurface(elements=[FakeElement("input", {"textarea"})], url=TARGET_URL)
        invoker = TranslationInvoker(config=test_settings)

        with pytest.raises(ElementNotFound) as exc_info:
            await invoker.invoke(page, strict_scenario)

        assert exc_info.value.role == "output"

    @pytest.mark.asyncio
    async def test_output_found_by_content_scan(self, test_settings, strict_scenario):
        page = FakeSurface(
            elements=[
                FakeElement("input", {"textarea"}),
                FakeElement("output", {"span"}),
            ],
            url=TARGET_URL,
            convert=_convert,
        )
        invoker = TranslationInvoker(config=test_settings)

        actual = await invoker.invoke(page, strict_scenario)

        assert actual == "මුදලාලි සීනි කිරනවා"

    @pytest.mark.asyncio
    async def test_stale_handle_is_refused(self, test_settings, strict_scenario):
        page = translator_page(_convert, url=TARGET_URL)
        invoker = TranslationInvoker(resolver=_StaleResolver(), config=test_settings)

        with pytest.raises(StaleElementHandle):
            await invoker.invoke(page, strict_scenario)

        assert page.filled == []

    @pytest.mark.asyncio
    async def test_scenario_settle_overrides_strategy(self, test_settings):
        scenario = ScenarioRecord(
            id="Neg_UI_0001",
            display_name="Slow update",
            input_text="mama",
            settle_ms=0,
        )
        page = translator_page(_convert, url=TARGET_URL)
        settle = _CountingSettle()
        invoker = TranslationInvoker(settle=settle, config=test_settings)

        actual = await invoker.invoke(page, scenario)

        assert actual == "මම"
        assert settle.calls == 0

    @pytest.mark.asyncio
    async def test_configured_settle_is_used(self, test_settings, strict_scenario):
        page = translator_page(_convert, url=TARGET_URL)
        settle = _CountingSettle()
        invoker = TranslationInvoker(settle=settle, config=test_settings)

        await invoker.invoke(page, strict_scenario)

        assert settle.calls == 1


class TestPollUntilStable:
    @pytest.mark.asyncio
    async def test_returns_once_output_is_stable(self):
        page = translator_page(_convert)
        page.element("output").text = "මම"

        await PollUntilStable(interval_ms=0, timeout_ms=1000).wait(page, ElementResolver())

    @pytest.mark.asyncio
    async def test_empty_output_waits_for_deadline(self):
        page = translator_page(_convert)

        # Never stable, but the output surface exists: the wait just ends
        await PollUntilStable(interval_ms=0, timeout_ms=20).wait(page, ElementResolver())

    @pytest.mark.asyncio
    async def test_unresolvable_output_raises(self):
        page = FakeSurface(elements=[FakeElement("input", {"textarea"})])

        with pytest.raises(ElementNotFound):
            await PollUntilStable(interval_ms=0, timeout_ms=20).wait(page, ElementResolver())
