"""
Pytest fixtures for translit-qa tests.
"""

from contextlib import asynccontextmanager
from pathlib import Path

import pytest

from fakes import TARGET_URL, FakeSurface
from translit_qa.core.config import SettleMode, Settings
from translit_qa.core.state import ScenarioRecord


# =============================================================================
# Settings and scenario fixtures
# =============================================================================

@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings pointing at a fake target with no real waiting."""
    return Settings(
        target_url=TARGET_URL,
        settle_mode=SettleMode.FIXED,
        settle_delay_ms=0,
        poll_interval_ms=0,
        poll_timeout_ms=50,
        screenshot_dir=str(tmp_path / "shots"),
    )


@pytest.fixture
def strict_scenario() -> ScenarioRecord:
    return ScenarioRecord(
        id="Pos_Fun_0001",
        display_name="Convert Simple Sentence Structure",
        input_text="mudhalaali siini kiranavaa",
        expected_output="මුදලාලි සීනි කිරනවා",
    )


@pytest.fixture
def exploratory_scenario() -> ScenarioRecord:
    return ScenarioRecord(
        id="Neg_Fun_0004",
        display_name="Incorrect Handling of Special Characters",
        input_text="mama #gedhara @yanavaa $ban",
        category="negative",
    )


@pytest.fixture
def surface_factory():
    """Wrap prepared surfaces as the async context manager factory the runner expects."""

    def make(*surfaces: FakeSurface):
        pending = list(surfaces)

        @asynccontextmanager
        async def open_surface():
            yield pending.pop(0)

        return open_surface

    return make
