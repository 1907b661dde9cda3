"""
translit-qa State Schema

Defines the records that flow through a validation run: scenarios from the
corpus, match results from the validator, and per-scenario outcomes
collected into a run report.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field


class ScenarioKind(str, Enum):
    """Acceptance mode of a scenario."""

    STRICT = "strict"
    EXPLORATORY = "exploratory"


class ScenarioStatus(str, Enum):
    """Terminal status of a scenario execution."""

    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"


class MatchStrategy(str, Enum):
    """Which matching rule produced a decision."""

    EXACT = "exact"
    CONTAINMENT = "containment"
    FUZZY_THRESHOLD = "fuzzy_threshold"


class SignalKind(str, Enum):
    """Structural signals an exploratory scenario can look for."""

    TARGET_SCRIPT = "target_script"
    CONTAINS = "contains"
    REFERENCE_MATCH = "reference_match"
    MIN_LENGTH = "min_length"
    MAX_WHITESPACE_RUN = "max_whitespace_run"


class SignalSpec(BaseModel):
    """A single signal to observe in an exploratory scenario's output."""

    model_config = ConfigDict(frozen=True)

    kind: SignalKind
    value: Optional[Any] = None

    @property
    def label(self) -> str:
        if self.value is None:
            return self.kind.value
        return f"{self.kind.value}:{self.value}"


class ScenarioRecord(BaseModel):
    """One scenario of the corpus. Immutable once loaded."""

    model_config = ConfigDict(frozen=True)

    id: str
    display_name: str
    input_text: str
    expected_output: Optional[str] = None
    reference_output: Optional[str] = None
    signals: tuple[SignalSpec, ...] = ()
    settle_ms: Optional[int] = None
    category: str = "positive"

    @property
    def kind(self) -> ScenarioKind:
        if self.expected_output is None:
            return ScenarioKind.EXPLORATORY
        return ScenarioKind.STRICT

    @property
    def title(self) -> str:
        return f"{self.id} - {self.display_name}"


class MatchResult(BaseModel):
    """Result of comparing an actual output with an expected one."""

    model_config = ConfigDict(frozen=True)

    is_match: bool
    similarity_score: float = Field(ge=0.0, le=1.0)
    strategy_used: MatchStrategy


class AcceptanceDecision(BaseModel):
    """Verdict of an acceptance policy for one observed output."""

    model_config = ConfigDict(frozen=True)

    passed: bool
    mode: ScenarioKind
    match: Optional[MatchResult] = None
    observations: dict[str, bool] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)


class ScenarioOutcome(BaseModel):
    """Result of executing one scenario."""

    scenario_id: str
    passed: bool
    status: ScenarioStatus
    actual_output: str = ""
    diagnostics: Optional[str] = None  # Screenshot path
    decision: Optional[AcceptanceDecision] = None
    error: Optional[dict[str, Any]] = None
    duration_ms: int = 0
    timestamp: datetime = Field(default_factory=datetime.now)


class RunReport(BaseModel):
    """All outcomes of a corpus run, in corpus order."""

    target_url: str
    outcomes: list[ScenarioOutcome] = Field(default_factory=list)
    started_at: datetime = Field(default_factory=datetime.now)
    finished_at: Optional[datetime] = None

    @computed_field
    @property
    def total(self) -> int:
        return len(self.outcomes)

    @computed_field
    @property
    def passed(self) -> int:
        return sum(1 for o in self.outcomes if o.status == ScenarioStatus.PASSED)

    @computed_field
    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.status == ScenarioStatus.FAILED)

    @computed_field
    @property
    def errored(self) -> int:
        return sum(1 for o in self.outcomes if o.status == ScenarioStatus.ERROR)

    @property
    def ok(self) -> bool:
        return self.failed == 0 and self.errored == 0

    def to_json(self) -> str:
        return self.model_dump_json(indent=2)
