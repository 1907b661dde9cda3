"""
translit-qa Acceptance Policies

Strict scenarios must match their expected output. Exploratory scenarios
characterize behaviour under adversarial input: they record which signals
were observed and only fail when strict_exploratory is enabled and nothing
at all was observed.
"""

import logging
from typing import Optional

from translit_qa.core.exceptions import ValidationMismatch
from translit_qa.core.matching import (
    SINHALA,
    ScriptRange,
    contains_script,
    is_acceptable,
    longest_whitespace_run,
    normalize,
)
from translit_qa.core.state import (
    AcceptanceDecision,
    ScenarioKind,
    ScenarioRecord,
    SignalKind,
    SignalSpec,
)

logger = logging.getLogger(__name__)


def is_blank_output(actual: str, expected: Optional[str]) -> bool:
    """True when nothing was read although something was expected."""
    return not normalize(actual) and bool(expected and normalize(expected))


class StrictPolicy:
    """Pass only when the output matches the expected text."""

    mode = ScenarioKind.STRICT

    def evaluate(self, scenario: ScenarioRecord, actual: str) -> AcceptanceDecision:
        match = is_acceptable(actual, scenario.expected_output)
        passed = match.is_match
        warnings = []
        if is_blank_output(actual, scenario.expected_output):
            # An empty output is a substring of any expected text
            passed = False
            warnings.append("Output is empty")
        elif not match.is_match:
            warnings.append(
                f"Output does not match expected text "
                f"(similarity {match.similarity_score:.2f})"
            )
        return AcceptanceDecision(
            passed=passed,
            mode=self.mode,
            match=match,
            warnings=warnings,
        )


class ExploratoryPolicy:
    """
    Pass on any non-empty output or any observed structural signal.

    Signals that do not hold are logged and kept as warnings on the
    decision. With strict_exploratory set, a scenario that observed
    nothing at all fails instead of passing.
    """

    mode = ScenarioKind.EXPLORATORY

    def __init__(self, script: ScriptRange = SINHALA, strict_exploratory: bool = False):
        self.script = script
        self.strict_exploratory = strict_exploratory

    def observe(self, signal: SignalSpec, scenario: ScenarioRecord, actual: str) -> bool:
        """Check a single signal against the observed output."""
        if signal.kind == SignalKind.TARGET_SCRIPT:
            return contains_script(actual, self.script)
        if signal.kind == SignalKind.CONTAINS:
            return str(signal.value) in actual
        if signal.kind == SignalKind.REFERENCE_MATCH:
            reference = signal.value if signal.value is not None else scenario.reference_output
            if not reference or is_blank_output(actual, reference):
                return False
            return is_acceptable(actual, reference).is_match
        if signal.kind == SignalKind.MIN_LENGTH:
            return len(actual) > int(signal.value or 0)
        # MAX_WHITESPACE_RUN
        return longest_whitespace_run(actual) <= int(signal.value or 4)

    def evaluate(self, scenario: ScenarioRecord, actual: str) -> AcceptanceDecision:
        observations = {"non_empty": len(actual) > 0}
        for signal in scenario.signals:
            observations[signal.label] = self.observe(signal, scenario, actual)

        warnings = [
            f"{scenario.id} - signal '{label}' not observed"
            for label, seen in observations.items()
            if not seen
        ]
        for warning in warnings:
            logger.warning(warning)

        observed_any = any(observations.values())
        passed = observed_any or not self.strict_exploratory

        return AcceptanceDecision(
            passed=passed,
            mode=self.mode,
            observations=observations,
            warnings=warnings,
        )


def policy_for(
    scenario: ScenarioRecord,
    script: ScriptRange = SINHALA,
    strict_exploratory: bool = False,
):
    """Pick the acceptance policy matching the scenario's kind."""
    if scenario.kind == ScenarioKind.STRICT:
        return StrictPolicy()
    return ExploratoryPolicy(script=script, strict_exploratory=strict_exploratory)


def assert_acceptable(actual: str, expected: Optional[str]) -> None:
    """
    Raise ValidationMismatch unless the output matches the expected text.

    A missing expected text only requires a non-empty output.
    """
    if expected is None:
        if not actual:
            raise ValidationMismatch("Expected a non-empty output", actual=actual)
        return

    match = is_acceptable(actual, expected)
    if is_blank_output(actual, expected):
        raise ValidationMismatch("Output is empty", actual=actual, expected=expected)
    if not match.is_match:
        raise ValidationMismatch(
            f"Output {actual!r} does not match {expected!r}",
            actual=actual,
            expected=expected,
            similarity=match.similarity_score,
            details={"similarity": round(match.similarity_score, 3)},
        )
