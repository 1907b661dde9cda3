"""
translit-qa Output Matching

Tolerant comparison of an observed transliteration against the expected
text. Both strings are whitespace-normalized, then three rules are tried in
order and the first success wins:

- exact: normalized strings are identical
- containment: either normalized string is a substring of the other
- fuzzy threshold: positional similarity above FUZZY_THRESHOLD

Similarity is positional, not an edit distance. It suits strings that differ
by trailing punctuation or a few substitutions but not by insertions that
shift the alignment.
"""

import re
from dataclasses import dataclass

from translit_qa.core.state import MatchResult, MatchStrategy

FUZZY_THRESHOLD = 0.9

_WHITESPACE_RUN = re.compile(r"\s+")


@dataclass(frozen=True)
class ScriptRange:
    """A contiguous Unicode block reserved for one writing system."""

    name: str
    start: int
    end: int

    def __contains__(self, char: str) -> bool:
        return self.start <= ord(char) <= self.end


SINHALA = ScriptRange("Sinhala", 0x0D80, 0x0DFF)


def normalize(text: str) -> str:
    """Collapse whitespace runs to a single space and trim both ends."""
    return _WHITESPACE_RUN.sub(" ", text).strip()


def similarity(first: str, second: str) -> float:
    """
    Positional similarity of two strings in [0, 1].

    Counts the positions where both strings carry the same character and
    divides by the length of the longer one. Two empty strings score 1.0.
    """
    if len(first) > len(second):
        longer, shorter = first, second
    else:
        longer, shorter = second, first

    if len(longer) == 0:
        return 1.0

    matches = sum(1 for a, b in zip(longer, shorter) if a == b)
    return matches / len(longer)


def is_acceptable(actual: str, expected: str) -> MatchResult:
    """
    Decide whether an observed output matches the expected output.

    Args:
        actual: Text read from the output surface
        expected: Expected transliteration

    Returns:
        MatchResult naming the rule that decided
    """
    normalized_actual = normalize(actual)
    normalized_expected = normalize(expected)

    if normalized_actual == normalized_expected:
        return MatchResult(
            is_match=True,
            similarity_score=1.0,
            strategy_used=MatchStrategy.EXACT,
        )

    score = similarity(normalized_actual, normalized_expected)

    if normalized_expected in normalized_actual or normalized_actual in normalized_expected:
        return MatchResult(
            is_match=True,
            similarity_score=score,
            strategy_used=MatchStrategy.CONTAINMENT,
        )

    return MatchResult(
        is_match=score > FUZZY_THRESHOLD,
        similarity_score=score,
        strategy_used=MatchStrategy.FUZZY_THRESHOLD,
    )


def contains_script(text: str, script: ScriptRange = SINHALA) -> bool:
    """Check whether any character of the text belongs to the script."""
    return any(char in script for char in text)


def longest_whitespace_run(text: str) -> int:
    """Length of the longest run of consecutive whitespace characters."""
    return max((len(m.group()) for m in _WHITESPACE_RUN.finditer(text)), default=0)
