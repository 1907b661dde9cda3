"""
translit-qa Core Module

Contains configuration, the scenario corpus, output matching, acceptance
policies, error handling and the scenario runner.
"""

from translit_qa.core.config import settings, Settings, SettleMode
from translit_qa.core.state import (
    ScenarioKind,
    ScenarioStatus,
    MatchStrategy,
    SignalKind,
    SignalSpec,
    ScenarioRecord,
    MatchResult,
    AcceptanceDecision,
    ScenarioOutcome,
    RunReport,
)
from translit_qa.core.matching import (
    SINHALA,
    ScriptRange,
    normalize,
    similarity,
    is_acceptable,
    contains_script,
)
from translit_qa.core.corpus import Corpus, load_corpus
from translit_qa.core.policies import (
    StrictPolicy,
    ExploratoryPolicy,
    policy_for,
    assert_acceptable,
)
from translit_qa.core.exceptions import (
    TranslitQAError,
    ConfigurationError,
    BrowserError,
    ElementNotFound,
    TimeoutExceeded,
    NavigationError,
    StaleElementHandle,
    ValidationError,
    ValidationMismatch,
    CorpusError,
)
from translit_qa.core.error_handler import ErrorRecord, handle_scenario_error

__all__ = [
    # Config
    "settings",
    "Settings",
    "SettleMode",
    # State
    "ScenarioKind",
    "ScenarioStatus",
    "MatchStrategy",
    "SignalKind",
    "SignalSpec",
    "ScenarioRecord",
    "MatchResult",
    "AcceptanceDecision",
    "ScenarioOutcome",
    "RunReport",
    # Matching
    "SINHALA",
    "ScriptRange",
    "normalize",
    "similarity",
    "is_acceptable",
    "contains_script",
    # Corpus
    "Corpus",
    "load_corpus",
    # Policies
    "StrictPolicy",
    "ExploratoryPolicy",
    "policy_for",
    "assert_acceptable",
    # Exceptions
    "TranslitQAError",
    "ConfigurationError",
    "BrowserError",
    "ElementNotFound",
    "TimeoutExceeded",
    "NavigationError",
    "StaleElementHandle",
    "ValidationError",
    "ValidationMismatch",
    "CorpusError",
    # Error handling
    "ErrorRecord",
    "handle_scenario_error",
]
