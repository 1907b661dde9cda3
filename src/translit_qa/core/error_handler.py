"""
translit-qa Error Handler

Turns exceptions raised while executing a scenario into serializable
records so a failing scenario can be reported without aborting the run.
"""

import logging
import traceback
from typing import Any

from translit_qa.core.exceptions import TranslitQAError, is_fatal

logger = logging.getLogger(__name__)


class ErrorRecord:
    """Record of an error that occurred while executing a scenario."""

    def __init__(
        self,
        error_type: str,
        message: str,
        scenario_id: str,
        is_fatal: bool = False,
        stack_trace: str = "",
        details: dict[str, Any] = None,
    ):
        self.error_type = error_type
        self.message = message
        self.scenario_id = scenario_id
        self.is_fatal = is_fatal
        self.stack_trace = stack_trace
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for outcome storage."""
        return {
            "error_type": self.error_type,
            "message": self.message,
            "scenario_id": self.scenario_id,
            "is_fatal": self.is_fatal,
            "stack_trace": self.stack_trace,
            "details": self.details,
        }

    @classmethod
    def from_exception(cls, error: Exception, scenario_id: str) -> "ErrorRecord":
        """Create an ErrorRecord from an exception."""
        details = {}
        if isinstance(error, TranslitQAError):
            details = error.details

        return cls(
            error_type=type(error).__name__,
            message=str(error),
            scenario_id=scenario_id,
            is_fatal=is_fatal(error),
            stack_trace="".join(
                traceback.format_exception(type(error), error, error.__traceback__)
            ),
            details=details,
        )


def handle_scenario_error(error: Exception, scenario_id: str) -> ErrorRecord:
    """
    Log a scenario error and return its record.

    Args:
        error: The exception that occurred
        scenario_id: Scenario being executed

    Returns:
        ErrorRecord describing the failure
    """
    error_record = ErrorRecord.from_exception(error, scenario_id)

    logger.error(
        f"Scenario '{scenario_id}' aborted: {error}",
        extra={
            "scenario_id": scenario_id,
            "error_type": error_record.error_type,
            "is_fatal": error_record.is_fatal,
        },
    )

    return error_record
