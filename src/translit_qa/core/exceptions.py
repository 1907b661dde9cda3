"""
translit-qa Custom Exceptions

Provides a hierarchy of exceptions for proper error handling
throughout the validator.
"""

from typing import Any, Optional


class TranslitQAError(Exception):
    """Base exception for all translit-qa errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(TranslitQAError):
    """Invalid or inconsistent configuration."""
    pass


# Tool-related errors
class ToolError(TranslitQAError):
    """Base exception for tool-related errors."""

    def __init__(
        self,
        message: str,
        tool_name: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.tool_name = tool_name


class BrowserError(ToolError):
    """Error with browser operations. Fatal to the scenario it occurs in."""
    pass


class ElementNotFound(BrowserError):
    """No strategy located a present and visible surface for a role."""

    def __init__(
        self,
        message: str,
        role: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, tool_name="resolver", details=details)
        self.role = role


class TimeoutExceeded(BrowserError):
    """Navigation or quiescence wait exceeded its timeout."""
    pass


class NavigationError(BrowserError):
    """Failed to navigate to the target URL."""
    pass


class StaleElementHandle(BrowserError):
    """An element handle was used after the page navigated away."""
    pass


# Validation errors
class ValidationError(TranslitQAError):
    """Base exception for validation errors."""
    pass


class ValidationMismatch(ValidationError):
    """Output was read but did not satisfy the acceptance policy."""

    def __init__(
        self,
        message: str,
        actual: str = "",
        expected: str = "",
        similarity: float = 0.0,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.actual = actual
        self.expected = expected
        self.similarity = similarity


class CorpusError(ValidationError):
    """The scenario corpus could not be loaded or is malformed."""
    pass


def is_fatal(error: Exception) -> bool:
    """
    Check if an error aborts the scenario it occurred in.

    Browser-level failures (missing surfaces, timeouts, navigation problems)
    are fatal; validation mismatches are ordinary test failures.

    Args:
        error: The exception to check

    Returns:
        True if the scenario must be aborted
    """
    return isinstance(error, BrowserError)
