"""
Linter error types for better error categorization.

This module provides an enum for categorizing linter-related errors
without complex exception hierarchies.
"""

from enum import Enum


class LinterErrorType(Enum):
    """Types of linter errors for categorization."""

    MODULE_MISSING = "module_missing"
    MODULE_MALFORMED = "module_malformed"
    MANIFEST_READ_ERROR = "manifest_read_error"
    LINT_CALL_ERROR = "lint_call_error"


class ModuleInitError(RuntimeError):
    """The linting module is required but cannot be used.

    ``retry`` tells the editor whether pressing Retry can help.
    """

    retry: bool = False
