"""
Generic error utilities for creating and raising typed exceptions.

This module provides utilities to create exceptions with associated error types
in a clean, reusable way across the server.
"""

from enum import Enum
from typing import Any, NoReturn, Type, Union


def raiseError(
    error_type: Union[Enum, str],
    message: str,
    exception_class: Type[Exception] = ValueError,
    **attributes: Any,
) -> NoReturn:
    """
    Create and raise an exception with an associated error type.

    Extra keyword arguments are set as attributes on the exception, which lets
    callers carry flags such as ``retry`` without a dedicated subclass per case.

    Args:
        error_type: The error type enum or string to associate with the exception
        message: The error message to display
        exception_class: The exception class to instantiate (defaults to ValueError)
        **attributes: Additional attributes to set on the exception

    Raises:
        The specified exception with error_type attribute set

    Examples:
        >>> from marlint_server.services.lsp.exceptions import LinterErrorType
        >>> raiseError(LinterErrorType.MODULE_MALFORMED, "No lint_text", RuntimeError)

        >>> raiseError(LinterErrorType.MODULE_MISSING, "Install it", RuntimeError, retry=True)
    """
    error = exception_class(message)
    setattr(error, "error_type", error_type)
    for name, value in attributes.items():
        setattr(error, name, value)
    raise error
