"""
Centralized constants for crudkit.

Usage:
    from crudkit.config.constants import ErrorKind, Messages

    if error.kind is ErrorKind.NOT_FOUND:
        ...
"""

from enum import Enum
from typing import Final


# =============================================================================
# Error kinds
# =============================================================================


class ErrorKind(str, Enum):
    """The only error kinds allowed across the service boundary."""

    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL = "INTERNAL"


class GrpcCodes:
    """gRPC status codes for each error kind."""

    INVALID_ARGUMENT: Final[int] = 3
    NOT_FOUND: Final[int] = 5
    INTERNAL: Final[int] = 13


# =============================================================================
# Messages
# =============================================================================


class Messages:
    """Error messages shared by services."""

    INVALID_PARAMETERS: Final[str] = "Incorrect / invalid parameters supplied"
    VALIDATION_FAILED: Final[str] = "Validation failed on the provided request"
    UNABLE_TO_VALIDATE: Final[str] = "Unable to validate request"
    NOT_FOUND: Final[str] = "The requested object could not be found"
    UNKNOWN_ERROR: Final[str] = "Unknown error"
    INTERNAL: Final[str] = "Internal error"


# =============================================================================
# Search
# =============================================================================


class Search:
    """Search compiler constants."""

    DEFAULT_OPERATOR: Final[str] = "="
    RAW_VALUE_PREFIX: Final[str] = "("
    RAW_VALUE_SUFFIX: Final[str] = ")"
    QUOTE: Final[str] = "'"
