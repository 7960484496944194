"""
Shared utilities: typed errors and error metadata.
"""

from crudkit.utils.exceptions import (
    ServiceError,
    InvalidArgumentError,
    NotFoundError,
    InternalError,
    normalize_errors,
    to_internal_error,
)
from crudkit.utils.metadata import Metadata, MetadataValue

__all__ = [
    "ServiceError",
    "InvalidArgumentError",
    "NotFoundError",
    "InternalError",
    "normalize_errors",
    "to_internal_error",
    "Metadata",
    "MetadataValue",
]
