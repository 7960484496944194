"""
crudkit: generic async repository and service base classes.

    from crudkit import BaseRepository, BaseService, FindOptions
"""

from crudkit.repositories import BaseRepository, FindOptions, QueryFilterOptions
from crudkit.services import BaseService, SearchTerm, get_search_filter
from crudkit.utils import (
    InternalError,
    InvalidArgumentError,
    Metadata,
    NotFoundError,
    ServiceError,
)

__version__ = "1.0.0"

__all__ = [
    "BaseRepository",
    "BaseService",
    "FindOptions",
    "QueryFilterOptions",
    "SearchTerm",
    "get_search_filter",
    "ServiceError",
    "InvalidArgumentError",
    "NotFoundError",
    "InternalError",
    "Metadata",
]
