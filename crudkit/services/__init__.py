"""
Service layer: validation, error normalization and search.

Usage:
    from crudkit.services import BaseService, SearchTerm, get_search_filter
"""

from .base_service import BaseService
from .search import SearchTerm, SearchTermInput, get_search_filter

__all__ = [
    "BaseService",
    "SearchTerm",
    "SearchTermInput",
    "get_search_filter",
]
