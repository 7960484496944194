"""
Repository pattern over SQLAlchemy async sessions.

Usage:
    from crudkit.repositories import BaseRepository, FindOptions

    repo = BaseRepository(User, db)
    users = await repo.find_many_by_filter(FindOptions(limit=10))
"""

from .base import BaseRepository
from .filters import FindOptions, QueryFilterOptions

__all__ = [
    "BaseRepository",
    "FindOptions",
    "QueryFilterOptions",
]
