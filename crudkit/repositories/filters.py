"""
Filter objects accepted by BaseRepository.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class FindOptions:
    """
    Backend query constraints for find_* calls.

    Attributes:
        where: Equality predicates, column name to value.
        criteria: Extra SQLAlchemy boolean expressions, ANDed together.
        order_by: Columns or expressions to order by.
        limit: Maximum number of rows (None for no limit).
        offset: Rows to skip.
        options: Loader options (selectinload, joinedload) for relations.
    """

    where: dict[str, Any] = field(default_factory=dict)
    criteria: list[Any] = field(default_factory=list)
    order_by: list[Any] = field(default_factory=list)
    limit: int | None = None
    offset: int | None = None
    options: list[Any] = field(default_factory=list)

    def __post_init__(self):
        """Normalize pagination."""
        if self.limit is not None:
            self.limit = max(0, self.limit)
        if self.offset is not None:
            self.offset = max(0, self.offset)


@dataclass
class QueryFilterOptions:
    """
    Compiled search predicate.

    `where` is the primary clause, every entry of `and_where` is ANDed to it,
    and `limit` bounds the result count (0 means no bound).
    """

    where: str
    and_where: list[str] = field(default_factory=list)
    limit: int = 0

    def clauses(self) -> list[str]:
        """All non-empty clauses, primary first."""
        return [clause for clause in [self.where, *self.and_where] if clause]
