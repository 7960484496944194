"""
Declarative base for entities managed by crudkit repositories.
"""

from __future__ import annotations

from sqlalchemy import Integer
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class IdentityMixin:
    """
    Integer primary key shared by every entity.

    Services validate ids with BaseService.valid_id before they reach the
    database, so only positive integers are ever looked up.
    """

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id}>"
