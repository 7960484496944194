"""
SQLAlchemy declarative base and mixins.
"""

from crudkit.models.base import Base, IdentityMixin

__all__ = ["Base", "IdentityMixin"]
