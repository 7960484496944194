"""
Models, schemas and services shared by the tests.
"""

from typing import Optional

from pydantic import BaseModel, Field
from sqlalchemy import Integer, String
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Mapped, mapped_column

from crudkit.models import Base, IdentityMixin
from crudkit.repositories import BaseRepository
from crudkit.services import BaseService


class User(IdentityMixin, Base):
    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    age: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)


class UserSchema(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    age: Optional[int] = Field(default=None, ge=0)


class UserRepository(BaseRepository[User]):
    def __init__(self, session: AsyncSession):
        super().__init__(User, session)


class UserService(BaseService[User]):
    validation_schema = UserSchema

    RESERVED_NAMES = {"root", "admin"}

    def __init__(self, repository: BaseRepository[User]):
        super().__init__(repository, entity_name="User")
        self.calls: list[str] = []

    def _validate(self, entity: User):
        if entity.name in self.RESERVED_NAMES:
            return [("name", "name is reserved")]
        return []

    async def _before_save(self, entity: User) -> User:
        self.calls.append("before_save")
        entity.email = entity.email.lower()
        return entity

    async def _before_update(self, entity_id: int, entity: User) -> User:
        self.calls.append(f"before_update:{entity_id}")
        return entity

    async def _before_delete(self, entity: User) -> None:
        self.calls.append(f"before_delete:{entity.id}")


def make_user(name: str = "Bob", email: str = "bob@example.com", age: Optional[int] = 30) -> User:
    return User(name=name, email=email, age=age)
