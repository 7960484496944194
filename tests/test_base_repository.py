"""
Tests for BaseRepository against an in-memory SQLite database.

Tests cover:
- Reads by filter, id and compiled query-builder options
- Writes (save, save_all, update_one_by_id, delete)
- Backend errors passing through untranslated
"""

import pytest
from sqlalchemy.exc import NoResultFound

from crudkit.repositories import FindOptions, QueryFilterOptions
from tests.support import User, make_user


class TestBaseRepositoryReads:
    @pytest.mark.asyncio
    async def test_get_all(self, user_repository, seed_users):
        users = await user_repository.get_all()

        assert {u.name for u in users} == {"Alice", "Bob", "Carol"}

    @pytest.mark.asyncio
    async def test_get_all_empty(self, user_repository):
        assert await user_repository.get_all() == []

    @pytest.mark.asyncio
    async def test_find_many_by_filter_equality(self, user_repository, seed_users):
        users = await user_repository.find_many_by_filter(FindOptions(where={"name": "Bob"}))

        assert [u.email for u in users] == ["bob@example.com"]

    @pytest.mark.asyncio
    async def test_find_many_by_filter_criteria_order_and_pagination(self, user_repository, seed_users):
        users = await user_repository.find_many_by_filter(
            FindOptions(
                criteria=[User.age >= 25],
                order_by=[User.age.desc()],
                limit=2,
                offset=1,
            )
        )

        assert [u.name for u in users] == ["Bob", "Alice"]

    def test_find_options_normalizes_pagination(self):
        options = FindOptions(limit=-5, offset=-1)

        assert options.limit == 0
        assert options.offset == 0

    @pytest.mark.asyncio
    async def test_find_one_by_id(self, user_repository, seed_users):
        bob = seed_users[1]

        found = await user_repository.find_one_by_id(bob.id)

        assert found.name == "Bob"

    @pytest.mark.asyncio
    async def test_find_one_by_id_missing_raises_backend_error(self, user_repository):
        with pytest.raises(NoResultFound):
            await user_repository.find_one_by_id(999)

    @pytest.mark.asyncio
    async def test_find_one_by_filter(self, user_repository, seed_users):
        found = await user_repository.find_one_by_filter(
            FindOptions(criteria=[User.age > 26], order_by=[User.age])
        )

        assert found.name == "Bob"

    @pytest.mark.asyncio
    async def test_find_one_by_filter_missing_raises_backend_error(self, user_repository, seed_users):
        with pytest.raises(NoResultFound):
            await user_repository.find_one_by_filter(FindOptions(where={"name": "Nobody"}))

    @pytest.mark.asyncio
    async def test_find_many_with_query_builder(self, user_repository, seed_users):
        options = QueryFilterOptions(where="age > '20'", and_where=["name <> 'Carol'"], limit=10)

        users = await user_repository.find_many_with_query_builder(options)

        assert sorted(u.name for u in users) == ["Alice", "Bob"]

    @pytest.mark.asyncio
    async def test_query_builder_limit(self, user_repository, seed_users):
        users = await user_repository.find_many_with_query_builder(
            QueryFilterOptions(where="age > '0'", limit=1)
        )

        assert len(users) == 1

    @pytest.mark.asyncio
    async def test_query_builder_zero_limit_is_unbounded(self, user_repository, seed_users):
        users = await user_repository.find_many_with_query_builder(
            QueryFilterOptions(where="age > '0'", limit=0)
        )

        assert len(users) == 3

    @pytest.mark.asyncio
    async def test_query_builder_raw_subexpression(self, user_repository, seed_users):
        users = await user_repository.find_many_with_query_builder(
            QueryFilterOptions(where="age = (SELECT MAX(age) FROM users)", limit=5)
        )

        assert [u.name for u in users] == ["Carol"]

    @pytest.mark.asyncio
    async def test_query_builder_value_with_colon(self, user_repository, seed_users):
        await user_repository.save(make_user(name="re :draft", email="draft@example.com"))

        users = await user_repository.find_many_with_query_builder(
            QueryFilterOptions(where="name = 're :draft'", and_where=["email = 'draft@example.com'"], limit=5)
        )

        assert [u.name for u in users] == ["re :draft"]

    @pytest.mark.asyncio
    async def test_find_one_with_query_builder_value_with_colon(self, user_repository, seed_users):
        await user_repository.save(make_user(name="lunch at :noon", email="late@example.com"))

        found = await user_repository.find_one_with_query_builder(
            QueryFilterOptions(where="name = 'lunch at :noon'", limit=1)
        )

        assert found is not None
        assert found.email == "late@example.com"

    @pytest.mark.asyncio
    async def test_find_one_with_query_builder(self, user_repository, seed_users):
        found = await user_repository.find_one_with_query_builder(
            QueryFilterOptions(where="email = 'carol@example.com'", limit=1)
        )

        assert found is not None
        assert found.name == "Carol"

    @pytest.mark.asyncio
    async def test_find_one_with_query_builder_absent_returns_none(self, user_repository, seed_users):
        found = await user_repository.find_one_with_query_builder(
            QueryFilterOptions(where="name = 'Nobody'", limit=1)
        )

        assert found is None


class TestBaseRepositoryWrites:
    @pytest.mark.asyncio
    async def test_save_assigns_id(self, user_repository):
        user = await user_repository.save(make_user())

        assert user.id is not None
        assert user.id > 0

    @pytest.mark.asyncio
    async def test_save_all(self, user_repository):
        users = await user_repository.save_all([make_user("A", "a@x.io"), make_user("B", "b@x.io")])

        assert len(users) == 2
        assert all(u.id for u in users)
        assert len(await user_repository.get_all()) == 2

    @pytest.mark.asyncio
    async def test_update_one_by_id(self, user_repository, seed_users):
        bob = seed_users[1]

        updated = await user_repository.update_one_by_id(
            bob.id, User(name="Robert", email="robert@example.com", age=31)
        )

        assert updated.id == bob.id
        assert updated.name == "Robert"
        assert updated.age == 31

    @pytest.mark.asyncio
    async def test_update_one_by_id_only_touches_set_columns(self, user_repository, seed_users):
        alice = seed_users[0]

        updated = await user_repository.update_one_by_id(alice.id, User(age=26))

        assert updated.name == "Alice"
        assert updated.email == "alice@example.com"
        assert updated.age == 26

    @pytest.mark.asyncio
    async def test_update_one_by_id_ignores_entity_id(self, user_repository, seed_users):
        alice, bob = seed_users[0], seed_users[1]

        await user_repository.update_one_by_id(alice.id, User(id=bob.id, name="Alicia"))

        assert (await user_repository.find_one_by_id(bob.id)).name == "Bob"
        assert (await user_repository.find_one_by_id(alice.id)).name == "Alicia"

    @pytest.mark.asyncio
    async def test_update_one_by_id_missing_raises_backend_error(self, user_repository):
        with pytest.raises(NoResultFound):
            await user_repository.update_one_by_id(404, make_user())

    @pytest.mark.asyncio
    async def test_delete(self, user_repository, seed_users):
        carol = seed_users[2]

        await user_repository.delete(carol)

        remaining = await user_repository.get_all()
        assert [u.name for u in remaining] == ["Alice", "Bob"]
