"""UserService CRUD and the cascading delete."""

import pytest

from bookforge.domain.entities import UserFilter, UserForm
from bookforge.domain.exceptions import NotFound, StoreFailure
from bookforge.infrastructure.persistence.repositories.user import UserRepository


class TestUserCrud:
    async def test_create_and_find(self, user_service):
        created = await user_service.create(UserForm(name="Alice"))

        assert created.id > 0
        assert await user_service.find_by_id(created.id) == created

    async def test_names_need_not_be_unique(self, user_service):
        first = await user_service.create(UserForm(name="Sam"))
        second = await user_service.create(UserForm(name="Sam"))

        assert first.id != second.id

    async def test_update_replaces_name(self, user_service, make_user):
        alice = await make_user("Alice")

        renamed = await user_service.update(alice.id, UserForm(name="Alicia"))

        assert renamed.id == alice.id
        assert renamed.name == "Alicia"
        assert (await user_service.find_by_id(alice.id)).name == "Alicia"

    async def test_update_missing_user_raises_not_found(self, user_service):
        with pytest.raises(NotFound) as exc_info:
            await user_service.update(8, UserForm(name="Nobody"))

        assert exc_info.value.entity == "user"

    async def test_find_missing_user_raises_not_found(self, user_service):
        with pytest.raises(NotFound, match="User with id 3 not found"):
            await user_service.find_by_id(3)

    async def test_list_in_id_order(self, user_service, make_user):
        carol = await make_user("Carol")
        alice = await make_user("Alice")

        assert await user_service.list_all() == [carol, alice]

    async def test_name_filter_is_case_sensitive_substring(
        self, user_service, make_user
    ):
        anna = await make_user("Anna")
        hannah = await make_user("Hannah")
        await make_user("Bob")

        assert await user_service.list(UserFilter(name="nn")) == [anna, hannah]
        assert await user_service.list(UserFilter(name="ann")) == [hannah]
        assert len(await user_service.list(UserFilter())) == 3

    async def test_find_by_ids_skips_ids_beyond_integer_range(
        self, user_service, make_user
    ):
        alice = await make_user("Alice")

        assert await user_service.find_by_ids([alice.id, 2**64]) == {alice.id: alice}

    async def test_find_by_ids_skips_unknown(self, user_service, make_user):
        alice = await make_user("Alice")

        found = await user_service.find_by_ids([alice.id, 999])

        assert found == {alice.id: alice}


class TestCascadingDelete:
    async def test_owned_books_deleted_and_held_books_returned(
        self, user_service, book_service, make_user, make_book
    ):
        user1 = await make_user("One")
        user2 = await make_user("Two")
        book10 = await make_book(user1.id, title="Owned by one", current_holder_id=user2.id)
        book11 = await make_book(user2.id, title="Held by one", current_holder_id=user1.id)

        await user_service.delete(user1.id)

        with pytest.raises(NotFound):
            await book_service.find_by_id(book10.id)
        returned = await book_service.find_by_id(book11.id)
        assert returned.current_holder_id is None
        assert returned.title == "Held by one"
        assert returned.owner_id == user2.id
        with pytest.raises(NotFound):
            await user_service.find_by_id(user1.id)
        assert await user_service.list_all() == [user2]

    async def test_user_holding_own_book(
        self, user_service, book_service, make_user, make_book
    ):
        alice = await make_user("Alice")
        await make_book(alice.id, current_holder_id=alice.id)

        await user_service.delete(alice.id)

        assert await book_service.list_all() == []

    async def test_delete_missing_user_raises_not_found(self, user_service):
        with pytest.raises(NotFound) as exc_info:
            await user_service.delete(42)

        assert exc_info.value.entity == "user"
        assert exc_info.value.id == 42

    async def test_delete_id_beyond_integer_range_raises_not_found(
        self, user_service, make_user
    ):
        alice = await make_user("Alice")

        with pytest.raises(NotFound):
            await user_service.delete(2**64)

        assert await user_service.list_all() == [alice]

    async def test_failure_rolls_back_the_whole_cascade(
        self, monkeypatch, user_service, book_service, make_user, make_book
    ):
        user1 = await make_user("One")
        user2 = await make_user("Two")
        book10 = await make_book(user1.id, current_holder_id=user2.id)
        book11 = await make_book(user2.id, current_holder_id=user1.id)

        async def failing_delete(self, user_id):
            raise StoreFailure("delete_user")

        monkeypatch.setattr(UserRepository, "delete_user", failing_delete)

        with pytest.raises(StoreFailure):
            await user_service.delete(user1.id)

        assert await book_service.find_by_id(book10.id) == book10
        assert (await book_service.find_by_id(book11.id)).current_holder_id == user1.id
        assert await user_service.find_by_id(user1.id) == user1

    async def test_retry_after_failure_succeeds(
        self, monkeypatch, user_service, book_service, make_user, make_book
    ):
        alice = await make_user("Alice")
        await make_book(alice.id)
        original_delete = UserRepository.delete_user

        async def failing_delete(self, user_id):
            raise StoreFailure("delete_user")

        monkeypatch.setattr(UserRepository, "delete_user", failing_delete)
        with pytest.raises(StoreFailure):
            await user_service.delete(alice.id)

        monkeypatch.setattr(UserRepository, "delete_user", original_delete)
        await user_service.delete(alice.id)

        assert await book_service.list_all() == []
        assert await user_service.list_all() == []

    async def test_store_refuses_to_orphan_books(self, database, make_user, make_book):
        """Deleting the user row alone violates the book foreign keys."""
        alice = await make_user("Alice")
        await make_book(alice.id)

        with pytest.raises(StoreFailure):
            async with database.unit_of_work() as uow:
                await uow.get_user_repository().delete_user(alice.id)
