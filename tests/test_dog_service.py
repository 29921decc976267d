"""Tests for DogService and the last-touched cache."""

from __future__ import annotations

import pytest

from dog_tracker_api.app.schemas.dog import DEFAULT_DOG, DogRead
from dog_tracker_api.app.services.dog_service import (
    DogService,
    DogValidationError,
    LastTouchedCache,
)
from dog_tracker_api.app.services.dog_store import DogStoreError, InMemoryDogStore

from .conftest import FailingDogStore


@pytest.fixture()
def service(store: InMemoryDogStore) -> DogService:
    return DogService(store)


class TestCreateDog:
    @pytest.mark.asyncio(loop_scope="function")
    async def test_returns_public_view(self, service: DogService) -> None:
        assert await service.create_dog("Rex", "Lab", 2) == DogRead(name="Rex", breed="Lab", age=2)

    @pytest.mark.asyncio(loop_scope="function")
    @pytest.mark.parametrize("age", [None, ""])
    async def test_missing_age_defaults_to_zero(self, service: DogService, age) -> None:
        assert (await service.create_dog("Rex", "Lab", age)).age == 0

    @pytest.mark.asyncio(loop_scope="function")
    async def test_age_is_not_validated(self, service: DogService) -> None:
        assert (await service.create_dog("Rex", "Lab", "very old")).age == "very old"

    @pytest.mark.asyncio(loop_scope="function")
    async def test_numeric_text_age_is_returned_as_number(self, service: DogService) -> None:
        assert (await service.create_dog("Rex", "Lab", "3")).age == 3

    @pytest.mark.asyncio(loop_scope="function")
    async def test_name_and_breed_are_stringified(self, service: DogService) -> None:
        dog = await service.create_dog(42, 7)
        assert (dog.name, dog.breed) == ("42", "7")

    @pytest.mark.asyncio(loop_scope="function")
    @pytest.mark.parametrize("name, breed", [(None, "Lab"), ("Rex", None), ("", "Lab"), ("Rex", "")])
    async def test_requires_name_and_breed(
        self, service: DogService, store: InMemoryDogStore, name, breed
    ) -> None:
        with pytest.raises(DogValidationError, match="Name and breed are required"):
            await service.create_dog(name, breed)
        assert await store.find_all() == []

    @pytest.mark.asyncio(loop_scope="function")
    async def test_store_error_propagates_and_keeps_last_touched(self) -> None:
        service = DogService(FailingDogStore())
        with pytest.raises(DogStoreError, match="connection refused"):
            await service.create_dog("Rex", "Lab")
        assert service.get_last_touched() == DEFAULT_DOG


class TestSearchAndAge:
    @pytest.mark.asyncio(loop_scope="function")
    async def test_increments_age_once_per_search(self, service: DogService) -> None:
        await service.create_dog("Rex", "Lab")
        ages = [(await service.search_and_age("Rex")).age for _ in range(3)]
        assert ages == [1, 2, 3]

    @pytest.mark.asyncio(loop_scope="function")
    async def test_form_age_is_incremented(self, service: DogService) -> None:
        await service.create_dog("Rex", "Lab", "3")
        assert (await service.search_and_age("Rex")).age == 4

    @pytest.mark.asyncio(loop_scope="function")
    async def test_unknown_dog_returns_none(self, service: DogService, store: InMemoryDogStore) -> None:
        assert await service.search_and_age("Ghost") is None
        assert await store.find_all() == []

    @pytest.mark.asyncio(loop_scope="function")
    async def test_requires_name(self, service: DogService) -> None:
        with pytest.raises(DogValidationError, match="Name is required to perform a search"):
            await service.search_and_age("")

    @pytest.mark.asyncio(loop_scope="function")
    async def test_updates_last_touched(self, service: DogService) -> None:
        await service.create_dog("Rex", "Lab")
        await service.create_dog("Bo", "Pug")
        await service.search_and_age("Rex")
        assert service.get_last_touched() == DogRead(name="Rex", breed="Lab", age=1)

    @pytest.mark.asyncio(loop_scope="function")
    async def test_failed_increment_keeps_last_touched(self, service: DogService) -> None:
        await service.create_dog("Rex", "Lab", "old")
        with pytest.raises(DogStoreError):
            await service.search_and_age("Rex")
        assert service.get_last_touched() == DogRead(name="Rex", breed="Lab", age="old")


class TestFindAndList:
    @pytest.mark.asyncio(loop_scope="function")
    async def test_find_requires_name(self, service: DogService) -> None:
        with pytest.raises(DogValidationError, match="Name is required"):
            await service.find_by_name(None)

    @pytest.mark.asyncio(loop_scope="function")
    async def test_find_does_not_age(self, service: DogService) -> None:
        await service.create_dog("Rex", "Lab")
        await service.find_by_name("Rex")
        assert (await service.find_by_name("Rex")).age == 0

    @pytest.mark.asyncio(loop_scope="function")
    async def test_list_passes_records_through(self, service: DogService, store: InMemoryDogStore) -> None:
        await service.create_dog("Rex", "Lab")
        assert await service.list_dogs() == await store.find_all()


class TestLastTouchedCache:
    def test_starts_with_placeholder(self) -> None:
        assert LastTouchedCache().get() == DogRead(name="unknown", breed="unknown", age=0)

    def test_set_replaces_value(self) -> None:
        cache = LastTouchedCache()
        cache.set(DogRead(name="Rex", breed="Lab", age=3))
        assert cache.get().name == "Rex"

    @pytest.mark.asyncio(loop_scope="function")
    async def test_services_do_not_share_state(self, store: InMemoryDogStore) -> None:
        first, second = DogService(store), DogService(store)
        await first.create_dog("Rex", "Lab")
        assert second.get_last_touched() == DEFAULT_DOG
