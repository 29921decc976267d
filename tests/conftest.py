"""Shared fixtures for the Dog Tracker API tests."""

from __future__ import annotations

from typing import Iterator, List, Optional

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from dog_tracker_api.app.main import create_app
from dog_tracker_api.app.schemas.dog import DogRecord
from dog_tracker_api.app.services.dog_store import (
    DogStoreError,
    InMemoryDogStore,
    SQLiteDogStore,
)


class FailingDogStore(InMemoryDogStore):
    """Store whose every operation fails the way a broken backend would."""

    message = "connection refused"

    async def find_all(self) -> List[DogRecord]:
        raise DogStoreError(self.message)

    async def find_by_name(self, name: str) -> Optional[DogRecord]:
        raise DogStoreError(self.message)

    async def save(self, record: DogRecord) -> DogRecord:
        raise DogStoreError(self.message)

    async def increment_age(self, name: str) -> Optional[DogRecord]:
        raise DogStoreError(self.message)


@pytest.fixture()
def store() -> InMemoryDogStore:
    return InMemoryDogStore()


@pytest.fixture()
def sqlite_store(tmp_path) -> SQLiteDogStore:
    return SQLiteDogStore(str(tmp_path / "dogs.db"))


@pytest.fixture()
def app(store: InMemoryDogStore) -> FastAPI:
    """Fresh app around an empty in-memory store."""
    return create_app(store)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    """TestClient with startup hooks executed."""
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def sqlite_client(sqlite_store: SQLiteDogStore) -> Iterator[TestClient]:
    with TestClient(create_app(sqlite_store)) as c:
        yield c


@pytest.fixture()
def failing_client() -> Iterator[TestClient]:
    with TestClient(create_app(FailingDogStore())) as c:
        yield c
