"""
Service layer for dogs.

``DogService`` holds the request-handling logic behind the dog routes:
listing dogs, looking one up by name, creating one and the search
operation, which ages the dog it finds by one year.  Presence checks
raise ``DogValidationError``; store failures propagate as
``DogStoreError`` so the API layer can report the store's message.

The service also remembers the last dog it created or aged in a
``LastTouchedCache``.  Every operation returns its own result, so the
cache is only read by the ``/dogs/last`` route.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, List, Optional

from dog_tracker_api.app.schemas.dog import DEFAULT_DOG, DogRead, DogRecord
from dog_tracker_api.app.services.dog_store import DogStore

logger = logging.getLogger(__name__)


class DogValidationError(ValueError):
    """Raised when a required request field is missing."""


class LastTouchedCache:
    """Lock-guarded holder for the most recently created or aged dog."""

    def __init__(self, initial: DogRead = DEFAULT_DOG) -> None:
        self._lock = threading.Lock()
        self._dog = initial

    def get(self) -> DogRead:
        with self._lock:
            return self._dog

    def set(self, dog: DogRead) -> None:
        with self._lock:
            self._dog = dog


class DogService:
    """Business logic for the dog routes."""

    def __init__(self, store: DogStore, last_touched: Optional[LastTouchedCache] = None) -> None:
        self.store = store
        self.last_touched = last_touched or LastTouchedCache()

    async def list_dogs(self) -> List[DogRecord]:
        """Return every dog exactly as the store reports it."""
        return await self.store.find_all()

    async def find_by_name(self, name: Optional[str]) -> Optional[DogRecord]:
        """Return the first dog called ``name``, or ``None`` if there is none.

        Raises ``DogValidationError`` when ``name`` is missing or empty.
        """
        if not name:
            raise DogValidationError("Name is required")
        return await self.store.find_by_name(name)

    async def create_dog(self, name: Any, breed: Any, age: Any = None) -> DogRead:
        """Persist a new dog and remember it as the last one touched.

        ``name`` and ``breed`` must be present; they are stored as
        strings.  ``age`` is stored as given, with a missing or empty
        value meaning ``0``.
        """
        if not name or not breed:
            raise DogValidationError("Name and breed are required")
        if age is None or age == "":
            age = 0
        record = DogRecord(name=str(name), breed=str(breed), age=age)
        saved = await self.store.save(record)
        logger.info("Created dog %s (id=%s, breed=%s)", saved.name, saved.id, saved.breed)
        result = DogRead.from_record(saved)
        self.last_touched.set(result)
        return result

    async def search_and_age(self, name: Optional[str]) -> Optional[DogRead]:
        """Find the dog called ``name`` and make it one year older.

        Returns the updated dog, or ``None`` when no dog has that name
        (nothing is created or changed in that case).
        """
        if not name:
            raise DogValidationError("Name is required to perform a search")
        updated = await self.store.increment_age(name)
        if updated is None:
            logger.info("Search for unknown dog %s", name)
            return None
        logger.info("Dog %s (id=%s) is now %s", updated.name, updated.id, updated.age)
        result = DogRead.from_record(updated)
        self.last_touched.set(result)
        return result

    def get_last_touched(self) -> DogRead:
        """Return the last dog created or aged, or the placeholder dog."""
        return self.last_touched.get()
