"""
Persistence layer for dog records.

``DogStore`` is the contract the service layer talks to: find every
dog, find the first dog with a given name, save a dog and atomically
increment a dog's age.  Two implementations are provided:

* ``SQLiteDogStore`` keeps records in the ``dogs`` table created by
  ``core.db`` migrations.  Every call opens its own connection.
* ``InMemoryDogStore`` keeps records in a dictionary.  It is used by
  the test-suite and when ``DATABASE_URL`` is ``:memory:``.

Backend failures are raised as ``DogStoreError`` whose message is the
backend's own message, unchanged.  Age increments happen inside the
store so that two concurrent searches for the same dog both count.

Both stores treat ``age`` the way a SQLite INTEGER column does: text
that reads as a number is kept as that number, anything else is kept
as given.  Only a numeric (or missing) age can be incremented; any
other age makes the search fail with ``DogStoreError``.
"""

from __future__ import annotations

import math
import sqlite3
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from dog_tracker_api.app.core.db import get_connection, get_database_path, init_db
from dog_tracker_api.app.schemas.dog import DogRecord


class DogStoreError(Exception):
    """Raised when the underlying store fails to complete an operation."""


class DogStore(ABC):
    """Abstract store of dog records keyed by name."""

    async def initialise(self) -> None:
        """Prepare the backing storage.  Nothing to do by default."""

    @abstractmethod
    async def find_all(self) -> List[DogRecord]:
        """Return every stored dog in insertion order."""

    @abstractmethod
    async def find_by_name(self, name: str) -> Optional[DogRecord]:
        """Return the first dog called ``name`` or ``None``."""

    @abstractmethod
    async def save(self, record: DogRecord) -> DogRecord:
        """Insert ``record`` (no ``id`` yet) or update it, returning the stored version."""

    @abstractmethod
    async def increment_age(self, name: str) -> Optional[DogRecord]:
        """Atomically add one to the age of the first dog called ``name``.

        Returns the updated record, or ``None`` when no dog has that name.
        """


@contextmanager
def _store_errors() -> Iterator[None]:
    try:
        yield
    except (sqlite3.Error, OverflowError) as exc:
        raise DogStoreError(str(exc)) from exc


# Range of a SQLite INTEGER.
_MIN_INTEGER = -(2 ** 63)
_MAX_INTEGER = 2 ** 63 - 1


def _can_increment(age: Any) -> bool:
    return age is None or (isinstance(age, (int, float)) and not isinstance(age, bool))


def _increment_error(name: str, age: Any) -> DogStoreError:
    return DogStoreError(f"Cannot increment age {age!r} of {name}")


def coerce_age(age: Any) -> Any:
    """Return ``age`` as SQLite INTEGER affinity would store it.

    Booleans become 0 or 1, integral floats become ints and numeric text
    becomes a number.  Other values are returned unchanged.  Raises
    ``DogStoreError`` for values SQLite cannot store.
    """
    if isinstance(age, bool):
        return int(age)
    if isinstance(age, int):
        if not _MIN_INTEGER <= age <= _MAX_INTEGER:
            raise DogStoreError("Python int too large to convert to SQLite INTEGER")
        return age
    if isinstance(age, float):
        return int(age) if age.is_integer() and _MIN_INTEGER <= age <= _MAX_INTEGER else age
    if isinstance(age, str):
        text = age.strip()
        if "_" in text:
            return age
        try:
            number = int(text)
        except ValueError:
            try:
                number = float(text)
            except ValueError:
                return age
            if not math.isfinite(number):
                return age
        if isinstance(number, int) and not _MIN_INTEGER <= number <= _MAX_INTEGER:
            number = float(number)
        return coerce_age(number)
    if age is None:
        return None
    raise DogStoreError(f"Error binding parameter: type '{type(age).__name__}' is not supported")


class SQLiteDogStore(DogStore):
    """Dog store backed by the SQLite ``dogs`` table."""

    _COLUMNS = "id, name, breed, age"

    def __init__(self, database_path: Optional[str] = None) -> None:
        self.database_path = database_path or get_database_path()

    async def initialise(self) -> None:
        with _store_errors():
            init_db(self.database_path)

    async def find_all(self) -> List[DogRecord]:
        with _store_errors():
            conn = get_connection(self.database_path)
            try:
                rows = conn.execute(f"SELECT {self._COLUMNS} FROM dogs ORDER BY id").fetchall()
                return [self._row_to_record(row) for row in rows]
            finally:
                conn.close()

    async def find_by_name(self, name: str) -> Optional[DogRecord]:
        with _store_errors():
            conn = get_connection(self.database_path)
            try:
                row = conn.execute(
                    f"SELECT {self._COLUMNS} FROM dogs WHERE name = ? ORDER BY id LIMIT 1",
                    (name,),
                ).fetchone()
                return self._row_to_record(row) if row else None
            finally:
                conn.close()

    async def save(self, record: DogRecord) -> DogRecord:
        with _store_errors():
            conn = get_connection(self.database_path)
            try:
                cursor = conn.cursor()
                cursor.execute("BEGIN IMMEDIATE")
                if record.id is None:
                    cursor.execute(
                        "INSERT INTO dogs (name, breed, age) VALUES (?, ?, ?)",
                        (record.name, record.breed, record.age),
                    )
                    dog_id = cursor.lastrowid
                else:
                    cursor.execute(
                        """
                        UPDATE dogs
                        SET name = ?, breed = ?, age = ?, updated_at = CURRENT_TIMESTAMP
                        WHERE id = ?
                        """,
                        (record.name, record.breed, record.age, record.id),
                    )
                    if cursor.rowcount == 0:
                        raise DogStoreError(f"No dog found with id {record.id}")
                    dog_id = record.id
                row = cursor.execute(
                    f"SELECT {self._COLUMNS} FROM dogs WHERE id = ?", (dog_id,)
                ).fetchone()
                conn.commit()
                return self._row_to_record(row)
            finally:
                conn.close()

    async def increment_age(self, name: str) -> Optional[DogRecord]:
        with _store_errors():
            conn = get_connection(self.database_path)
            try:
                cursor = conn.cursor()
                # The write lock is held from the read to the commit, so no
                # other search can change the age in between.
                cursor.execute("BEGIN IMMEDIATE")
                row = cursor.execute(
                    "SELECT id, age FROM dogs WHERE name = ? ORDER BY id LIMIT 1",
                    (name,),
                ).fetchone()
                if row is None:
                    conn.rollback()
                    return None
                if not _can_increment(row["age"]):
                    conn.rollback()
                    raise _increment_error(name, row["age"])
                cursor.execute(
                    """
                    UPDATE dogs
                    SET age = COALESCE(age, 0) + 1, updated_at = CURRENT_TIMESTAMP
                    WHERE id = ?
                    """,
                    (row["id"],),
                )
                row = cursor.execute(
                    f"SELECT {self._COLUMNS} FROM dogs WHERE id = ?", (row["id"],)
                ).fetchone()
                conn.commit()
                return self._row_to_record(row)
            finally:
                conn.close()

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> DogRecord:
        return DogRecord(id=row["id"], name=row["name"], breed=row["breed"], age=row["age"])


class InMemoryDogStore(DogStore):
    """Dictionary-backed dog store; contents are lost when the process exits."""

    def __init__(self) -> None:
        self._dogs: Dict[int, DogRecord] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    async def find_all(self) -> List[DogRecord]:
        with self._lock:
            return [dog.model_copy() for dog in self._dogs.values()]

    async def find_by_name(self, name: str) -> Optional[DogRecord]:
        with self._lock:
            dog = self._first_named(name)
            return dog.model_copy() if dog else None

    async def save(self, record: DogRecord) -> DogRecord:
        age = coerce_age(record.age)
        with self._lock:
            if record.id is None:
                stored = record.model_copy(update={"id": self._next_id, "age": age})
                self._next_id += 1
            elif record.id in self._dogs:
                stored = record.model_copy(update={"age": age})
            else:
                raise DogStoreError(f"No dog found with id {record.id}")
            self._dogs[stored.id] = stored
            return stored.model_copy()

    async def increment_age(self, name: str) -> Optional[DogRecord]:
        with self._lock:
            dog = self._first_named(name)
            if dog is None:
                return None
            if not _can_increment(dog.age):
                raise _increment_error(name, dog.age)
            dog.age = (dog.age or 0) + 1
            return dog.model_copy()

    def _first_named(self, name: str) -> Optional[DogRecord]:
        # Dicts keep insertion order, which matches id order here.
        for dog in self._dogs.values():
            if dog.name == name:
                return dog
        return None
