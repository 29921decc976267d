"""
Pydantic schemas for dog records.

A dog has a ``name``, a ``breed`` and an ``age``.  Names are not
unique.  ``age`` is deliberately untyped: whatever the client submits
is stored, so the schemas accept any JSON value for it.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class DogRecord(BaseModel):
    """A dog as kept by a store.

    ``id`` is assigned by the store on the first save and is ``None``
    until then.
    """

    id: Optional[int] = Field(None, description="Store-assigned identifier")
    name: str = Field(..., description="Dog's name; not unique")
    breed: str = Field(..., description="Dog's breed")
    age: Any = Field(0, description="Age as submitted; searching for a dog increments it")


class DogRead(BaseModel):
    """Public ``{name, breed, age}`` view returned by create and search."""

    name: str
    breed: str
    age: Any = None

    @classmethod
    def from_record(cls, record: DogRecord) -> "DogRead":
        return cls(name=record.name, breed=record.breed, age=record.age)


# Placeholder held as "last touched" until a dog is created or searched.
DEFAULT_DOG = DogRead(name="unknown", breed="unknown", age=0)
