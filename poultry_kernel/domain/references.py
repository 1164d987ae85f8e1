"""
Tagged references to directory entities.

A chicken type may be addressed either by its id or by its display name.
The reference is resolved exactly once, at the caller-facing boundary,
into a canonical id; core services only ever see UUIDs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union
from uuid import UUID

from poultry_kernel.domain.values import to_uuid
from poultry_kernel.exceptions import InvalidInputError


@dataclass(frozen=True)
class ChickenTypeById:
    chicken_type_id: UUID


@dataclass(frozen=True)
class ChickenTypeByName:
    name: str

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise InvalidInputError("chicken_type", "name must not be empty")


ChickenTypeRef = Union[ChickenTypeById, ChickenTypeByName]


def chicken_type_ref(value) -> ChickenTypeRef:
    """
    Build a ChickenTypeRef from a loose caller value.

    Accepts an existing ref, a UUID, or a string.  A string that parses
    as a UUID is an id reference; any other string is a name.
    """
    if isinstance(value, (ChickenTypeById, ChickenTypeByName)):
        return value
    if isinstance(value, UUID):
        return ChickenTypeById(value)
    if isinstance(value, str):
        try:
            return ChickenTypeById(UUID(value))
        except ValueError:
            return ChickenTypeByName(value.strip())
    # Raises MalformedIdentifierError for anything else
    return ChickenTypeById(to_uuid(value, "chicken_type"))
