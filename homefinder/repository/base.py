"""Property repository contract."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import fields, replace
from typing import Any

from homefinder.config import IdType
from homefinder.exceptions import NotFoundError, ValidationError
from homefinder.models import Address, Coordinates, FilterSpec, Property, PropertyType
from homefinder.repository.normalizers import RecordNormalizer, split_csv, to_decimal

FEATURED_LIMIT = 6

_MUTABLE_FIELDS = frozenset(f.name for f in fields(Property)) - {"id", "created_at", "saved_at"}


def apply_changes(prop: Property, changes: dict[str, Any]) -> Property:
    """Return ``prop`` with canonical field ``changes`` merged in.

    Raises
    ------
    ValidationError
        If a key is not an updatable ``Property`` field or a value is
        malformed.
    """
    unknown = set(changes) - _MUTABLE_FIELDS
    if unknown:
        raise ValidationError(f"Cannot update fields: {sorted(unknown)}")

    values = dict(changes)
    if "price" in values:
        values["price"] = to_decimal(values["price"], "price")
    if "property_type" in values:
        values["property_type"] = PropertyType.parse(values["property_type"])
    for name in ("images", "amenities"):
        if name in values:
            values[name] = split_csv(values[name])
    if isinstance(values.get("address"), dict):
        values["address"] = Address(**values["address"])
    if isinstance(values.get("coordinates"), dict):
        values["coordinates"] = Coordinates(**values["coordinates"])
    return replace(prop, **values)


class PropertyRepository(ABC):
    """Async access to property listings in canonical shape.

    ``get_all`` may push filters down to the backend, but the result is
    not guaranteed to honour every constraint; callers re-apply
    ``FilterEngine`` client-side.
    """

    def __init__(self, normalizer: RecordNormalizer, id_type: IdType = IdType.STRING) -> None:
        self.normalizer = normalizer
        self.id_type = id_type

    @abstractmethod
    async def get_all(self, filters: FilterSpec | None = None) -> list[Property]:
        """Return all properties, optionally pre-filtered by the backend."""

    @abstractmethod
    async def get_by_id(self, property_id: str) -> Property:
        """Return one property or raise ``NotFoundError``."""

    @abstractmethod
    async def create(self, draft: Property) -> Property:
        """Store a new property; its id and ``created_at`` are assigned here."""

    @abstractmethod
    async def update(self, property_id: str, changes: dict[str, Any]) -> Property:
        """Merge canonical field changes into an existing property."""

    @abstractmethod
    async def delete(self, property_id: str) -> Property:
        """Delete a property and return it."""

    async def get_featured(self) -> list[Property]:
        """Return featured properties, at most ``FEATURED_LIMIT``."""
        properties = await self.get_all()
        return [prop for prop in properties if prop.featured][:FEATURED_LIMIT]

    def check_id(self, property_id: str) -> str:
        """Normalize an id, rejecting ones the backend could never hold."""
        text = str(property_id).strip()
        if not text or (self.id_type is IdType.INTEGER and not text.isdigit()):
            raise NotFoundError(f"Property {property_id} not found")
        return text
