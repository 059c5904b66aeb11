"""Pytest configuration and fixtures."""

from decimal import Decimal
from typing import Any, Callable

import pytest

from homefinder.models import Address, Coordinates, Property, PropertyType
from homefinder.persistence import InMemoryStore


def build_property(**overrides: Any) -> Property:
    """Property with sensible defaults; ``city``/``state``/``street`` go to the address."""
    address = Address(
        street=overrides.pop("street", "100 Congress Ave"),
        city=overrides.pop("city", "Austin"),
        state=overrides.pop("state", "TX"),
        zip_code=overrides.pop("zip_code", "78701"),
    )
    values: dict[str, Any] = {
        "id": "prop-001",
        "title": "Sunny Downtown Loft",
        "price": Decimal("300000"),
        "address": address,
        "bedrooms": 2,
        "bathrooms": 1.5,
        "square_feet": 1200,
        "property_type": PropertyType.CONDO,
        "images": ("https://img.example.com/1.jpg",),
        "description": "Bright corner unit.",
        "amenities": ("Pool", "Gym"),
        "coordinates": Coordinates(lat=30.2672, lng=-97.7431),
        "year_built": 2005,
        "status": "For Sale",
        "featured": False,
    }
    values.update(overrides)
    if not isinstance(values["price"], Decimal):
        values["price"] = Decimal(str(values["price"]))
    return Property(**values)


@pytest.fixture
def make_property() -> Callable[..., Property]:
    """Factory for properties with overridable fields."""
    return build_property


@pytest.fixture
def memory_store() -> InMemoryStore:
    """Fresh in-memory key/value store."""
    return InMemoryStore()


@pytest.fixture
def canonical_record() -> dict[str, Any]:
    """A listing in the local table's record shape."""
    return {
        "id": "1",
        "title": "Modern Family Home",
        "price": 450000,
        "address": {
            "street": "742 Evergreen Terrace",
            "city": "Springfield",
            "state": "IL",
            "zipCode": "62704",
            "country": "USA",
        },
        "bedrooms": 4,
        "bathrooms": 2.5,
        "squareFeet": 2400,
        "propertyType": "House",
        "images": ["https://img.example.com/a.jpg", "https://img.example.com/b.jpg"],
        "description": "Spacious home near schools.",
        "amenities": ["Garage", "Garden"],
        "coordinates": {"lat": 39.78, "lng": -89.65},
        "yearBuilt": 1998,
        "status": "For Sale",
        "featured": True,
    }


@pytest.fixture
def column_row() -> dict[str, Any]:
    """A listing as the record API returns it."""
    return {
        "id": 17,
        "title": "Lakeside Townhouse",
        "price": "389000.00",
        "street": "12 Shore Rd",
        "city": "Madison",
        "state": "WI",
        "zip_code": "53703",
        "country": "USA",
        "bedrooms": 3,
        "bathrooms": "2.5",
        "square_feet": 1850,
        "property_type": "Townhouse",
        "images": "https://img.example.com/x.jpg, https://img.example.com/y.jpg ,",
        "description": "Steps from the lake.",
        "amenities": "Balcony,  Fireplace ,Garage",
        "latitude": 43.07,
        "longitude": -89.38,
        "year_built": 2012,
        "status": "For Sale",
        "featured": "true",
        "created_at": "2024-03-01T12:00:00Z",
    }


@pytest.fixture
def seed() -> int:
    """Fixed random seed for reproducible generated data."""
    return 42
