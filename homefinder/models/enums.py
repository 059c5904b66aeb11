"""Enumeration types for property listings."""

from enum import Enum

from homefinder.exceptions import ValidationError


class PropertyType(str, Enum):
    HOUSE = "House"
    APARTMENT = "Apartment"
    CONDO = "Condo"
    TOWNHOUSE = "Townhouse"
    SINGLE_FAMILY = "Single Family"
    MULTI_FAMILY = "Multi Family"
    LAND = "Land"
    COMMERCIAL = "Commercial"

    @classmethod
    def parse(cls, value: "str | PropertyType") -> "PropertyType":
        """Resolve a display value or member name, case-insensitively."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for member in cls:
            if text in (member.value.lower(), member.name.lower()):
                return member
        raise ValidationError(f"Unknown property type: {value!r}")


class PropertyStatus(str, Enum):
    FOR_SALE = "For Sale"
    FOR_RENT = "For Rent"
    PENDING = "Pending"
    SOLD = "Sold"
