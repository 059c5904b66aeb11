"""Domain models for property browsing."""

from homefinder.models.base import Address, Coordinates
from homefinder.models.enums import PropertyType
from homefinder.models.favorite import FavoriteEntry
from homefinder.models.filters import QUICK_PRICE_RANGES, FilterSpec, PriceRange
from homefinder.models.property import Property

__all__ = [
    "Address",
    "Coordinates",
    "FavoriteEntry",
    "FilterSpec",
    "PriceRange",
    "Property",
    "PropertyType",
    "QUICK_PRICE_RANGES",
]
