"""Canonical property listing model."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal

from homefinder.models.base import Address, Coordinates
from homefinder.models.enums import PropertyType


@dataclass(frozen=True)
class Property:
    """Real estate listing in canonical shape.

    Every repository backend emits this shape regardless of how its
    records are stored. ``saved_at`` is only set on collections built
    from favorites.
    """

    id: str
    title: str
    price: Decimal
    address: Address
    bedrooms: int
    bathrooms: float
    square_feet: int
    property_type: PropertyType
    images: tuple[str, ...] = ()
    description: str = ""
    amenities: tuple[str, ...] = ()
    coordinates: Coordinates = field(default_factory=Coordinates)
    year_built: int = 0
    status: str = "For Sale"
    featured: bool = False
    created_at: datetime | None = None
    saved_at: datetime | None = None

    @property
    def primary_image(self) -> str | None:
        """First image URI, or ``None`` when the listing has no images."""
        return self.images[0] if self.images else None

    def with_saved_at(self, saved_at: datetime | None) -> "Property":
        """Return a copy carrying the favorite timestamp."""
        return replace(self, saved_at=saved_at)
