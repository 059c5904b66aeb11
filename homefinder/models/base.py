"""Value objects shared by the property models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Address:
    """Postal address of a listing.

    All fields are plain strings; city, state and street take part in
    free-text and location matching.
    """

    street: str
    city: str
    state: str
    zip_code: str = ""
    country: str = "USA"

    @property
    def location_label(self) -> str:
        """Short ``"City, State"`` label used in comparison tables."""
        return f"{self.city}, {self.state}"


@dataclass(frozen=True)
class Coordinates:
    """Latitude/longitude pair."""

    lat: float = 0.0
    lng: float = 0.0
