"""Property listing generator."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterator

from homefinder.generators.base import BaseGenerator
from homefinder.models import Address, Coordinates, Property, PropertyType
from homefinder.models.enums import PropertyStatus


class PropertyGenerator(BaseGenerator):
    """Generate realistic-looking property listings."""

    PROPERTY_TYPES = list(PropertyType)
    TYPE_WEIGHTS = [0.25, 0.20, 0.15, 0.10, 0.12, 0.06, 0.05, 0.07]

    # Sale price ranges by type (USD)
    PRICE_RANGES = {
        PropertyType.HOUSE: (250_000, 1_500_000),
        PropertyType.APARTMENT: (120_000, 700_000),
        PropertyType.CONDO: (150_000, 900_000),
        PropertyType.TOWNHOUSE: (200_000, 850_000),
        PropertyType.SINGLE_FAMILY: (220_000, 1_200_000),
        PropertyType.MULTI_FAMILY: (400_000, 2_500_000),
        PropertyType.LAND: (40_000, 600_000),
        PropertyType.COMMERCIAL: (500_000, 5_000_000),
    }

    AMENITIES = [
        "Pool",
        "Garage",
        "Garden",
        "Fireplace",
        "Central Air",
        "Hardwood Floors",
        "Walk-in Closet",
        "Gym",
        "Balcony",
        "Doorman",
        "Solar Panels",
        "Basement",
    ]

    STATUSES = [PropertyStatus.FOR_SALE, PropertyStatus.FOR_RENT, PropertyStatus.PENDING]
    STATUS_WEIGHTS = [0.75, 0.20, 0.05]

    FEATURED_RATE = 0.2

    def __init__(self, seed: int | None = None, locale: str = "en_US") -> None:
        super().__init__(seed, locale)
        self._sequence = 0

    def generate(self) -> Property:
        """Generate a single property.

        Returns
        -------
        Property
            Generated property with a sequential string id.
        """
        self._sequence += 1
        rng = self.rng
        property_type = rng.choices(self.PROPERTY_TYPES, weights=self.TYPE_WEIGHTS, k=1)[0]
        low, high = self.PRICE_RANGES[property_type]
        price = Decimal(rng.randrange(low, high, 1_000))

        if property_type is PropertyType.LAND:
            bedrooms, bathrooms = 0, 0.0
            square_feet = rng.randrange(5_000, 200_000, 100)
        else:
            bedrooms = rng.randint(1, 6)
            bathrooms = rng.choice([1.0, 1.5, 2.0, 2.5, 3.0, 3.5, 4.0])
            square_feet = rng.randrange(500, 6_000, 10)

        city = self.fake.city()
        street = self.fake.street_address()
        return Property(
            id=str(self._sequence),
            title=f"{property_type.value} on {street.split(' ', 1)[-1]}",
            price=price,
            address=Address(
                street=street,
                city=city,
                state=self.fake.state_abbr(),
                zip_code=self.fake.zipcode(),
                country="USA",
            ),
            bedrooms=bedrooms,
            bathrooms=bathrooms,
            square_feet=square_feet,
            property_type=property_type,
            images=tuple(
                f"https://picsum.photos/seed/home{self._sequence}-{i}/800/600"
                for i in range(rng.randint(1, 4))
            ),
            description=self.fake.paragraph(nb_sentences=3),
            amenities=tuple(rng.sample(self.AMENITIES, k=rng.randint(0, 5))),
            coordinates=Coordinates(
                lat=float(self.fake.latitude()),
                lng=float(self.fake.longitude()),
            ),
            year_built=rng.randint(1920, 2024),
            status=rng.choices(self.STATUSES, weights=self.STATUS_WEIGHTS, k=1)[0].value,
            featured=rng.random() < self.FEATURED_RATE,
            created_at=datetime.now(timezone.utc),
        )

    def generate_batch(self, count: int) -> Iterator[Property]:
        """Generate multiple properties.

        Parameters
        ----------
        count : int
            Number of properties to generate.

        Yields
        ------
        Property
            Generated properties.
        """
        for _ in range(count):
            yield self.generate()
