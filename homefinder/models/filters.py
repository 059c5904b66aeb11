"""Search filters and quick price ranges."""

from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from typing import Any

from homefinder.exceptions import ValidationError
from homefinder.models.enums import PropertyType
from homefinder.serialization import serialize_value

# Persisted/UI key -> FilterSpec field
_FIELD_ALIASES: dict[str, str] = {
    "priceMin": "price_min",
    "priceMax": "price_max",
    "bedroomsMin": "bedrooms_min",
    "bathroomsMin": "bathrooms_min",
    "propertyTypes": "property_types",
    "squareFeetMin": "square_feet_min",
}


@dataclass(frozen=True)
class PriceRange:
    """Quick price-range preset; ``max`` of ``None`` is unbounded."""

    label: str
    min: Decimal | None
    max: Decimal | None


QUICK_PRICE_RANGES: tuple[PriceRange, ...] = (
    PriceRange("Under $200K", Decimal("0"), Decimal("200000")),
    PriceRange("$200K - $400K", Decimal("200000"), Decimal("400000")),
    PriceRange("$400K - $600K", Decimal("400000"), Decimal("600000")),
    PriceRange("$600K - $800K", Decimal("600000"), Decimal("800000")),
    PriceRange("$800K - $1M", Decimal("800000"), Decimal("1000000")),
    PriceRange("Over $1M", Decimal("1000000"), None),
)


@dataclass(frozen=True)
class FilterSpec:
    """User-chosen constraints narrowing the property collection.

    ``None`` (or an empty type set) means "no constraint". A bound of
    ``0`` is an active constraint.
    """

    price_min: Decimal | None = None
    price_max: Decimal | None = None
    bedrooms_min: int | None = None
    bathrooms_min: float | None = None
    property_types: frozenset[PropertyType] = field(default_factory=frozenset)
    location: str | None = None
    square_feet_min: int | None = None

    def __post_init__(self) -> None:
        types = frozenset(PropertyType.parse(t) for t in self.property_types)
        object.__setattr__(self, "property_types", types)
        if self.location is not None:
            object.__setattr__(self, "location", self.location.strip() or None)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FilterSpec":
        """Build a spec from persisted or UI data, merged over defaults.

        Accepts snake_case and camelCase keys. Empty strings are treated as
        unset, matching how blank form inputs arrive.

        Raises
        ------
        ValidationError
            If a value is not a valid non-negative number or a known
            property type.
        """
        values: dict[str, Any] = {}
        for key, value in data.items():
            name = _FIELD_ALIASES.get(key, key)
            if name in _PARSERS:
                values[name] = _PARSERS[name](name, value)
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "price_min": serialize_value(self.price_min),
            "price_max": serialize_value(self.price_max),
            "bedrooms_min": self.bedrooms_min,
            "bathrooms_min": self.bathrooms_min,
            "property_types": serialize_value(self.property_types),
            "location": self.location,
            "square_feet_min": self.square_feet_min,
        }

    @property
    def is_empty(self) -> bool:
        return self.active_count == 0

    @property
    def active_count(self) -> int:
        """Number of active filter dimensions (a price range counts once)."""
        count = 0
        if self.price_min is not None or self.price_max is not None:
            count += 1
        for value in (self.bedrooms_min, self.bathrooms_min, self.location, self.square_feet_min):
            if value is not None:
                count += 1
        if self.property_types:
            count += 1
        return count

    @property
    def has_empty_price_range(self) -> bool:
        """True when ``price_min > price_max``, which no price satisfies."""
        return (
            self.price_min is not None
            and self.price_max is not None
            and self.price_min > self.price_max
        )

    def with_price_range(self, price_range: PriceRange) -> "FilterSpec":
        """Apply a quick price-range preset to both price bounds."""
        return replace(self, price_min=price_range.min, price_max=price_range.max)

    def toggle_property_type(self, property_type: "PropertyType | str") -> "FilterSpec":
        """Add the type to the set, or remove it if already present."""
        parsed = PropertyType.parse(property_type)
        return replace(self, property_types=self.property_types ^ {parsed})


def _is_unset(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_decimal(name: str, value: Any) -> Decimal | None:
    if _is_unset(value):
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be a number, got {value!r}")
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValidationError(f"{name} must be a number, got {value!r}") from exc
    if not number.is_finite() or number < 0:
        raise ValidationError(f"{name} must be a non-negative number, got {value!r}")
    return number


def _parse_int(name: str, value: Any) -> int | None:
    number = _parse_decimal(name, value)
    if number is None:
        return None
    if number != number.to_integral_value():
        raise ValidationError(f"{name} must be a whole number, got {value!r}")
    return int(number)


def _parse_float(name: str, value: Any) -> float | None:
    number = _parse_decimal(name, value)
    return None if number is None else float(number)


def _parse_types(name: str, value: Any) -> frozenset[PropertyType]:
    if _is_unset(value):
        return frozenset()
    if isinstance(value, str):
        value = [part for part in value.split(",") if part.strip()]
    try:
        return frozenset(PropertyType.parse(item) for item in value)
    except TypeError as exc:
        raise ValidationError(f"{name} must be a list of property types") from exc


def _parse_location(name: str, value: Any) -> str | None:
    if _is_unset(value):
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be text, got {value!r}")
    return value


_PARSERS = {
    "price_min": _parse_decimal,
    "price_max": _parse_decimal,
    "bedrooms_min": _parse_int,
    "bathrooms_min": _parse_float,
    "property_types": _parse_types,
    "location": _parse_location,
    "square_feet_min": _parse_int,
}
