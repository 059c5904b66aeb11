"""Record normalizers: backend record shapes <-> canonical ``Property``."""

from abc import ABC, abstractmethod
from decimal import Decimal, InvalidOperation
from typing import Any

from homefinder.exceptions import ValidationError
from homefinder.models import Address, Coordinates, Property, PropertyType
from homefinder.serialization import parse_datetime, serialize_value

# Flat canonical field names produced by ``RecordNormalizer._flatten``.
FLAT_FIELDS: tuple[str, ...] = (
    "id",
    "title",
    "price",
    "street",
    "city",
    "state",
    "zip_code",
    "country",
    "bedrooms",
    "bathrooms",
    "square_feet",
    "property_type",
    "images",
    "description",
    "amenities",
    "lat",
    "lng",
    "year_built",
    "status",
    "featured",
    "created_at",
)


def split_csv(value: Any) -> tuple[str, ...]:
    """Split a comma-joined string (or sequence) into trimmed, non-empty parts."""
    if value is None:
        return ()
    if isinstance(value, str):
        parts = value.split(",")
    elif isinstance(value, (list, tuple)):
        parts = [str(item) for item in value]
    else:
        raise ValidationError(f"Expected a list or comma-joined text, got {value!r}")
    return tuple(part.strip() for part in parts if part and part.strip())


def to_decimal(value: Any, field_name: str) -> Decimal:
    if value is None or value == "" or isinstance(value, bool):
        raise ValidationError(f"{field_name} is required")
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValidationError(f"{field_name} must be numeric, got {value!r}") from exc
    if not number.is_finite() or number < 0:
        raise ValidationError(f"{field_name} must be non-negative, got {value!r}")
    return number


def to_int(value: Any, field_name: str, default: int = 0) -> int:
    if value is None or value == "":
        return default
    return int(to_decimal(value, field_name))


def to_float(value: Any, field_name: str, default: float = 0.0) -> float:
    if value is None or value == "":
        return default
    return float(to_decimal(value, field_name))


def to_coordinate(value: Any, field_name: str) -> float:
    if value is None or value == "":
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{field_name} must be numeric, got {value!r}") from exc


def to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "y")
    return bool(value)


def _nested(record: dict[str, Any], key: str) -> dict[str, Any]:
    value = record.get(key) or {}
    if not isinstance(value, dict):
        raise ValidationError(f"{key} must be an object, got {value!r}")
    return value


class RecordNormalizer(ABC):
    """Translate between one backend's record shape and ``Property``.

    Subclasses only map field names and nesting; value coercion is shared.
    """

    name: str

    @abstractmethod
    def extract(self, record: dict[str, Any]) -> dict[str, Any]:
        """Map a backend record to flat canonical field names."""

    @abstractmethod
    def pack(self, flat: dict[str, Any]) -> dict[str, Any]:
        """Map flat canonical values to a backend record."""

    def normalize(self, record: dict[str, Any]) -> Property:
        """Build a canonical ``Property`` from a backend record.

        Raises
        ------
        ValidationError
            If the record lacks an id or carries malformed values.
        """
        if not isinstance(record, dict):
            raise ValidationError(f"{self.name} record must be an object, got {type(record).__name__}")
        values = self.extract(record)
        raw_id = values.get("id")
        if raw_id is None or str(raw_id).strip() == "":
            raise ValidationError(f"{self.name} record has no id")
        property_id = str(raw_id).strip()
        try:
            return Property(
                id=property_id,
                title=str(values.get("title") or ""),
                price=to_decimal(values.get("price"), "price"),
                address=Address(
                    street=str(values.get("street") or ""),
                    city=str(values.get("city") or ""),
                    state=str(values.get("state") or ""),
                    zip_code=str(values.get("zip_code") or ""),
                    country=str(values.get("country") or "USA"),
                ),
                bedrooms=to_int(values.get("bedrooms"), "bedrooms"),
                bathrooms=to_float(values.get("bathrooms"), "bathrooms"),
                square_feet=to_int(values.get("square_feet"), "square_feet"),
                property_type=PropertyType.parse(values.get("property_type") or ""),
                images=split_csv(values.get("images")),
                description=str(values.get("description") or ""),
                amenities=split_csv(values.get("amenities")),
                coordinates=Coordinates(
                    lat=to_coordinate(values.get("lat"), "lat"),
                    lng=to_coordinate(values.get("lng"), "lng"),
                ),
                year_built=to_int(values.get("year_built"), "year_built"),
                status=str(values.get("status") or "For Sale"),
                featured=to_bool(values.get("featured")),
                created_at=parse_datetime(values.get("created_at")),
            )
        except (ValueError, ValidationError) as exc:
            raise ValidationError(f"Malformed {self.name} record {property_id}: {exc}") from exc

    def denormalize(self, prop: Property) -> dict[str, Any]:
        """Serialize a ``Property`` to this backend's record shape."""
        return self.pack(self._flatten(prop))

    @staticmethod
    def _flatten(prop: Property) -> dict[str, Any]:
        return {
            "id": prop.id,
            "title": prop.title,
            "price": serialize_value(prop.price),
            "street": prop.address.street,
            "city": prop.address.city,
            "state": prop.address.state,
            "zip_code": prop.address.zip_code,
            "country": prop.address.country,
            "bedrooms": prop.bedrooms,
            "bathrooms": prop.bathrooms,
            "square_feet": prop.square_feet,
            "property_type": prop.property_type.value,
            "images": list(prop.images),
            "description": prop.description,
            "amenities": list(prop.amenities),
            "lat": prop.coordinates.lat,
            "lng": prop.coordinates.lng,
            "year_built": prop.year_built,
            "status": prop.status,
            "featured": prop.featured,
            "created_at": serialize_value(prop.created_at),
        }


class CanonicalNormalizer(RecordNormalizer):
    """Structured camelCase records with nested address and coordinates.

    This is the shape the local listings table stores. Comma-joined
    ``images``/``amenities`` strings are tolerated on input.
    """

    name = "canonical"

    _TOP_LEVEL = {
        "id": "id",
        "title": "title",
        "price": "price",
        "bedrooms": "bedrooms",
        "bathrooms": "bathrooms",
        "square_feet": "squareFeet",
        "property_type": "propertyType",
        "images": "images",
        "description": "description",
        "amenities": "amenities",
        "year_built": "yearBuilt",
        "status": "status",
        "featured": "featured",
        "created_at": "createdAt",
    }
    _ADDRESS = {
        "street": "street",
        "city": "city",
        "state": "state",
        "zip_code": "zipCode",
        "country": "country",
    }

    def extract(self, record: dict[str, Any]) -> dict[str, Any]:
        values = {name: record.get(key) for name, key in self._TOP_LEVEL.items()}
        address = _nested(record, "address")
        for name, key in self._ADDRESS.items():
            values[name] = address.get(key)
        coordinates = _nested(record, "coordinates")
        values["lat"] = coordinates.get("lat")
        values["lng"] = coordinates.get("lng")
        return values

    def pack(self, flat: dict[str, Any]) -> dict[str, Any]:
        record = {key: flat[name] for name, key in self._TOP_LEVEL.items()}
        record["address"] = {key: flat[name] for name, key in self._ADDRESS.items()}
        record["coordinates"] = {"lat": flat["lat"], "lng": flat["lng"]}
        return record


class ColumnNormalizer(RecordNormalizer):
    """Flat rows with underscored column names, as a record API returns them.

    ``images`` and ``amenities`` are comma-joined strings; the address and
    coordinates are spread over their own columns.
    """

    name = "column"

    DEFAULT_COLUMNS: dict[str, str] = {
        "id": "id",
        "title": "title",
        "price": "price",
        "street": "street",
        "city": "city",
        "state": "state",
        "zip_code": "zip_code",
        "country": "country",
        "bedrooms": "bedrooms",
        "bathrooms": "bathrooms",
        "square_feet": "square_feet",
        "property_type": "property_type",
        "images": "images",
        "description": "description",
        "amenities": "amenities",
        "lat": "latitude",
        "lng": "longitude",
        "year_built": "year_built",
        "status": "status",
        "featured": "featured",
        "created_at": "created_at",
    }

    def __init__(self, columns: dict[str, str] | None = None) -> None:
        """Initialize with optional column-name overrides.

        Parameters
        ----------
        columns : dict[str, str] | None
            Mapping of canonical field name to backend column name; merged
            over ``DEFAULT_COLUMNS``.
        """
        unknown = set(columns or ()) - set(FLAT_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown canonical fields in column map: {sorted(unknown)}")
        self.columns = {**self.DEFAULT_COLUMNS, **(columns or {})}

    def column(self, field_name: str) -> str:
        return self.columns[field_name]

    def extract(self, record: dict[str, Any]) -> dict[str, Any]:
        return {name: record.get(column) for name, column in self.columns.items()}

    def pack(self, flat: dict[str, Any]) -> dict[str, Any]:
        row = {}
        for name, column in self.columns.items():
            value = flat[name]
            if name in ("images", "amenities"):
                value = ",".join(value)
            row[column] = value
        return row
