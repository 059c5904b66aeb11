"""Property repositories and record normalizers."""

from homefinder.repository.base import FEATURED_LIMIT, PropertyRepository
from homefinder.repository.local import LocalPropertyRepository
from homefinder.repository.normalizers import (
    CanonicalNormalizer,
    ColumnNormalizer,
    RecordNormalizer,
)
from homefinder.repository.remote import RemotePropertyRepository

__all__ = [
    "FEATURED_LIMIT",
    "CanonicalNormalizer",
    "ColumnNormalizer",
    "LocalPropertyRepository",
    "PropertyRepository",
    "RecordNormalizer",
    "RemotePropertyRepository",
]
