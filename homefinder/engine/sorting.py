"""Stable, non-mutating property ordering."""

from enum import Enum
from typing import Callable, Iterable

from homefinder.exceptions import InvalidSortKeyError
from homefinder.models import Property


class SortKey(str, Enum):
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    BEDS_DESC = "beds-desc"
    SQFT_DESC = "sqft-desc"
    NEWEST = "newest"
    SAVED_NEWEST = "saved-newest"
    SAVED_OLDEST = "saved-oldest"


# Keys used by older UI builds
SORT_KEY_ALIASES: dict[str, SortKey] = {
    "price-low": SortKey.PRICE_ASC,
    "price-high": SortKey.PRICE_DESC,
    "beds-high": SortKey.BEDS_DESC,
    "sqft-high": SortKey.SQFT_DESC,
}

SORT_OPTIONS: tuple[tuple[SortKey, str], ...] = (
    (SortKey.PRICE_ASC, "Price: Low to High"),
    (SortKey.PRICE_DESC, "Price: High to Low"),
    (SortKey.BEDS_DESC, "Most Bedrooms"),
    (SortKey.SQFT_DESC, "Largest First"),
    (SortKey.NEWEST, "Newest Built"),
)

FAVORITES_SORT_OPTIONS: tuple[tuple[SortKey, str], ...] = (
    (SortKey.SAVED_NEWEST, "Recently Saved"),
    (SortKey.SAVED_OLDEST, "Oldest Saved"),
    (SortKey.PRICE_ASC, "Price: Low to High"),
    (SortKey.PRICE_DESC, "Price: High to Low"),
    (SortKey.BEDS_DESC, "Most Bedrooms"),
)

# key -> (attribute getter, descending)
_NUMERIC_ORDERS: dict[SortKey, tuple[Callable[[Property], object], bool]] = {
    SortKey.PRICE_ASC: (lambda p: p.price, False),
    SortKey.PRICE_DESC: (lambda p: p.price, True),
    SortKey.BEDS_DESC: (lambda p: p.bedrooms, True),
    SortKey.SQFT_DESC: (lambda p: p.square_feet, True),
    SortKey.NEWEST: (lambda p: p.year_built, True),
}


def parse_sort_key(sort_key: "SortKey | str") -> SortKey:
    """Resolve a sort key or one of its aliases.

    Raises
    ------
    InvalidSortKeyError
        If the key is not recognised.
    """
    if isinstance(sort_key, SortKey):
        return sort_key
    text = str(sort_key).strip().lower()
    if text in SORT_KEY_ALIASES:
        return SORT_KEY_ALIASES[text]
    try:
        return SortKey(text)
    except ValueError:
        raise InvalidSortKeyError(f"Unknown sort key: {sort_key!r}") from None


def sort_properties(properties: Iterable[Property], sort_key: "SortKey | str") -> list[Property]:
    """Return a new list ordered by ``sort_key``; ties keep their input order.

    ``saved-*`` keys order by ``saved_at``; properties without one go last
    in both directions.
    """
    key = parse_sort_key(sort_key)
    items = list(properties)

    if key in _NUMERIC_ORDERS:
        getter, descending = _NUMERIC_ORDERS[key]
        # sorted() stays stable with reverse=True
        return sorted(items, key=getter, reverse=descending)

    saved = [p for p in items if p.saved_at is not None]
    unsaved = [p for p in items if p.saved_at is None]
    saved = sorted(saved, key=lambda p: p.saved_at, reverse=key is SortKey.SAVED_NEWEST)
    return saved + unsaved


class SortEngine:
    """Object wrapper around ``sort_properties`` for injection."""

    def sort(self, properties: Iterable[Property], sort_key: "SortKey | str") -> list[Property]:
        return sort_properties(properties, sort_key)
