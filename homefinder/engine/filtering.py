"""Predicate-based property filtering.

A ``FilterSpec`` plus a free-text search term is compiled into a list of
predicates; a property matches when every predicate holds. Fields left
unset in the ``FilterSpec`` contribute no predicate at all.
"""

from typing import Callable, Iterable

from homefinder.models import FilterSpec, Property

Predicate = Callable[[Property], bool]


def _never(prop: Property) -> bool:
    return False


def search_predicate(search_term: str) -> Predicate | None:
    """Case-insensitive substring match over title, address, type and amenities."""
    needle = (search_term or "").strip().lower()
    if not needle:
        return None

    def predicate(prop: Property) -> bool:
        haystack = (
            prop.title,
            prop.address.street,
            prop.address.city,
            prop.address.state,
            prop.property_type.value,
            *prop.amenities,
        )
        return any(needle in text.lower() for text in haystack)

    return predicate


def location_predicate(location: str | None) -> Predicate | None:
    """Case-insensitive substring match over city, state and street."""
    if location is None:
        return None
    needle = location.lower()

    def predicate(prop: Property) -> bool:
        address = prop.address
        return (
            needle in address.city.lower()
            or needle in address.state.lower()
            or needle in address.street.lower()
        )

    return predicate


def build_predicates(spec: FilterSpec, search_term: str = "") -> list[Predicate]:
    """Compile a spec and search term into conjunctive predicates."""
    if spec.has_empty_price_range:
        return [_never]

    predicates: list[Predicate] = []

    search = search_predicate(search_term)
    if search is not None:
        predicates.append(search)

    if spec.price_min is not None:
        price_min = spec.price_min
        predicates.append(lambda p: p.price >= price_min)
    if spec.price_max is not None:
        price_max = spec.price_max
        predicates.append(lambda p: p.price <= price_max)
    if spec.bedrooms_min is not None:
        bedrooms_min = spec.bedrooms_min
        predicates.append(lambda p: p.bedrooms >= bedrooms_min)
    if spec.bathrooms_min is not None:
        bathrooms_min = spec.bathrooms_min
        predicates.append(lambda p: p.bathrooms >= bathrooms_min)
    if spec.property_types:
        types = spec.property_types
        predicates.append(lambda p: p.property_type in types)

    location = location_predicate(spec.location)
    if location is not None:
        predicates.append(location)

    if spec.square_feet_min is not None:
        square_feet_min = spec.square_feet_min
        predicates.append(lambda p: p.square_feet >= square_feet_min)

    return predicates


class FilterEngine:
    """Evaluate filter specs against properties."""

    def matches(self, prop: Property, spec: FilterSpec, search_term: str = "") -> bool:
        return all(predicate(prop) for predicate in build_predicates(spec, search_term))

    def apply(
        self,
        properties: Iterable[Property],
        spec: FilterSpec,
        search_term: str = "",
    ) -> list[Property]:
        """Return the matching properties, preserving input order."""
        predicates = build_predicates(spec, search_term)
        return [prop for prop in properties if all(predicate(prop) for predicate in predicates)]


def matches(prop: Property, spec: FilterSpec, search_term: str = "") -> bool:
    """Module-level shortcut for ``FilterEngine().matches``."""
    return FilterEngine().matches(prop, spec, search_term)
