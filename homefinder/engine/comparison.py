"""Side-by-side comparison of two or three properties."""

from dataclasses import dataclass
from typing import Any, Callable, Sequence

from homefinder.exceptions import SelectionFullError, ValidationError
from homefinder.models import Property

MAX_SELECTION = 3
MIN_COMPARISON = 2


@dataclass(frozen=True)
class ComparisonAttribute:
    """One comparable row: how to read it and which direction wins."""

    name: str
    label: str
    getter: Callable[[Property], Any]
    best: Callable[[Sequence[Any]], Any] | None = None


ATTRIBUTES: tuple[ComparisonAttribute, ...] = (
    ComparisonAttribute("price", "Price", lambda p: p.price, min),
    ComparisonAttribute("property_type", "Property Type", lambda p: p.property_type.value),
    ComparisonAttribute("bedrooms", "Bedrooms", lambda p: p.bedrooms, max),
    ComparisonAttribute("bathrooms", "Bathrooms", lambda p: p.bathrooms, max),
    ComparisonAttribute("square_feet", "Square Feet", lambda p: p.square_feet, max),
    ComparisonAttribute("year_built", "Year Built", lambda p: p.year_built, max),
    ComparisonAttribute("location", "Location", lambda p: p.address.location_label),
    ComparisonAttribute("status", "Status", lambda p: p.status),
)

_BY_NAME = {attribute.name: attribute for attribute in ATTRIBUTES}


@dataclass(frozen=True)
class ComparisonCell:
    property_id: str
    value: Any
    is_best: bool


@dataclass(frozen=True)
class ComparisonRow:
    attribute: str
    label: str
    cells: tuple[ComparisonCell, ...]


def _attribute(name: str) -> ComparisonAttribute:
    try:
        return _BY_NAME[name]
    except KeyError:
        raise ValidationError(f"Unknown comparison attribute: {name!r}") from None


def best_value(attribute: str, properties: Sequence[Property]) -> Any:
    """Winning value of ``attribute`` across ``properties``.

    Lower price wins; more bedrooms, bathrooms, square feet and a later
    year built win. Display-only attributes and empty input give ``None``.
    """
    spec = _attribute(attribute)
    if spec.best is None or not properties:
        return None
    return spec.best([spec.getter(prop) for prop in properties])


def compare(properties: Sequence[Property]) -> list[ComparisonRow]:
    """Build the comparison table for a selection.

    Fewer than two properties produce no table.

    Raises
    ------
    ValidationError
        If more than ``MAX_SELECTION`` properties are given.
    """
    if len(properties) > MAX_SELECTION:
        raise ValidationError(f"Cannot compare more than {MAX_SELECTION} properties")
    if len(properties) < MIN_COMPARISON:
        return []

    rows = []
    for spec in ATTRIBUTES:
        best = best_value(spec.name, properties)
        cells = tuple(
            ComparisonCell(
                property_id=prop.id,
                value=spec.getter(prop),
                is_best=best is not None and spec.getter(prop) == best,
            )
            for prop in properties
        )
        rows.append(ComparisonRow(attribute=spec.name, label=spec.label, cells=cells))
    return rows


class ComparisonSelection:
    """Ordered selection of up to ``limit`` properties."""

    def __init__(self, limit: int = MAX_SELECTION) -> None:
        self.limit = limit
        self._selected: list[Property] = []

    def __len__(self) -> int:
        return len(self._selected)

    @property
    def properties(self) -> list[Property]:
        return list(self._selected)

    @property
    def is_full(self) -> bool:
        return len(self._selected) >= self.limit

    @property
    def can_compare(self) -> bool:
        return len(self._selected) >= MIN_COMPARISON

    def is_selected(self, property_id: str) -> bool:
        return any(prop.id == property_id for prop in self._selected)

    def add(self, prop: Property) -> None:
        """Append ``prop``; no-op if already selected.

        Raises
        ------
        SelectionFullError
            If the selection is full. The selection is left unchanged.
        """
        if self.is_selected(prop.id):
            return
        if self.is_full:
            raise SelectionFullError(self.limit)
        self._selected.append(prop)

    def remove(self, property_id: str) -> None:
        self._selected = [prop for prop in self._selected if prop.id != property_id]

    def toggle(self, prop: Property) -> bool:
        """Deselect if selected, otherwise select. Returns the new state."""
        if self.is_selected(prop.id):
            self.remove(prop.id)
            return False
        self.add(prop)
        return True

    def clear(self) -> None:
        self._selected = []

    def compare(self) -> list[ComparisonRow]:
        return compare(self._selected)
