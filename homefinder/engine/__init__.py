"""Filtering, sorting and comparison engines."""

from homefinder.engine.comparison import (
    ComparisonCell,
    ComparisonRow,
    ComparisonSelection,
    best_value,
    compare,
)
from homefinder.engine.filtering import FilterEngine, build_predicates, matches
from homefinder.engine.sorting import SortEngine, SortKey, parse_sort_key, sort_properties

__all__ = [
    "ComparisonCell",
    "ComparisonRow",
    "ComparisonSelection",
    "FilterEngine",
    "SortEngine",
    "SortKey",
    "best_value",
    "build_predicates",
    "compare",
    "matches",
    "parse_sort_key",
    "sort_properties",
]
