"""HomeFinder: property search, filtering, favorites and comparison core."""

__version__ = "0.1.0"
