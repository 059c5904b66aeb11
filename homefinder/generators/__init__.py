"""Sample listing generators."""

from homefinder.generators.property import PropertyGenerator

__all__ = ["PropertyGenerator"]
