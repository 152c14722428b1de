"""Pattern extraction: the solver's alphabet of tile blocks."""

from .catalog import PatternCatalog
from .pattern import Pattern

__all__ = [
    "Pattern",
    "PatternCatalog",
]
