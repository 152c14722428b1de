"""Input side of the pipeline: assets, edge fingerprints and tile grids."""

from .assets import ArrayAsset, ImageAsset, RenderableAsset, slice_tilesheet
from .reader import TilemapReader
from .signature import EdgeSignature
from .tile import Tile, fingerprint

__all__ = [
    "ArrayAsset",
    "EdgeSignature",
    "ImageAsset",
    "RenderableAsset",
    "Tile",
    "TilemapReader",
    "fingerprint",
    "slice_tilesheet",
]
