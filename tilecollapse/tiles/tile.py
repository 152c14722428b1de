from __future__ import annotations

from dataclasses import dataclass

from tilecollapse.config import DEFAULT_EDGE_SAMPLES
from tilecollapse.tiles.assets import RenderableAsset
from tilecollapse.tiles.signature import EdgeSignature


@dataclass(frozen=True, eq=False, slots=True)
class Tile:
    """One input tile: an asset, its per-read index and its edge fingerprint.

    Tiles compare by identity. Two tiles created from the same asset during
    one read share ``index`` and ``signature`` but are distinct objects.

    Attributes:
        asset: The wrapped asset, used when rendering or assembling output.
        index: Integer assigned per unique asset in first-encounter order.
        signature: Edge fingerprint of the asset's pixels.
    """

    asset: RenderableAsset
    index: int
    signature: EdgeSignature

    @classmethod
    def from_asset(
        cls, asset: RenderableAsset, index: int, samples: int = DEFAULT_EDGE_SAMPLES
    ) -> Tile:
        """Create a tile, fingerprinting the asset's own pixel region."""
        return cls(asset, index, fingerprint(asset, samples))

    def __str__(self) -> str:
        return str(self.index)


def fingerprint(
    asset: RenderableAsset, samples: int = DEFAULT_EDGE_SAMPLES
) -> EdgeSignature:
    """Compute the edge signature of an asset's pixels."""
    return EdgeSignature.from_pixels(asset.get_pixel_block(asset.pixel_rect), samples)
