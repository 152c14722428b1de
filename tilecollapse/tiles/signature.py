"""Edge fingerprints used to decide which tiles and patterns may touch.

An EdgeSignature holds one integer per side (top, right, bottom, left). Two
neighbours are compatible along a shared edge iff the touching components
are equal.

Fingerprints are built on two levels:

1. Tiles sample a few evenly spaced pixels along each edge of their image and
   hash the sampled values. Visually identical edges collide on purpose, and
   a tile's interior pixels never affect compatibility.
2. Patterns join the signatures of the tiles lying on each of their sides, in
   position order, and hash the joined strings.

Hashes are crc32, so they are stable across interpreter sessions. They are
not collision free; a collision simply counts as "compatible".
"""

from __future__ import annotations

import zlib
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from tilecollapse.config import (
    COMPOSITE_SEPARATOR,
    DEFAULT_EDGE_SAMPLES,
    MIN_EDGE_SAMPLES,
)
from tilecollapse.errors import ArgumentRangeError
from tilecollapse.types import Pixels

if TYPE_CHECKING:
    from tilecollapse.tiles.tile import Tile

# Signature component facing each direction ("N" is up, toward y - 1).
SIDE_FOR_DIRECTION = {"N": "top", "E": "right", "S": "bottom", "W": "left"}


def hash_edge(text: str) -> int:
    """Hash one edge string to an unsigned 32-bit int."""
    return zlib.crc32(text.encode("utf-8"))


def _format_pixels(samples: np.ndarray) -> str:
    """Render sampled pixels as ``(c0,c1,..)(c0,c1,..)`` for hashing."""
    return "".join(
        "(" + ",".join(str(v) for v in np.atleast_1d(pixel).tolist()) + ")"
        for pixel in samples
    )


@dataclass(frozen=True, slots=True)
class EdgeSignature:
    """Four-sided edge fingerprint of a tile or pattern."""

    top: int
    right: int
    bottom: int
    left: int

    @classmethod
    def from_strings(
        cls, top: str, right: str, bottom: str, left: str
    ) -> EdgeSignature:
        """Hash four pre-built edge strings."""
        return cls(hash_edge(top), hash_edge(right), hash_edge(bottom), hash_edge(left))

    @classmethod
    def from_pixels(
        cls, pixels: Pixels, samples: int = DEFAULT_EDGE_SAMPLES
    ) -> EdgeSignature:
        """Fingerprint an image by sampling pixels along its four edges.

        Samples are spaced ``(dimension - 1) // (samples - 1)`` pixels apart,
        starting at the top-left corner of each edge. Along top and bottom the
        samples run left to right, along left and right they run top to bottom.

        Args:
            pixels: Array of shape (rows, cols) or (rows, cols, channels),
                row 0 at the top.
            samples: Pixels sampled per edge. Must be at least 2.

        Raises:
            ArgumentRangeError: If ``samples`` is below 2 or the image is empty.
        """
        if samples < MIN_EDGE_SAMPLES:
            raise ArgumentRangeError(
                f"Edge sampling needs at least {MIN_EDGE_SAMPLES} samples, got {samples}"
            )

        pixels = np.asarray(pixels)
        if pixels.ndim < 2 or pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise ArgumentRangeError(
                f"Cannot fingerprint an empty image of shape {pixels.shape}"
            )

        rows, cols = pixels.shape[:2]
        x_samples = np.arange(samples) * ((cols - 1) // (samples - 1))
        y_samples = np.arange(samples) * ((rows - 1) // (samples - 1))

        return cls.from_strings(
            top=_format_pixels(pixels[0, x_samples]),
            right=_format_pixels(pixels[y_samples, cols - 1]),
            bottom=_format_pixels(pixels[rows - 1, x_samples]),
            left=_format_pixels(pixels[y_samples, 0]),
        )

    @classmethod
    def composite(cls, tiles: np.ndarray) -> EdgeSignature:
        """Combine the signatures of the edge tiles of a block.

        Args:
            tiles: Object array of Tile indexed ``[x, y]``.
        """

        def join(edge_tiles: Iterable[Tile], side: str) -> str:
            return COMPOSITE_SEPARATOR.join(
                str(getattr(tile.signature, side)) for tile in edge_tiles
            )

        return cls.from_strings(
            top=join(tiles[:, 0], "top"),
            right=join(tiles[-1, :], "right"),
            bottom=join(tiles[:, -1], "bottom"),
            left=join(tiles[0, :], "left"),
        )

    def facing(self, direction: str) -> int:
        """Return the component on the side pointing in ``direction``."""
        return getattr(self, SIDE_FOR_DIRECTION[direction])
