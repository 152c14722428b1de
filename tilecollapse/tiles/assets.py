"""Pixel sources that tiles fingerprint their edges from.

A tile never needs to know what kind of asset it wraps. It only asks for a
block of pixels through the ``RenderableAsset`` capability:

- ArrayAsset: pixels already held in a numpy array
- ImageAsset: a rectangle of a Pillow image, e.g. one sprite of a tilesheet

Assets are compared by identity. Two grid cells that should count as the same
tile must reference the same asset object.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import numpy as np
from PIL import Image as PILImage

from tilecollapse.errors import ArgumentRangeError
from tilecollapse.types import GridSize, PixelRect, Pixels


@runtime_checkable
class RenderableAsset(Protocol):
    """Anything that can hand out a block of its pixels."""

    @property
    def pixel_rect(self) -> PixelRect:
        """The asset's own region inside its backing pixels."""
        ...

    def get_pixel_block(self, rect: PixelRect) -> Pixels:
        """Return the pixels inside ``rect`` with row 0 at the top."""
        ...


def _crop(pixels: Pixels, rect: PixelRect) -> Pixels:
    x, y, width, height = rect
    if width <= 0 or height <= 0:
        raise ArgumentRangeError(f"Pixel rect must have a positive size, got {rect}")
    if x < 0 or y < 0 or x + width > pixels.shape[1] or y + height > pixels.shape[0]:
        raise ArgumentRangeError(
            f"Pixel rect {rect} is outside the {pixels.shape[1]}x{pixels.shape[0]} "
            "source image"
        )
    return pixels[y : y + height, x : x + width]


class ArrayAsset:
    """Asset backed by an in-memory pixel array.

    Args:
        pixels: Array of shape (rows, cols) or (rows, cols, channels).
        name: Label used in reprs and logs.
    """

    def __init__(self, pixels: Pixels, name: str = "") -> None:
        pixels = np.asarray(pixels)
        if pixels.ndim not in (2, 3):
            raise ArgumentRangeError(
                f"Pixel array must be 2D or 3D, got shape {pixels.shape}"
            )
        self.pixels = pixels
        self.name = name

    @property
    def pixel_rect(self) -> PixelRect:
        return (0, 0, self.pixels.shape[1], self.pixels.shape[0])

    def get_pixel_block(self, rect: PixelRect) -> Pixels:
        return _crop(self.pixels, rect)

    def __repr__(self) -> str:
        rows, cols = self.pixels.shape[:2]
        return f"ArrayAsset(name={self.name!r}, size={cols}x{rows})"


class ImageAsset:
    """Asset backed by a rectangle of a Pillow image.

    The image is converted to RGBA once and shared by every asset cut from it,
    so slicing a large tilesheet does not copy pixel data per tile.

    Args:
        image: Source image.
        rect: The sprite's region ``(x, y, width, height)``. Defaults to the
            whole image.
        name: Label used in reprs and logs.
        pixels: Pre-converted RGBA array of ``image``. Used by
            ``slice_tilesheet`` to share one conversion between sprites.
    """

    def __init__(
        self,
        image: PILImage.Image,
        rect: PixelRect | None = None,
        name: str = "",
        *,
        pixels: Pixels | None = None,
    ) -> None:
        self.image = image
        self._pixels = (
            pixels if pixels is not None else np.asarray(image.convert("RGBA"))
        )
        self._rect = rect if rect is not None else (0, 0, image.width, image.height)
        self.name = name
        # Fail at construction rather than on first fingerprint
        _crop(self._pixels, self._rect)

    @property
    def pixel_rect(self) -> PixelRect:
        return self._rect

    def get_pixel_block(self, rect: PixelRect) -> Pixels:
        return _crop(self._pixels, rect)

    def __repr__(self) -> str:
        return f"ImageAsset(name={self.name!r}, rect={self._rect})"


def slice_tilesheet(image: PILImage.Image, tile_size: GridSize) -> list[ImageAsset]:
    """Cut a tilesheet into one ImageAsset per tile, row by row.

    Partial tiles at the right or bottom edge are ignored.

    Args:
        image: The tilesheet image.
        tile_size: ``(width, height)`` of one tile in pixels.

    Returns:
        Assets in reading order (left to right, top to bottom).
    """
    tile_width, tile_height = tile_size
    if tile_width <= 0 or tile_height <= 0:
        raise ArgumentRangeError(f"Tile size must be positive, got {tile_size}")

    pixels = np.asarray(image.convert("RGBA"))
    columns = image.width // tile_width
    rows = image.height // tile_height

    assets: list[ImageAsset] = []
    for row in range(rows):
        for column in range(columns):
            rect = (column * tile_width, row * tile_height, tile_width, tile_height)
            assets.append(
                ImageAsset(image, rect, name=f"{column},{row}", pixels=pixels)
            )
    return assets
