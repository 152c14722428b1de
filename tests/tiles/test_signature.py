"""Tests for edge fingerprinting of tiles and tile blocks."""

from __future__ import annotations

import zlib

import numpy as np
import pytest

from tests.helpers import edge_tile, solid_tile
from tilecollapse.errors import ArgumentRangeError
from tilecollapse.tiles.signature import EdgeSignature, hash_edge
from tilecollapse.tiles.tile import Tile


class TestHashEdge:
    def test_hash_is_crc32_of_utf8(self) -> None:
        """Hashes do not depend on per-process string hash salting."""
        assert hash_edge("(1,2,3)") == zlib.crc32(b"(1,2,3)")

    def test_equal_strings_hash_equal(self) -> None:
        assert hash_edge("abc") == hash_edge("abc")
        assert hash_edge("abc") != hash_edge("abd")


class TestFromPixels:
    """Tests for sampling pixels along the four edges of an image."""

    def test_solid_image_has_four_equal_sides(self) -> None:
        signature = EdgeSignature.from_pixels(np.full((4, 4, 4), 7, dtype=np.uint8))
        assert signature.top == signature.right == signature.bottom == signature.left

    def test_sides_follow_image_rows_and_columns(self) -> None:
        """Top is row 0, bottom the last row, left column 0, right the last column."""
        pixels = np.zeros((5, 5), dtype=np.uint8)
        pixels[0, :] = 1
        pixels[-1, :] = 2
        signature = EdgeSignature.from_pixels(pixels)

        assert signature.top == hash_edge("(1)(1)(1)")
        assert signature.bottom == hash_edge("(2)(2)(2)")
        assert signature.left == hash_edge("(1)(0)(2)")
        assert signature.right == signature.left

    def test_multichannel_pixels_render_every_channel(self) -> None:
        pixels = np.zeros((3, 3, 3), dtype=np.uint8)
        pixels[0, :] = (255, 0, 10)
        signature = EdgeSignature.from_pixels(pixels, samples=2)
        assert signature.top == hash_edge("(255,0,10)(255,0,10)")

    def test_interior_pixels_do_not_matter(self) -> None:
        plain = np.zeros((5, 5), dtype=np.uint8)
        busy = plain.copy()
        busy[1:4, 1:4] = 99

        assert EdgeSignature.from_pixels(plain) == EdgeSignature.from_pixels(busy)

    def test_unsampled_edge_pixels_do_not_matter(self) -> None:
        """With 3 samples on a 5 pixel edge only columns 0, 2 and 4 are read."""
        plain = np.zeros((5, 5), dtype=np.uint8)
        unsampled = plain.copy()
        unsampled[0, 1] = 50
        sampled = plain.copy()
        sampled[0, 2] = 50

        base = EdgeSignature.from_pixels(plain)
        assert EdgeSignature.from_pixels(unsampled) == base
        assert EdgeSignature.from_pixels(sampled).top != base.top

    def test_more_samples_see_more_pixels(self) -> None:
        pixels = np.zeros((5, 5), dtype=np.uint8)
        pixels[0, 1] = 50

        three = EdgeSignature.from_pixels(pixels, samples=3)
        five = EdgeSignature.from_pixels(pixels, samples=5)
        assert three.top == three.bottom
        assert five.top != five.bottom

    def test_too_few_samples_raises(self) -> None:
        with pytest.raises(ArgumentRangeError):
            EdgeSignature.from_pixels(np.zeros((3, 3)), samples=1)

    def test_empty_image_raises(self) -> None:
        with pytest.raises(ArgumentRangeError):
            EdgeSignature.from_pixels(np.zeros((0, 3)))


class TestComposite:
    """Tests for combining tile signatures into a block signature."""

    def test_sides_join_edge_tiles_in_order(self) -> None:
        a = Tile.from_asset(edge_tile(1, 2, 3, 4), 0)
        b = Tile.from_asset(edge_tile(5, 6, 7, 8), 1)
        c = Tile.from_asset(edge_tile(9, 10, 11, 12), 2)
        d = Tile.from_asset(edge_tile(13, 14, 15, 16), 3)

        # Block indexed [x, y]: a b on the top row, c d on the bottom row
        block = np.empty((2, 2), dtype=object)
        block[0, 0], block[1, 0], block[0, 1], block[1, 1] = a, b, c, d
        signature = EdgeSignature.composite(block)

        assert signature.top == hash_edge(f"{a.signature.top}:{b.signature.top}")
        assert signature.bottom == hash_edge(
            f"{c.signature.bottom}:{d.signature.bottom}"
        )
        assert signature.left == hash_edge(f"{a.signature.left}:{c.signature.left}")
        assert signature.right == hash_edge(
            f"{b.signature.right}:{d.signature.right}"
        )

    def test_single_tile_block_rehashes_tile_sides(self) -> None:
        tile = Tile.from_asset(solid_tile(3), 0)
        block = np.empty((1, 1), dtype=object)
        block[0, 0] = tile

        signature = EdgeSignature.composite(block)
        assert signature.top == hash_edge(str(tile.signature.top))


class TestFacing:
    def test_facing_maps_directions_to_sides(self) -> None:
        signature = EdgeSignature(top=1, right=2, bottom=3, left=4)
        assert signature.facing("N") == 1
        assert signature.facing("E") == 2
        assert signature.facing("S") == 3
        assert signature.facing("W") == 4
