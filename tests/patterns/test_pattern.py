"""Tests for the Pattern value type."""

from __future__ import annotations

import numpy as np
import pytest

from tests.helpers import edge_tile, solid_tile
from tilecollapse.errors import ArgumentRangeError
from tilecollapse.patterns.pattern import Pattern
from tilecollapse.tiles.signature import EdgeSignature
from tilecollapse.tiles.tile import Tile


def _block(*columns: list[Tile]) -> np.ndarray:
    block = np.empty((len(columns), len(columns[0])), dtype=object)
    for x, column in enumerate(columns):
        for y, tile in enumerate(column):
            block[x, y] = tile
    return block


class TestPattern:
    def test_size_is_width_by_height(self) -> None:
        tile = Tile.from_asset(solid_tile(1), 0)
        pattern = Pattern(0, _block([tile, tile, tile], [tile, tile, tile]))
        assert pattern.size == (2, 3)

    def test_tiles_are_read_only_copy(self) -> None:
        tile = Tile.from_asset(solid_tile(1), 0)
        other = Tile.from_asset(solid_tile(2), 1)
        source = _block([tile])
        pattern = Pattern(0, source)

        source[0, 0] = other
        assert pattern.tiles[0, 0] is tile
        with pytest.raises(ValueError):
            pattern.tiles[0, 0] = other

    def test_equality_ignores_id_and_interior(self) -> None:
        """Patterns are equal when their edge signatures are equal."""
        plain = solid_tile(1)
        busy = solid_tile(1, size=5)
        busy.pixels[2, 2] = 200

        first = Pattern.single(Tile.from_asset(plain, 0), 0)
        second = Pattern.single(Tile.from_asset(busy, 1), 7)

        assert first == second
        assert hash(first) == hash(second)
        assert len({first, second}) == 1

    def test_different_edges_are_not_equal(self) -> None:
        first = Pattern.single(Tile.from_asset(edge_tile(1, 2, 3, 4), 0), 0)
        second = Pattern.single(Tile.from_asset(edge_tile(1, 2, 3, 5), 1), 1)
        assert first != second

    def test_single_wraps_one_tile(self) -> None:
        tile = Tile.from_asset(solid_tile(1), 0)
        pattern = Pattern.single(tile, -2)

        assert pattern.id == -2
        assert pattern.size == (1, 1)
        assert pattern.tiles[0, 0] is tile
        assert str(pattern) == "-2"

    def test_given_signature_is_kept(self) -> None:
        """A signature computed by the caller is not recomputed."""
        tile = Tile.from_asset(edge_tile(1, 2, 3, 4), 0)
        block = _block([tile])
        signature = EdgeSignature.composite(block)

        assert Pattern(0, block, signature).signature is signature
        assert Pattern(0, block).signature == signature

    def test_empty_block_raises(self) -> None:
        with pytest.raises(ArgumentRangeError):
            Pattern(0, np.empty((0, 2), dtype=object))

    def test_non_2d_block_raises(self) -> None:
        with pytest.raises(ArgumentRangeError):
            Pattern(0, np.empty((2,), dtype=object))
