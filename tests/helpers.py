from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from tilecollapse.patterns.pattern import Pattern
from tilecollapse.solver.core_solver import (
    DIR_OFFSETS,
    DIRECTIONS,
    OPPOSITE_DIR,
    CoreSolver,
)
from tilecollapse.tiles.assets import ArrayAsset
from tilecollapse.tiles.tile import Tile

# Value of the corner and interior pixels of edge_tile() assets. Every edge
# sample run starts and ends on a corner, so keeping corners neutral makes
# each side's fingerprint depend on its own edge value only.
NEUTRAL = 0


def solid_tile(value: int, size: int = 3, name: str = "") -> ArrayAsset:
    """A grayscale tile filled with one value. Compatible only with itself."""
    return ArrayAsset(np.full((size, size), value, dtype=np.uint8), name=name)


def edge_tile(
    top: int, right: int, bottom: int, left: int, name: str = ""
) -> ArrayAsset:
    """A 3x3 grayscale tile whose edge midpoints carry the given values."""
    pixels = np.full((3, 3), NEUTRAL, dtype=np.uint8)
    pixels[0, 1] = top
    pixels[1, 2] = right
    pixels[2, 1] = bottom
    pixels[1, 0] = left
    return ArrayAsset(pixels, name=name)


def column_tiles() -> tuple[ArrayAsset, ArrayAsset]:
    """Two tiles that stack only with themselves but sit side by side freely.

    Any output built from them is a set of uniform columns, so a solve never
    hits a contradiction.
    """
    return (
        edge_tile(top=10, right=50, bottom=10, left=50, name="P"),
        edge_tile(top=20, right=50, bottom=20, left=50, name="Q"),
    )


def clashing_tiles() -> tuple[ArrayAsset, ArrayAsset]:
    """Two tiles that match neither themselves nor each other on any side."""
    return (
        edge_tile(top=1, right=2, bottom=3, left=4, name="X"),
        edge_tile(top=5, right=6, bottom=7, left=8, name="Y"),
    )


def make_patterns(assets: Sequence[ArrayAsset]) -> list[Pattern]:
    """Wrap each asset in its own 1x1 pattern, ids in order."""
    return [
        Pattern.single(Tile.from_asset(asset, i), i) for i, asset in enumerate(assets)
    ]


def checkerboard(a: object, b: object, width: int, height: int) -> list[list[object]]:
    """Nested rows alternating ``a`` and ``b``."""
    return [[a if (x + y) % 2 == 0 else b for x in range(width)] for y in range(height)]


def pattern_ids(solver: CoreSolver) -> list[int | None]:
    """Collapsed pattern id of every cell in row-major order."""
    return [
        cell.pattern.id if cell.pattern is not None else None for cell in solver.cells
    ]


def mismatched_edges(solver: CoreSolver) -> list[tuple[tuple[int, int], str]]:
    """Collapsed neighbour pairs whose touching edges differ.

    Returns (position, direction) for every violation. Neighbours wrap around
    the grid edges.
    """
    width, height = solver.size
    violations = []
    for cell in solver.cells:
        if cell.pattern is None:
            continue
        x, y = cell.position
        for direction in DIRECTIONS:
            dx, dy = DIR_OFFSETS[direction]
            other = solver.cell_at(((x + dx) % width, (y + dy) % height))
            if other.pattern is None:
                continue
            mine = cell.pattern.signature.facing(direction)
            theirs = other.pattern.signature.facing(OPPOSITE_DIR[direction])
            if mine != theirs:
                violations.append((cell.position, direction))
    return violations
