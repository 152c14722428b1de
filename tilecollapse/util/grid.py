"""Addressing helpers shared by the solver and presentation code.

Grids are stored flat in row-major order, so a cell at ``(x, y)`` lives at
linear index ``x + y * width``.
"""

from __future__ import annotations

from tilecollapse.types import CellIndex, GridPos, GridSize


def position_to_index(position: GridPos, size: GridSize) -> CellIndex:
    """Convert an ``(x, y)`` position to its linear index."""
    x, y = position
    return x + y * size[0]


def index_to_position(index: CellIndex, size: GridSize) -> GridPos:
    """Convert a linear index back to its ``(x, y)`` position."""
    return (index % size[0], index // size[0])


def is_valid_position(position: GridPos, size: GridSize) -> bool:
    """Check if a position is within ``[0, width) x [0, height)``."""
    x, y = position
    return 0 <= x < size[0] and 0 <= y < size[1]


def wrap_position(position: GridPos, size: GridSize) -> GridPos:
    """Wrap an off-grid position around the grid edges (toroidal topology).

    Positions already inside the grid are returned unchanged. The result is
    always non-negative, even for offsets larger than the grid.
    """
    if is_valid_position(position, size):
        return position
    x, y = position
    return (x % size[0], y % size[1])
