"""Conversion of a host tilemap region into a dense grid of Tiles.

The host side is reduced to a mapping from ``(x, y)`` positions to assets,
where empty cells are either missing or ``None``. Coordinates may be negative;
the resulting grid is re-based on the occupied bounding box.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Mapping, Sequence

import numpy as np

from tilecollapse.config import DEFAULT_EDGE_SAMPLES
from tilecollapse.errors import EmptyInputError, MalformedInputError
from tilecollapse.tiles.assets import RenderableAsset
from tilecollapse.tiles.signature import EdgeSignature
from tilecollapse.tiles.tile import Tile, fingerprint
from tilecollapse.types import GridPos, GridSize

logger = logging.getLogger(__name__)


class TilemapReader:
    """Reads a host tilemap region into a ``Tile`` array indexed ``[x, y]``.

    Usage:
        reader = TilemapReader.from_rows(
            [
                [grass, grass, water],
                [grass, water, water],
            ]
        )
        grid = reader.read_tilemap()  # shape (3, 2)
    """

    def __init__(
        self,
        cells: Mapping[GridPos, RenderableAsset | None],
        samples: int = DEFAULT_EDGE_SAMPLES,
    ) -> None:
        """Initialize the reader.

        Args:
            cells: Host tilemap contents. Missing or ``None`` entries are empty.
            samples: Pixels sampled per tile edge for fingerprinting.
        """
        self._cells = cells
        self._samples = samples

        self._tiles: deque[tuple[GridPos, RenderableAsset]] = deque()
        self._indices: dict[RenderableAsset, int] = {}
        self._origin: GridPos = (0, 0)
        self._size: GridSize = (0, 0)
        self._grid: np.ndarray | None = None

    @classmethod
    def from_rows(
        cls,
        rows: Sequence[Sequence[RenderableAsset | None]],
        samples: int = DEFAULT_EDGE_SAMPLES,
    ) -> TilemapReader:
        """Create a reader from nested rows, ``rows[y][x]``, y downward."""
        return cls(rows_to_cells(rows), samples)

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    @property
    def grid(self) -> np.ndarray | None:
        """The last grid produced by read_tilemap(), or None."""
        return self._grid

    @property
    def size(self) -> GridSize:
        """``(width, height)`` of the occupied region."""
        return self._size

    @property
    def origin(self) -> GridPos:
        """Host coordinates of the occupied region's minimum corner."""
        return self._origin

    @property
    def assets(self) -> list[RenderableAsset]:
        """Unique assets, positioned by their tile index."""
        return list(self._indices)

    def read_tilemap(self) -> np.ndarray:
        """Scan the host region and build the tile grid.

        Returns:
            Object array of Tile with shape ``(width, height)`` in the bounding
            box's local coordinates.

        Raises:
            EmptyInputError: If the region holds no tiles.
            MalformedInputError: If the occupied cells do not fill their
                bounding box exactly.
        """
        self._read_input()
        self._verify_input()
        self._make_indices()
        self._make_grid()

        logger.info(
            f"Read {self._size[0]}x{self._size[1]} tilemap with "
            f"{len(self._indices)} unique tiles"
        )
        return self._grid

    # -------------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------------

    def _read_input(self) -> None:
        """Queue the non-empty cells in row-major order."""
        occupied = [
            (pos, asset) for pos, asset in self._cells.items() if asset is not None
        ]
        occupied.sort(key=lambda item: (item[0][1], item[0][0]))
        self._tiles = deque(occupied)

    def _verify_input(self) -> None:
        if not self._tiles:
            raise EmptyInputError("No tiles found in input tilemap")

        xs = [pos[0] for pos, _ in self._tiles]
        ys = [pos[1] for pos, _ in self._tiles]
        min_x, min_y = min(xs), min(ys)
        width = max(xs) - min_x + 1
        height = max(ys) - min_y + 1

        expected_count = width * height
        if len(self._tiles) != expected_count:
            raise MalformedInputError(
                "The input tilemap must be a rectangle without holes or outliers. "
                f"Expected {expected_count} tiles, but found {len(self._tiles)}"
            )

        self._origin = (min_x, min_y)
        self._size = (width, height)

    def _make_indices(self) -> None:
        """Give each distinct asset an index in first-encounter order."""
        self._indices = {}
        for _, asset in self._tiles:
            if asset not in self._indices:
                self._indices[asset] = len(self._indices)

    def _make_grid(self) -> None:
        signatures: dict[RenderableAsset, EdgeSignature] = {
            asset: fingerprint(asset, self._samples) for asset in self._indices
        }

        origin_x, origin_y = self._origin
        grid = np.empty(self._size, dtype=object)
        while self._tiles:
            (x, y), asset = self._tiles.popleft()
            grid[x - origin_x, y - origin_y] = Tile(
                asset, self._indices[asset], signatures[asset]
            )

        self._grid = grid


def rows_to_cells(
    rows: Sequence[Sequence[RenderableAsset | None]],
) -> dict[GridPos, RenderableAsset]:
    """Convert nested rows, ``rows[y][x]``, into a position mapping."""
    return {
        (x, y): asset
        for y, row in enumerate(rows)
        for x, asset in enumerate(row)
        if asset is not None
    }
