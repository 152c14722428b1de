"""Pattern extraction and deduplication.

A window of ``pattern_size`` tiles slides over the input grid. With
``overlapping`` it advances one tile at a time, otherwise it tiles the grid
edge to edge. Windows that would run off the grid are dropped unless
``wrapping`` is set, in which case they wrap around to the opposite edge.
Incomplete blocks are never emitted.

Extracted blocks are deduplicated by composite edge signature. The first
block seen for a signature becomes the pattern's exemplar, and ids are handed
out 0..N-1 in extraction order (window origins x-outer, y-inner).
"""

from __future__ import annotations

import logging
from collections import deque

import numpy as np

from tilecollapse.errors import ArgumentRangeError
from tilecollapse.patterns.pattern import Pattern
from tilecollapse.tiles.signature import EdgeSignature
from tilecollapse.types import GridPos, GridSize

logger = logging.getLogger(__name__)


class PatternCatalog:
    """Builds the unique pattern set of a tile grid."""

    def __init__(
        self,
        grid: np.ndarray,
        pattern_size: GridSize,
        overlapping: bool = False,
        wrapping: bool = False,
    ) -> None:
        """Initialize the catalog.

        Args:
            grid: Object array of Tile indexed ``[x, y]``, as produced by
                TilemapReader.read_tilemap().
            pattern_size: ``(width, height)`` of a pattern in tiles.
            overlapping: Step the window by one tile instead of a full pattern.
            wrapping: Let windows wrap around the grid edges.

        Raises:
            ArgumentRangeError: If the grid is empty or the pattern size is
                not positive.
        """
        if grid.ndim != 2 or grid.size == 0:
            raise ArgumentRangeError(f"Tile grid must be non-empty 2D, got {grid.shape}")
        if pattern_size[0] <= 0 or pattern_size[1] <= 0:
            raise ArgumentRangeError(
                f"Pattern size must be positive on both axes, got {pattern_size}"
            )

        self._grid = grid
        self._grid_size: GridSize = (grid.shape[0], grid.shape[1])
        self._pattern_size = pattern_size
        self._is_overlapping = overlapping
        self._is_wrapping = wrapping

        self._patterns: list[Pattern] = []
        self._pattern_grid = np.zeros((0, 0), dtype=np.int32)

    @property
    def patterns(self) -> list[Pattern]:
        """Unique patterns from the last process_grid() call."""
        return list(self._patterns)

    @property
    def pattern_grid_size(self) -> GridSize:
        """Number of extraction positions along each axis."""
        width, height = self._pattern_grid.shape
        return (width, height)

    @property
    def pattern_grid(self) -> np.ndarray:
        """Pattern id found at each extraction position, indexed ``[x, y]``."""
        return self._pattern_grid

    def process_grid(self) -> list[Pattern]:
        """Extract and deduplicate the patterns of the grid.

        Returns:
            Unique patterns ordered by id.
        """
        blocks = self._get_blocks()
        self._patterns = self._make_indices(blocks)

        logger.info(
            f"Extracted {len(self._patterns)} unique patterns of size "
            f"{self._pattern_size[0]}x{self._pattern_size[1]} from "
            f"{self._pattern_grid.size} positions"
        )
        return list(self._patterns)

    # -------------------------------------------------------------------------
    # Extraction
    # -------------------------------------------------------------------------

    def _origins(self, axis: int) -> list[int]:
        """Window origins along one axis that yield a complete block."""
        length = self._grid_size[axis]
        size = self._pattern_size[axis]
        step = 1 if self._is_overlapping else size
        return [
            origin
            for origin in range(0, length, step)
            if self._is_wrapping or origin + size <= length
        ]

    def _get_blocks(self) -> deque[tuple[GridPos, np.ndarray, EdgeSignature]]:
        blocks: deque[tuple[GridPos, np.ndarray, EdgeSignature]] = deque()
        for x in self._origins(0):
            for y in self._origins(1):
                block = self._block_at((x, y))
                if block is None:
                    continue
                blocks.append(((x, y), block, EdgeSignature.composite(block)))
        return blocks

    def _block_at(self, origin: GridPos) -> np.ndarray | None:
        """Return the block whose top-left tile is ``origin``.

        Returns None if the block runs off the grid and wrapping is disabled.
        """
        width, height = self._grid_size
        x_indices = np.arange(origin[0], origin[0] + self._pattern_size[0])
        y_indices = np.arange(origin[1], origin[1] + self._pattern_size[1])

        if self._is_wrapping:
            x_indices %= width
            y_indices %= height
        elif x_indices[-1] >= width or y_indices[-1] >= height:
            return None

        return self._grid[np.ix_(x_indices, y_indices)]

    def _make_indices(
        self, blocks: deque[tuple[GridPos, np.ndarray, EdgeSignature]]
    ) -> list[Pattern]:
        """Keep the first block per signature and number the survivors."""
        x_origins = self._origins(0)
        y_origins = self._origins(1)
        column = {x: i for i, x in enumerate(x_origins)}
        row = {y: j for j, y in enumerate(y_origins)}
        pattern_grid = np.full((len(x_origins), len(y_origins)), -1, dtype=np.int32)

        unique: dict[EdgeSignature, Pattern] = {}
        while blocks:
            (x, y), block, signature = blocks.popleft()
            pattern = unique.get(signature)
            if pattern is None:
                pattern = Pattern(len(unique), block, signature)
                unique[signature] = pattern
            pattern_grid[column[x], row[y]] = pattern.id

        self._pattern_grid = pattern_grid
        return list(unique.values())
