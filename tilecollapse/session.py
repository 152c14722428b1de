"""One generation session: tilemap in, solved cell grid and tilemap out.

WFCSession wires the pipeline stages together and keeps their results:

    TilemapReader -> PatternCatalog -> CoreSolver -> assemble_tiles

It also carries the interactive operations an editor needs between solves
(single steps, manual collapse and reset of a cell, save and restore).

Usage:
    config = GeneratorConfig(output_size=(24, 16), pattern_size=(2, 2), seed=7)
    session = WFCSession.from_rows(config, sample_rows)
    session.solve()
    tilemap = session.make_tilemap()  # tilemap[x, y] is an asset or None
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

import numpy as np

from tilecollapse.config import RNG_DOMAIN_SOLVER, GeneratorConfig
from tilecollapse.patterns.catalog import PatternCatalog
from tilecollapse.patterns.pattern import Pattern
from tilecollapse.solver.cell import Cell
from tilecollapse.solver.core_solver import CoreSolver, SolveStatus
from tilecollapse.solver.saved_state import SavedState
from tilecollapse.tiles.assets import RenderableAsset
from tilecollapse.tiles.reader import TilemapReader, rows_to_cells
from tilecollapse.types import GridPos, GridSize, RandomSeed
from tilecollapse.util.rng import RNGProvider

logger = logging.getLogger(__name__)


class WFCSession:
    """Owns the input grid, pattern set and solver of one session.

    Stages run lazily: asking for patterns reads the input first, and the
    solving operations extract patterns first. Nothing is shared between
    sessions.
    """

    def __init__(
        self,
        config: GeneratorConfig,
        tilemap: Mapping[GridPos, RenderableAsset | None],
    ) -> None:
        self.config = config
        self._reader = TilemapReader(tilemap, config.edge_samples)
        self._rng_provider = RNGProvider(config.seed)

        self.input_grid: np.ndarray | None = None
        self.catalog: PatternCatalog | None = None
        self.patterns: list[Pattern] = []
        self.output_grid: list[list[Cell]] | None = None
        self._solver: CoreSolver | None = None

        # Set by solve_shape(); every later grid is built on the same shape
        self._shape: frozenset[GridPos] | None = None
        self._default_asset: RenderableAsset | None = None

    @classmethod
    def from_rows(
        cls,
        config: GeneratorConfig,
        rows: Sequence[Sequence[RenderableAsset | None]],
    ) -> WFCSession:
        """Create a session from nested rows, ``rows[y][x]``."""
        return cls(config, rows_to_cells(rows))

    @property
    def solver(self) -> CoreSolver | None:
        """The active solver, or None before the first solve or step."""
        return self._solver

    @property
    def status(self) -> SolveStatus | None:
        return self._solver.status if self._solver is not None else None

    @property
    def shape(self) -> frozenset[GridPos] | None:
        """Cell positions new grids are limited to, or None for the full grid."""
        return self._shape

    def reseed(self, seed: RandomSeed) -> None:
        """Restart the session's random streams from ``seed``.

        The current solver keeps drawing from its stream, which now follows
        the new seed.
        """
        self._rng_provider.reset(seed)
        logger.info(f"Reseeded session with {seed!r}")

    # -------------------------------------------------------------------------
    # Pipeline stages
    # -------------------------------------------------------------------------

    def read_input(self) -> np.ndarray:
        """Read the tilemap into a Tile grid indexed ``[x, y]``."""
        self.input_grid = self._reader.read_tilemap()
        return self.input_grid

    def create_patterns(self) -> list[Pattern]:
        """Extract the unique patterns of the input grid."""
        if self.input_grid is None:
            self.read_input()

        self.catalog = PatternCatalog(
            self.input_grid,
            self.config.pattern_size,
            overlapping=self.config.overlapping,
            wrapping=self.config.wrapping,
        )
        self.patterns = self.catalog.process_grid()
        return self.patterns

    def _new_solver(self) -> CoreSolver:
        if not self.patterns:
            self.create_patterns()

        solver = CoreSolver(
            self.config.output_size,
            self.patterns,
            rng=self._rng_provider.get(RNG_DOMAIN_SOLVER),
            retry_policy=self.config.retry_policy,
            propagation=self.config.propagation,
            wrap_edges=self.config.wrap_edges,
        )
        if self._shape is not None:
            solver.prepare_shape(
                self._shape, self._default_asset, self.config.edge_samples
            )
        self._solver = solver
        return solver

    def _require_solver(self) -> CoreSolver:
        if self._solver is None:
            return self._new_solver()
        return self._solver

    # -------------------------------------------------------------------------
    # Solving
    # -------------------------------------------------------------------------

    def solve(self, saved_state: SavedState | None = None) -> list[list[Cell]]:
        """Solve a fresh grid, optionally seeded from a snapshot.

        After solve_shape() the fresh grid is built on the same shape until
        clear_shape() is called.
        """
        solver = self._new_solver()
        self.output_grid = solver.solve(self.config.max_iterations, saved_state)
        return self.output_grid

    def solve_shape(
        self, shape: Iterable[GridPos], default_asset: RenderableAsset
    ) -> list[list[Cell]]:
        """Solve only the cells in ``shape``, filling the rest with ``default_asset``.

        The shape and filler are remembered, so snapshots saved from this grid
        can be loaded or solved from later in the session.
        """
        shape = frozenset(shape)
        self.clear_shape()
        solver = self._new_solver()
        solver.prepare_shape(shape, default_asset, self.config.edge_samples)
        self._shape = shape
        self._default_asset = default_asset

        self.output_grid = solver.solve(self.config.max_iterations)
        return self.output_grid

    def clear_shape(self) -> None:
        """Go back to solving the full ``output_size`` grid."""
        self._shape = None
        self._default_asset = None

    def step(self) -> list[list[Cell]]:
        """Advance the current grid by one collapse, starting one if needed."""
        self.output_grid = self._require_solver().step()
        return self.output_grid

    def reset_steps(self) -> None:
        """Drop the current grid so the next step starts from scratch."""
        self._solver = None
        self.output_grid = None

    # -------------------------------------------------------------------------
    # Manual editing
    # -------------------------------------------------------------------------

    def collapse_cell(self, position: GridPos, pattern_index: int) -> Cell:
        """Collapse one cell to its candidate at ``pattern_index`` and propagate."""
        solver = self._require_solver()
        cell = solver.collapse_cell(position, pattern_index)
        self.output_grid = solver.grid
        return cell

    def reset_cell(self, position: GridPos) -> Cell:
        """Make one cell undetermined again. Neighbours are left as they are."""
        solver = self._require_solver()
        cell = solver.cell_at(position)
        solver.reset_cell(cell)
        self.output_grid = solver.grid
        return cell

    def save_state(self) -> SavedState:
        """Snapshot the current grid."""
        return SavedState.from_cells(self._require_solver().cells)

    def load_state(self, saved_state: SavedState) -> list[list[Cell]]:
        """Start a fresh grid and replay a snapshot onto it without solving.

        Snapshots of a shape-constrained grid need the session's shape to
        still be set, since the fresh grid must hold the same filler cells.
        """
        solver = self._new_solver()
        solver.process_saved_state(saved_state)
        self.output_grid = solver.grid
        return self.output_grid

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def make_tilemap(self) -> np.ndarray:
        """Expand the current cell grid into an asset grid indexed ``[x, y]``."""
        solver = self._require_solver()
        return assemble_tiles(solver.grid, solver.pattern_size)


def assemble_tiles(grid: list[list[Cell]], pattern_size: GridSize) -> np.ndarray:
    """Expand a cell grid into the assets of its patterns.

    Cell ``(cx, cy)`` writes tile ``(px, py)`` of its pattern at
    ``(cx * pattern_width + px, cy * pattern_height + py)``. Undetermined
    cells, and the part of a block a smaller filler pattern does not cover,
    stay None.

    Args:
        grid: Cells as ``grid[x][y]``.
        pattern_size: Block stride in tiles.

    Returns:
        Object array of assets with shape ``(width * pw, height * ph)``.
    """
    pattern_width, pattern_height = pattern_size
    width = len(grid)
    height = len(grid[0]) if grid else 0

    tilemap = np.full((width * pattern_width, height * pattern_height), None)
    for cx, column in enumerate(grid):
        for cy, cell in enumerate(column):
            if cell.pattern is None:
                continue
            tiles = cell.pattern.tiles
            for px in range(tiles.shape[0]):
                for py in range(tiles.shape[1]):
                    tilemap[cx * pattern_width + px, cy * pattern_height + py] = (
                        tiles[px, py].asset
                    )

    logger.debug(f"Assembled {tilemap.shape[0]}x{tilemap.shape[1]} tilemap")
    return tilemap
