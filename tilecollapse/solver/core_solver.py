"""Wave Function Collapse solver over edge-fingerprinted patterns.

The solver owns a grid of cells that all start with the full pattern set as
candidates, and repeats three steps until every cell is collapsed:

1. Select the undetermined cell with the fewest candidates (lowest entropy),
   breaking ties uniformly at random
2. Collapse it to one of its candidates
3. Propagate: remove candidates from its four neighbours whose facing edge
   signature differs from the collapsed pattern's

Usage:
    solver = CoreSolver((16, 16), patterns, rng=random.Random(42))
    grid = solver.solve(max_iterations=100)  # grid[x][y] is a Cell
    if solver.status is SolveStatus.EXHAUSTED:
        ...  # some cells are still undetermined

Propagation reaches only the immediate neighbours by default. Cells beyond
them are not re-examined, so a contradiction may only surface later as a cell
with no candidates. PropagationMode.FULL keeps propagating from every cell
whose candidate set shrank.

When no undetermined cell has candidates left, the current attempt fails with
NoCandidateError. solve() logs it and starts another attempt, either from the
grid as it is (RetryPolicy.IN_PLACE) or from a rebuilt grid
(RetryPolicy.RESET). A solve that runs out of attempts returns its best grid
and reports SolveStatus.EXHAUSTED instead of raising.

By default the grid is toroidal: neighbours across an edge wrap to the
opposite side. With wrap_edges=False they are skipped.

The solver is not thread safe. One solver instance is one editing session.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from enum import Enum, auto
from random import Random
from typing import TYPE_CHECKING

import numpy as np

from tilecollapse.config import (
    DEFAULT_EDGE_SAMPLES,
    DEFAULT_MAX_ITERATIONS,
    FILLER_PATTERN_ID,
    UNSET_PATTERN_ID,
    PropagationMode,
    RetryPolicy,
)
from tilecollapse.errors import (
    ArgumentRangeError,
    NoCandidateError,
    UnknownPatternIdError,
)
from tilecollapse.patterns.pattern import Pattern
from tilecollapse.solver.cell import Cell
from tilecollapse.tiles.assets import RenderableAsset
from tilecollapse.tiles.tile import Tile
from tilecollapse.types import GridPos, GridSize, RandomSeed
from tilecollapse.util.grid import (
    index_to_position,
    is_valid_position,
    position_to_index,
    wrap_position,
)

if TYPE_CHECKING:
    from tilecollapse.solver.saved_state import SavedState
    from tilecollapse.util.rng import RNG

logger = logging.getLogger(__name__)


# Direction utilities ("N" is up, toward y - 1)
DIRECTIONS = ["N", "E", "S", "W"]
OPPOSITE_DIR = {"N": "S", "E": "W", "S": "N", "W": "E"}
DIR_OFFSETS = {"N": (0, -1), "E": (1, 0), "S": (0, 1), "W": (-1, 0)}


class SolveStatus(Enum):
    """Grid-level state of a solver."""

    SOLVING = auto()
    SOLVED = auto()  # Every cell is collapsed
    EXHAUSTED = auto()  # Attempts ran out with cells still undetermined


class CoreSolver:
    """Owns a cell grid and collapses it against a fixed pattern set."""

    def __init__(
        self,
        output_size: GridSize,
        patterns: Sequence[Pattern],
        *,
        rng: RNG | None = None,
        retry_policy: RetryPolicy = RetryPolicy.IN_PLACE,
        propagation: PropagationMode = PropagationMode.LOCAL,
        wrap_edges: bool = True,
    ) -> None:
        """Initialize the solver with a fresh, fully undetermined grid.

        Args:
            output_size: Output size in tiles. Must be a multiple of the
                pattern size on both axes.
            patterns: The pattern catalog. All patterns must share one size.
            rng: Random source for tie breaks and collapses. Defaults to a
                new unseeded Random.
            retry_policy: What to do with the grid after a failed attempt.
            propagation: Constraint propagation reach.
            wrap_edges: Treat the grid as a torus. When False, neighbours
                across the grid edge are skipped.

        Raises:
            ArgumentRangeError: On an empty catalog, mixed pattern sizes or
                an output size that is not a multiple of the pattern size.
        """
        if not patterns:
            raise ArgumentRangeError("Cannot solve with an empty pattern set")

        pattern_size = patterns[0].size
        if any(pattern.size != pattern_size for pattern in patterns):
            raise ArgumentRangeError("All patterns must share the same size")

        output_width, output_height = output_size
        if (
            output_width <= 0
            or output_height <= 0
            or output_width % pattern_size[0]
            or output_height % pattern_size[1]
        ):
            raise ArgumentRangeError(
                f"Output size {output_size} must be a positive multiple of "
                f"pattern size {pattern_size}"
            )

        self._output_size = output_size
        self._pattern_size = pattern_size
        self._patterns = list(patterns)
        self._rng: RNG = rng if rng is not None else Random()
        self._retry_policy = retry_policy
        self._propagation = propagation
        self._wrap_edges = wrap_edges

        self._shape: frozenset[GridPos] | None = None
        self._filler: Pattern | None = None

        self._cell_grid_size: GridSize = (
            output_width // pattern_size[0],
            output_height // pattern_size[1],
        )
        self._cells = self._initialize_cells()

        self.status = SolveStatus.SOLVING
        self.contradictions = 0

    # -------------------------------------------------------------------------
    # Grid access
    # -------------------------------------------------------------------------

    @property
    def cells(self) -> list[Cell]:
        """Cells in row-major order, index ``x + y * width``."""
        return self._cells

    @property
    def grid(self) -> list[list[Cell]]:
        """Cells as columns, ``grid[x][y]``."""
        width, height = self._cell_grid_size
        return [[self._cells[x + y * width] for y in range(height)] for x in range(width)]

    @property
    def size(self) -> GridSize:
        """Size of the cell grid."""
        return self._cell_grid_size

    @property
    def pattern_size(self) -> GridSize:
        return self._pattern_size

    @property
    def patterns(self) -> list[Pattern]:
        return list(self._patterns)

    @property
    def filler(self) -> Pattern | None:
        """Filler pattern of the last shape-constrained solve, if any."""
        return self._filler

    @property
    def is_solved(self) -> bool:
        return all(cell.is_collapsed for cell in self._cells)

    @property
    def entropy_map(self) -> np.ndarray:
        """Candidate counts indexed ``[x, y]``. Collapsed cells read 0."""
        counts = np.zeros(self._cell_grid_size, dtype=np.int32)
        for cell in self._cells:
            counts[cell.position] = cell.entropy
        return counts

    def cell_at(self, position: GridPos) -> Cell:
        if not is_valid_position(position, self._cell_grid_size):
            raise ArgumentRangeError(
                f"Position {position} is outside the {self._cell_grid_size} grid"
            )
        return self._cells[position_to_index(position, self._cell_grid_size)]

    def reseed(self, seed: RandomSeed) -> None:
        """Replace the random source with a new Random seeded by ``seed``."""
        self._rng = Random(seed)

    # -------------------------------------------------------------------------
    # Solving
    # -------------------------------------------------------------------------

    def solve(
        self,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        saved_state: SavedState | None = None,
    ) -> list[list[Cell]]:
        """Collapse the whole grid.

        Args:
            max_iterations: Maximum number of attempts.
            saved_state: Snapshot to restore before solving. Its collapsed
                cells are kept and the rest is solved around them.

        Returns:
            The grid as ``grid[x][y]``. Check ``status`` to tell a solved grid
            from an exhausted one.

        Raises:
            UnknownPatternIdError: If ``saved_state`` does not match the catalog.
        """
        if saved_state is not None:
            self.process_saved_state(saved_state)
        return self._run(max_iterations, saved_state)

    def solve_shape(
        self,
        shape: Iterable[GridPos],
        default_asset: RenderableAsset,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        edge_samples: int = DEFAULT_EDGE_SAMPLES,
    ) -> list[list[Cell]]:
        """Collapse only the cells inside ``shape``.

        The grid is resized to cover the shape, ``(max x + 1, max y + 1)``.
        Cells outside the shape are collapsed to a 1x1 filler pattern made from
        ``default_asset``, and their constraints are propagated before solving,
        so the shape's border already respects the filler's edges.

        Args:
            shape: Cell positions to solve. Must be non-empty and non-negative.
            default_asset: Asset of the filler tile.
            max_iterations: Maximum number of attempts.
            edge_samples: Pixels sampled per edge when fingerprinting the filler.
        """
        self.prepare_shape(shape, default_asset, edge_samples)
        return self._run(max_iterations, None)

    def prepare_shape(
        self,
        shape: Iterable[GridPos],
        default_asset: RenderableAsset,
        edge_samples: int = DEFAULT_EDGE_SAMPLES,
    ) -> None:
        """Rebuild the grid for ``shape`` without solving it.

        Cells outside the shape hold the filler and have propagated into the
        shape. Snapshots of a shape-constrained solve replay onto this grid.

        Raises:
            ArgumentRangeError: On an empty shape or negative positions.
        """
        shape = frozenset(shape)
        if not shape:
            raise ArgumentRangeError("Shape must contain at least one position")
        if any(x < 0 or y < 0 for x, y in shape):
            raise ArgumentRangeError("Shape positions must be non-negative")

        self._shape = shape
        self._filler = Pattern.single(
            Tile.from_asset(default_asset, 0, edge_samples), FILLER_PATTERN_ID
        )
        self._cell_grid_size = (
            max(x for x, _ in shape) + 1,
            max(y for _, y in shape) + 1,
        )
        self._cells = self._initialize_shape_cells()
        self.status = SolveStatus.SOLVING

    def step(self) -> list[list[Cell]]:
        """Run one select, collapse and propagate cycle.

        A grid that is already solved is returned unchanged.

        Raises:
            NoCandidateError: If the grid is in a contradiction.
        """
        if self.is_solved:
            self.status = SolveStatus.SOLVED
            return self.grid

        cell = self.get_next_candidate()
        self.collapse(cell)
        self.collapse_neighbours(cell.position)

        if self.is_solved:
            self.status = SolveStatus.SOLVED
        return self.grid

    def _run(
        self, max_iterations: int, saved_state: SavedState | None
    ) -> list[list[Cell]]:
        if max_iterations <= 0:
            raise ArgumentRangeError(f"max_iterations must be > 0, got {max_iterations}")

        self.status = SolveStatus.SOLVING
        self.contradictions = 0

        for attempt in range(max_iterations):
            if attempt > 0 and self._retry_policy is RetryPolicy.RESET:
                self._reset_grid(saved_state)

            try:
                while not self.is_solved:
                    cell = self.get_next_candidate()
                    self.collapse(cell)
                    self.collapse_neighbours(cell.position)
            except NoCandidateError as e:
                self.contradictions += 1
                logger.warning(f"Solve attempt {attempt + 1}/{max_iterations}: {e}")
                continue

            self.status = SolveStatus.SOLVED
            logger.info(
                f"Solved {self._cell_grid_size[0]}x{self._cell_grid_size[1]} grid "
                f"in {attempt + 1} attempt(s)"
            )
            return self.grid

        self.status = SolveStatus.EXHAUSTED
        undetermined = sum(1 for cell in self._cells if not cell.is_collapsed)
        logger.warning(
            f"Solve exhausted after {max_iterations} attempts with "
            f"{undetermined} undetermined cells"
        )
        return self.grid

    # -------------------------------------------------------------------------
    # Selection, collapse, propagation
    # -------------------------------------------------------------------------

    def get_next_candidate(self) -> Cell:
        """Pick the undetermined cell with the fewest candidates.

        Ties are broken uniformly at random.

        Raises:
            NoCandidateError: If no undetermined cell has candidates left.
        """
        open_cells = [
            cell for cell in self._cells if not cell.is_collapsed and cell.candidates
        ]
        if not open_cells:
            stuck = sum(1 for cell in self._cells if not cell.is_collapsed)
            raise NoCandidateError(
                f"No candidates left for any of {stuck} undetermined cells"
            )

        lowest = min(cell.entropy for cell in open_cells)
        same = [cell for cell in open_cells if cell.entropy == lowest]
        return self._rng.choice(same)

    def collapse(self, cell: Cell, pattern_index: int | None = None) -> Cell:
        """Commit a cell to one of its candidates.

        A cell with a single candidate always takes it, whatever
        ``pattern_index`` says. Otherwise the candidate at ``pattern_index`` is
        taken, or a uniformly random one if no index is given. Collapsed cells
        are left untouched.

        Raises:
            NoCandidateError: If the cell has no candidates left.
            ArgumentRangeError: If ``pattern_index`` is out of range for a
                cell with several candidates.
        """
        if cell.is_collapsed:
            return cell

        count = len(cell.candidates)
        if count == 1:
            index = 0
        elif count == 0:
            raise NoCandidateError(f"Cell {cell.position} has no candidates left")
        elif pattern_index is None:
            index = self._rng.randrange(count)
        elif 0 <= pattern_index < count:
            index = pattern_index
        else:
            raise ArgumentRangeError(
                f"Pattern index {pattern_index} out of range for cell "
                f"{cell.position} with {count} candidates"
            )

        cell.collapse_to(cell.candidates[index])
        logger.debug(f"Collapsed {cell.position} to pattern {cell.pattern.id}")
        return cell

    def collapse_neighbours(self, position: GridPos) -> None:
        """Remove neighbour candidates incompatible with a collapsed cell."""
        cell = self.cell_at(position)
        if cell.pattern is None:
            return

        changed: list[Cell] = []
        for direction in DIRECTIONS:
            neighbour = self._neighbour(position, direction)
            if neighbour is None or neighbour.is_collapsed:
                continue
            allowed = {cell.pattern.signature.facing(direction)}
            if self._reduce_options(neighbour, allowed, direction):
                changed.append(neighbour)

        if self._propagation is PropagationMode.FULL:
            self._propagate(changed)

    def collapse_cell(self, position: GridPos, pattern_index: int) -> Cell:
        """Manually collapse a cell to a chosen candidate and propagate."""
        cell = self.collapse(self.cell_at(position), pattern_index)
        self.collapse_neighbours(position)
        return cell

    def reset_cell(self, cell: Cell) -> None:
        """Make a cell undetermined again with the full pattern catalog.

        Neighbours are not re-propagated, so they may stay narrower than the
        reset cell now allows until they are reset too or the grid is solved
        again.
        """
        cell.reset(self._patterns)
        self.status = SolveStatus.SOLVING
        logger.debug(f"Reset cell {cell.position}")

    def _neighbour(self, position: GridPos, direction: str) -> Cell | None:
        dx, dy = DIR_OFFSETS[direction]
        target = (position[0] + dx, position[1] + dy)
        if self._wrap_edges:
            target = wrap_position(target, self._cell_grid_size)
        if not is_valid_position(target, self._cell_grid_size):
            return None
        return self._cells[position_to_index(target, self._cell_grid_size)]

    def _reduce_options(
        self, neighbour: Cell, allowed: set[int], direction: str
    ) -> bool:
        """Keep the neighbour candidates whose facing edge is in ``allowed``.

        Args:
            neighbour: The cell being constrained.
            allowed: Edge values the constraining side presents.
            direction: Direction from the constraining cell to ``neighbour``.

        Returns:
            True if any candidate was removed.
        """
        facing = OPPOSITE_DIR[direction]
        kept = [
            option
            for option in neighbour.candidates
            if option.signature.facing(facing) in allowed
        ]
        if len(kept) == len(neighbour.candidates):
            return False
        neighbour.candidates = kept
        return True

    def _propagate(self, cells: list[Cell]) -> None:
        """Keep propagating from undetermined cells whose candidates shrank."""
        stack = list(cells)
        in_stack = {cell.position for cell in stack}

        while stack:
            cell = stack.pop()
            in_stack.discard(cell.position)

            # An empty cell is a contradiction; spreading it would only wipe
            # out its neighbours too
            if not cell.candidates:
                continue

            for direction in DIRECTIONS:
                neighbour = self._neighbour(cell.position, direction)
                if neighbour is None or neighbour.is_collapsed:
                    continue
                allowed = {
                    option.signature.facing(direction) for option in cell.candidates
                }
                if (
                    self._reduce_options(neighbour, allowed, direction)
                    and neighbour.position not in in_stack
                ):
                    stack.append(neighbour)
                    in_stack.add(neighbour.position)

    # -------------------------------------------------------------------------
    # Initialization and restore
    # -------------------------------------------------------------------------

    def _initialize_cells(self) -> list[Cell]:
        width, height = self._cell_grid_size
        return [
            Cell(index_to_position(i, self._cell_grid_size), list(self._patterns))
            for i in range(width * height)
        ]

    def _initialize_shape_cells(self) -> list[Cell]:
        self._cells = self._initialize_cells()
        for cell in self._cells:
            if cell.position not in self._shape:
                cell.collapse_to(self._filler)

        for cell in self._cells:
            if cell.is_collapsed:
                self.collapse_neighbours(cell.position)
        return self._cells

    def _reset_grid(self, saved_state: SavedState | None) -> None:
        if self._shape is not None:
            self._cells = self._initialize_shape_cells()
        else:
            self._cells = self._initialize_cells()
        if saved_state is not None:
            self.process_saved_state(saved_state)
        logger.debug("Grid reset for a new attempt")

    def process_saved_state(self, saved_state: SavedState) -> None:
        """Replay a snapshot as collapse-and-propagate steps in index order.

        Entries for cells that are already collapsed to the saved id are
        skipped.

        Raises:
            ArgumentRangeError: If the snapshot has the wrong number of cells.
            UnknownPatternIdError: If a saved id is not among a cell's
                candidates.
        """
        if len(saved_state.cells) != len(self._cells):
            raise ArgumentRangeError(
                f"Saved state has {len(saved_state.cells)} cells, "
                f"grid has {len(self._cells)}"
            )

        for index, pattern_id in enumerate(saved_state.cells):
            if pattern_id == UNSET_PATTERN_ID:
                continue

            cell = self._cells[index]
            if cell.pattern is not None and cell.pattern.id == pattern_id:
                continue

            option = next(
                (i for i, p in enumerate(cell.candidates) if p.id == pattern_id),
                None,
            )
            if option is None:
                raise UnknownPatternIdError(pattern_id, cell.position)

            self.collapse(cell, option)
            self.collapse_neighbours(cell.position)

        logger.info(
            f"Restored {saved_state.collapsed_count} collapsed cells from saved state"
        )
