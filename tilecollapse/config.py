"""
Configuration constants.

Centralizes the defaults and sentinel values used throughout the package, plus
the validated ``GeneratorConfig`` that a caller hands to a ``WFCSession``.
Organized by functional area for easy maintenance.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from tilecollapse.errors import ArgumentRangeError
from tilecollapse.types import GridSize, RandomSeed

# =============================================================================
# EDGE FINGERPRINTING
# =============================================================================

# Number of evenly spaced pixels sampled along each tile edge.
DEFAULT_EDGE_SAMPLES = 3
MIN_EDGE_SAMPLES = 2

# Separator used when joining edge-tile signatures into a composite string.
COMPOSITE_SEPARATOR = ":"

# =============================================================================
# SOLVER
# =============================================================================

# Outer retry budget for a full solve.
DEFAULT_MAX_ITERATIONS = 100

# SavedState slot value for a cell that was not collapsed when saved.
UNSET_PATTERN_ID = -1

# Id of the single-tile pattern that fills cells outside a solve shape.
FILLER_PATTERN_ID = -2

# =============================================================================
# RANDOMNESS
# =============================================================================

RNG_DOMAIN_SOLVER = "wfc.solver"


class RetryPolicy(Enum):
    """What the solve loop does with the grid after a contradiction."""

    IN_PLACE = auto()  # Keep the partial grid and try again from there
    RESET = auto()  # Rebuild the grid from scratch before the next attempt


class PropagationMode(Enum):
    """How far a collapse propagates its constraints."""

    LOCAL = auto()  # Immediate neighbours only
    FULL = auto()  # Keep propagating from every cell whose candidates shrank


@dataclass(frozen=True)
class GeneratorConfig:
    """Caller-supplied settings for one generation session.

    Attributes:
        output_size: Output size in tiles. Each axis must be a positive
            multiple of the matching ``pattern_size`` axis.
        pattern_size: Size of an extracted pattern block in tiles.
        overlapping: Slide the extraction window one tile at a time instead
            of tiling it by ``pattern_size``.
        wrapping: Let extraction windows wrap around the input grid edges.
        max_iterations: Outer retry budget for ``solve``.
        edge_samples: Pixels sampled per tile edge for fingerprinting.
        seed: Master seed for the session's random streams. ``None`` gives
            non-deterministic output.
        retry_policy: Grid handling between solve attempts.
        propagation: Constraint propagation reach.
        wrap_edges: Treat the output grid as a torus during propagation.
    """

    output_size: GridSize
    pattern_size: GridSize = (1, 1)
    overlapping: bool = False
    wrapping: bool = False
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    edge_samples: int = DEFAULT_EDGE_SAMPLES
    seed: RandomSeed = None
    retry_policy: RetryPolicy = RetryPolicy.IN_PLACE
    propagation: PropagationMode = PropagationMode.LOCAL
    wrap_edges: bool = True

    def __post_init__(self) -> None:
        pattern_width, pattern_height = self.pattern_size
        if pattern_width <= 0 or pattern_height <= 0:
            raise ArgumentRangeError(
                f"Pattern size must be positive on both axes, got {self.pattern_size}"
            )

        output_width, output_height = self.output_size
        if output_width <= 0 or output_height <= 0:
            raise ArgumentRangeError(
                f"Output size must be positive on both axes, got {self.output_size}"
            )
        if output_width % pattern_width or output_height % pattern_height:
            raise ArgumentRangeError(
                f"Output size {self.output_size} is not a multiple of "
                f"pattern size {self.pattern_size}"
            )

        if self.max_iterations <= 0:
            raise ArgumentRangeError(
                f"max_iterations must be > 0, got {self.max_iterations}"
            )
        if self.edge_samples < MIN_EDGE_SAMPLES:
            raise ArgumentRangeError(
                f"edge_samples must be >= {MIN_EDGE_SAMPLES}, got {self.edge_samples}"
            )

    @property
    def cell_grid_size(self) -> GridSize:
        """Size of the solver grid: one cell per pattern-sized block."""
        return (
            self.output_size[0] // self.pattern_size[0],
            self.output_size[1] // self.pattern_size[1],
        )
