"""Constraint solver: cells, the collapse loop and grid snapshots."""

from tilecollapse.config import PropagationMode, RetryPolicy

from .cell import Cell
from .core_solver import (
    DIR_OFFSETS,
    DIRECTIONS,
    OPPOSITE_DIR,
    CoreSolver,
    SolveStatus,
)
from .saved_state import SavedState

__all__ = [
    "DIRECTIONS",
    "DIR_OFFSETS",
    "OPPOSITE_DIR",
    "Cell",
    "CoreSolver",
    "PropagationMode",
    "RetryPolicy",
    "SavedState",
    "SolveStatus",
]
