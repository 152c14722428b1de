"""Wave Function Collapse tilemap synthesis.

Generates an output tilemap that is locally consistent with a small sample
tilemap:
- TilemapReader: reads the sample into a grid of edge-fingerprinted Tiles
- PatternCatalog: cuts the grid into unique fixed-size Patterns
- CoreSolver: collapses an output grid of Cells against the pattern set
- SavedState: snapshots and restores a (partially) solved grid
- WFCSession: runs the whole pipeline and the interactive edits
"""

from .config import GeneratorConfig, PropagationMode, RetryPolicy
from .errors import (
    ArgumentRangeError,
    EmptyInputError,
    MalformedInputError,
    NoCandidateError,
    UnknownPatternIdError,
    WFCError,
)
from .patterns import Pattern, PatternCatalog
from .session import WFCSession, assemble_tiles
from .solver import Cell, CoreSolver, SavedState, SolveStatus
from .tiles import (
    ArrayAsset,
    EdgeSignature,
    ImageAsset,
    RenderableAsset,
    Tile,
    TilemapReader,
    slice_tilesheet,
)

__all__ = [
    "ArgumentRangeError",
    "ArrayAsset",
    "Cell",
    "CoreSolver",
    "EdgeSignature",
    "EmptyInputError",
    "GeneratorConfig",
    "ImageAsset",
    "MalformedInputError",
    "NoCandidateError",
    "Pattern",
    "PatternCatalog",
    "PropagationMode",
    "RenderableAsset",
    "RetryPolicy",
    "SavedState",
    "SolveStatus",
    "Tile",
    "TilemapReader",
    "UnknownPatternIdError",
    "WFCError",
    "WFCSession",
    "assemble_tiles",
    "slice_tilesheet",
]
