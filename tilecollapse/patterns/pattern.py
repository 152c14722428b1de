from __future__ import annotations

import numpy as np

from tilecollapse.errors import ArgumentRangeError
from tilecollapse.tiles.signature import EdgeSignature
from tilecollapse.tiles.tile import Tile
from tilecollapse.types import GridSize, PatternId


class Pattern:
    """An immutable block of tiles, the solver's unit of output.

    Patterns compare and hash by their composite edge signature only. Two
    windows cut from different places of the input are the same pattern if
    their edge tiles fingerprint identically, whatever their ids or interiors.

    Attributes:
        id: Zero-based id assigned during deduplication.
        tiles: Read-only object array of Tile indexed ``[x, y]``.
        signature: Composite fingerprint of the block's edge tiles.
    """

    __slots__ = ("_id", "_tiles", "_signature")

    def __init__(
        self,
        pattern_id: PatternId,
        tiles: np.ndarray,
        signature: EdgeSignature | None = None,
    ) -> None:
        """Copy ``tiles`` into a read-only block.

        Args:
            pattern_id: Id to assign.
            tiles: Object array of Tile indexed ``[x, y]``.
            signature: The block's composite signature if the caller already
                computed it. Computed from ``tiles`` when omitted.
        """
        if tiles.ndim != 2 or tiles.size == 0:
            raise ArgumentRangeError(
                f"Pattern needs a non-empty 2D tile block, got shape {tiles.shape}"
            )

        block = np.array(tiles, dtype=object, copy=True)
        block.flags.writeable = False

        self._id = pattern_id
        self._tiles = block
        self._signature = (
            signature if signature is not None else EdgeSignature.composite(block)
        )

    @classmethod
    def single(cls, tile: Tile, pattern_id: PatternId) -> Pattern:
        """Create a 1x1 pattern holding one tile."""
        block = np.empty((1, 1), dtype=object)
        block[0, 0] = tile
        return cls(pattern_id, block)

    @property
    def id(self) -> PatternId:
        return self._id

    @property
    def tiles(self) -> np.ndarray:
        return self._tiles

    @property
    def signature(self) -> EdgeSignature:
        return self._signature

    @property
    def size(self) -> GridSize:
        """``(width, height)`` of the block in tiles."""
        width, height = self._tiles.shape
        return (width, height)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pattern):
            return NotImplemented
        return self._signature == other._signature

    def __hash__(self) -> int:
        return hash(self._signature)

    def __repr__(self) -> str:
        return f"Pattern(id={self._id}, size={self.size})"

    def __str__(self) -> str:
        return str(self._id)
