"""Snapshots of a (partially) solved grid.

A SavedState is a flat list with one pattern id per cell in row-major order.
Cells that were undetermined when saved hold UNSET_PATTERN_ID. Restoring
replays every saved id as a manual collapse followed by propagation, so a
snapshot only restores cleanly against the pattern catalog it was saved from.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from tilecollapse.config import UNSET_PATTERN_ID
from tilecollapse.errors import ArgumentRangeError
from tilecollapse.solver.cell import Cell
from tilecollapse.types import PatternId


@dataclass
class SavedState:
    """Serializable pattern ids of a solver grid."""

    cells: list[PatternId] = field(default_factory=list)

    @classmethod
    def from_cells(cls, cells: Sequence[Cell]) -> SavedState:
        """Snapshot cells given in row-major order."""
        return cls(
            [
                cell.pattern.id if cell.pattern is not None else UNSET_PATTERN_ID
                for cell in cells
            ]
        )

    @property
    def collapsed_count(self) -> int:
        return sum(1 for pattern_id in self.cells if pattern_id != UNSET_PATTERN_ID)

    @property
    def is_complete(self) -> bool:
        """True if every cell was collapsed when saved."""
        return UNSET_PATTERN_ID not in self.cells

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_json(self) -> str:
        return json.dumps({"cells": self.cells})

    @classmethod
    def from_json(cls, text: str) -> SavedState:
        """Parse a snapshot written by to_json().

        Raises:
            ArgumentRangeError: If the document is not a list of integer ids.
        """
        data = json.loads(text)
        cells = data.get("cells") if isinstance(data, dict) else None
        if not isinstance(cells, list) or not all(
            isinstance(value, int) and not isinstance(value, bool) for value in cells
        ):
            raise ArgumentRangeError("Saved state must hold a list of integer ids")
        return cls(cells)

    def save(self, path: str | Path) -> None:
        with Path(path).open("w") as f:
            f.write(self.to_json())

    @classmethod
    def load(cls, path: str | Path) -> SavedState:
        with Path(path).open() as f:
            return cls.from_json(f.read())
