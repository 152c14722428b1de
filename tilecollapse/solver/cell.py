from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from tilecollapse.patterns.pattern import Pattern
from tilecollapse.types import GridPos


@dataclass(eq=False)
class Cell:
    """One slot of the solver grid.

    A cell is either undetermined, holding the patterns it may still become,
    or collapsed to exactly one pattern. Collapsing empties the candidate
    list, so ``is_collapsed`` always agrees with ``pattern is not None``.
    An undetermined cell with no candidates left is a contradiction.

    Attributes:
        position: ``(x, y)`` in the solver grid.
        candidates: Remaining patterns, in catalog order, no duplicates.
        pattern: The committed pattern, or None while undetermined.
    """

    position: GridPos
    candidates: list[Pattern] = field(default_factory=list)
    pattern: Pattern | None = None

    @property
    def is_collapsed(self) -> bool:
        return self.pattern is not None

    @property
    def entropy(self) -> int:
        """Number of remaining candidates. Lower means more constrained."""
        return len(self.candidates)

    def collapse_to(self, pattern: Pattern) -> None:
        self.pattern = pattern
        self.candidates = []

    def reset(self, candidates: Iterable[Pattern]) -> None:
        self.pattern = None
        self.candidates = list(candidates)

    def __str__(self) -> str:
        if self.pattern is not None:
            return f"[{self.pattern.id}]"
        return str(len(self.candidates))
