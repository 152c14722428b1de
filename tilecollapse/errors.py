"""Exception types raised by the tile synthesis pipeline.

Input errors (``ArgumentRangeError``, ``EmptyInputError``,
``MalformedInputError``) are fatal to the call that raised them. A
``NoCandidateError`` is recoverable at the solve-loop level. An
``UnknownPatternIdError`` aborts the restore that raised it.
"""

from __future__ import annotations

from tilecollapse.types import GridPos, PatternId


class WFCError(Exception):
    """Base class for all errors raised by tilecollapse."""


class ArgumentRangeError(WFCError, ValueError):
    """Raised when a size, count or index argument is out of its valid range."""


class EmptyInputError(WFCError):
    """Raised when the input tilemap region contains no tiles."""


class MalformedInputError(WFCError):
    """Raised when the occupied input region is not a hole-free rectangle."""


class NoCandidateError(WFCError):
    """Raised when no undetermined cell has any candidate pattern left.

    This is a contradiction: the grid is not fully collapsed, but every
    remaining cell has had all of its candidates removed by propagation.
    """


class UnknownPatternIdError(WFCError, KeyError):
    """Raised when a saved pattern id is not among a cell's candidates.

    Usually means the pattern catalog changed between save and restore.
    """

    def __init__(self, pattern_id: PatternId, position: GridPos) -> None:
        self.pattern_id = pattern_id
        self.position = position
        super().__init__(
            f"Pattern id {pattern_id} is not a candidate of cell {position}"
        )

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0])
