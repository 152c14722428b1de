from __future__ import annotations

import random

import pytest

from tests.helpers import clashing_tiles, column_tiles, make_patterns
from tilecollapse.patterns.pattern import Pattern


@pytest.fixture
def rng() -> random.Random:
    """A seeded random source so solver runs are reproducible."""
    return random.Random(12345)


@pytest.fixture
def column_patterns() -> list[Pattern]:
    """Patterns P (id 0) and Q (id 1) that only form uniform columns."""
    return make_patterns(column_tiles())


@pytest.fixture
def clashing_patterns() -> list[Pattern]:
    """Patterns X (id 0) and Y (id 1) that can never be neighbours."""
    return make_patterns(clashing_tiles())
