"""Seeded random streams for the solver, one per named domain.

A session owns one RNGProvider built from its configured seed. Each consumer
asks it for a stream by domain name, and each domain draws from its own
Random seeded from ``(master seed, domain)``. A seeded session therefore
repeats exactly, and adding draws in one domain leaves the others alone.

Usage:
    provider = RNGProvider(master_seed=42)
    solver = CoreSolver(size, patterns, rng=provider.get("wfc.solver"))
    provider.reset(7)  # the solver's stream now follows seed 7

Domain names:
    - "wfc.solver": cell selection tie breaks and random collapses
"""

from __future__ import annotations

import zlib
from collections.abc import Sequence
from random import Random
from typing import TYPE_CHECKING, TypeAlias, TypeVar

if TYPE_CHECKING:
    from tilecollapse.types import RandomSeed

T = TypeVar("T")


def derive_seed(master_seed: RandomSeed, domain: str) -> int:
    """Seed of one domain's stream. Stable across processes."""
    return zlib.crc32(f"{master_seed}:{domain}".encode())


class RNGStream:
    """The draws a solver makes, routed to a provider's current domain RNG.

    A solver keeps this object for its whole life. Because the Random behind
    it is looked up on every draw, reseeding the provider takes effect
    without handing the solver a new stream.
    """

    def __init__(self, provider: RNGProvider, domain: str) -> None:
        self._provider = provider
        self._domain = domain

    @property
    def domain(self) -> str:
        return self._domain

    def randrange(self, start: int, stop: int | None = None, step: int = 1) -> int:
        return self._provider._random_for(self._domain).randrange(start, stop, step)

    def choice(self, seq: Sequence[T]) -> T:
        return self._provider._random_for(self._domain).choice(seq)


# Anything the solver can draw from
RNG: TypeAlias = Random | RNGStream


class RNGProvider:
    """Hands out one RNGStream per domain, all derived from a master seed.

    With no master seed every domain draws from system entropy.
    """

    def __init__(self, master_seed: RandomSeed = None) -> None:
        self._master_seed = master_seed
        self._randoms: dict[str, Random] = {}
        self._streams: dict[str, RNGStream] = {}

    @property
    def master_seed(self) -> RandomSeed:
        return self._master_seed

    def get(self, domain: str) -> RNGStream:
        """Stream for ``domain``. Repeated calls return the same object."""
        stream = self._streams.get(domain)
        if stream is None:
            stream = self._streams[domain] = RNGStream(self, domain)
        return stream

    def reset(self, master_seed: RandomSeed = None) -> None:
        """Restart every domain from ``master_seed``.

        Streams handed out earlier stay valid and draw from the new seed.
        """
        self._master_seed = master_seed
        self._randoms.clear()

    def _random_for(self, domain: str) -> Random:
        rng = self._randoms.get(domain)
        if rng is None:
            if self._master_seed is None:
                rng = Random()
            else:
                rng = Random(derive_seed(self._master_seed, domain))
            self._randoms[domain] = rng
        return rng
