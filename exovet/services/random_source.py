"""Seedable random source used to synthesize manual-entry predictions."""

from __future__ import annotations

from typing import Protocol

import numpy as np


class RandomSource(Protocol):
    """Draws uniform floats from the half-open interval ``[low, high)``."""

    def uniform(self, low: float, high: float, count: int) -> list[float]: ...


class NumpyRandomSource:
    """:class:`RandomSource` backed by a NumPy ``Generator``.

    Passing a ``seed`` makes every draw sequence reproducible.
    """

    def __init__(self, seed: int | None = None) -> None:
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def uniform(self, low: float, high: float, count: int) -> list[float]:
        return [float(x) for x in self._rng.uniform(low, high, size=count)]
