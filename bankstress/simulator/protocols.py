"""
simulator.protocols
~~~~~~~~~~~~~~~~~~~
Structural‑typing "plug‑in point" for the randomness provider.

Every random draw in the package (name shuffle, balance sheets, creditor
selection, idiosyncratic shock hits) goes through **one** object that
satisfies :class:`RandomSource`.  :class:`numpy.random.Generator` satisfies
it out of the box, so callers normally pass ``np.random.default_rng(seed)``;
tests may pass any stub exposing the same five methods.

Only the subset of the NumPy ``Generator`` API used by the package is
declared:

    random(size)                     -> floats in [0, 1)
    uniform(low, high, size)         -> floats in [low, high)
    integers(low, high)              -> int in [low, high)
    choice(a, size, replace)         -> sample of *a*
    permutation(x)                   -> shuffled copy of *x*
"""
from __future__ import annotations

from typing import Any, Optional, Protocol, Union, runtime_checkable

import numpy as np

from ..datamodel import Array

__all__ = ["RandomSource", "ensure_rng"]


@runtime_checkable
class RandomSource(Protocol):
    """Protocol that every randomness provider must satisfy."""

    def random(self, size: Any = None) -> Any:
        ...

    def uniform(self, low: float = 0.0, high: float = 1.0, size: Any = None) -> Any:
        ...

    def integers(self, low: int, high: Optional[int] = None, size: Any = None) -> Any:
        ...

    def choice(self, a: Any, size: Any = None, replace: bool = True) -> Array:
        ...

    def permutation(self, x: Any) -> Array:
        ...


def ensure_rng(source: Union[RandomSource, int, None] = None) -> RandomSource:
    """
    Normalise *source* to a :class:`RandomSource`.

    ``None`` or an ``int`` seed yields a fresh ``np.random.default_rng``; an
    object already satisfying the protocol is returned unchanged.
    """
    if source is None or isinstance(source, (int, np.integer)):
        return np.random.default_rng(source)
    if not isinstance(source, RandomSource):
        raise TypeError(
            f"Expected a seed or an object satisfying RandomSource; got {type(source).__name__}"
        )
    return source
