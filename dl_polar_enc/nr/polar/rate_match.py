"""NR polar rate matching by index gathering."""

from __future__ import annotations

import numpy as np

from ...errors import ShapeError
from ...polar.gf2 import as_indices
from .interleaver import subblock_pattern


def rate_match(encoded: np.ndarray, pattern: np.ndarray) -> np.ndarray:
    """Gather `encoded[pattern[i]]`; repeated indices repeat bits, missing ones are dropped."""

    encoded = np.asarray(encoded)
    if encoded.ndim != 1:
        raise ShapeError("encoded must be 1D")
    pattern = as_indices(pattern)
    if pattern.size and (pattern.min() < 0 or pattern.max() >= encoded.size):
        raise IndexError(f"pattern entries must lie in [0, {encoded.size})")
    return encoded[pattern]


def rate_match_pattern(N: int, E: int, mode: str = "puncture") -> np.ndarray:
    """Build the length-E gather pattern for sub-block interleaving plus bit selection.

    With E >= N the interleaved codeword is repeated circularly. Otherwise
    "puncture" drops the first N - E interleaved bits and "shorten" drops the
    last N - E.
    """

    if E <= 0:
        raise ValueError("E must be positive")
    J = subblock_pattern(N)
    if E >= N:
        return J[np.arange(E) % N]
    if mode == "puncture":
        return J[N - E :]
    if mode == "shorten":
        return J[:E]
    raise ValueError(f"Unsupported rate matching mode: {mode}")


__all__ = ["rate_match", "rate_match_pattern"]
