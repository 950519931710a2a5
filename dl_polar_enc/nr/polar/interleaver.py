"""Index-pattern interleavers used by the NR polar chain."""

from __future__ import annotations

import numpy as np

from ...errors import ShapeError
from ...polar.gf2 import as_indices

_INTERLEAVER_BLOCK = 32

# Sub-block permutation P(i) from TS 38.212 Table 5.4.1.1-1.
_SUBBLOCK_PERM = np.array(
    [0, 1, 2, 4, 3, 5, 6, 7, 8, 16, 9, 17, 10, 18, 11, 19,
     12, 20, 13, 21, 14, 22, 15, 23, 24, 25, 26, 28, 27, 29, 30, 31],
    dtype=np.int64,
)


def _check_pattern(pattern: np.ndarray, size: int) -> np.ndarray:
    pattern = as_indices(pattern)
    if pattern.size != size:
        raise ShapeError(f"pattern has {pattern.size} entries, expected {size}")
    if pattern.size and (pattern.min() < 0 or pattern.max() >= size):
        raise IndexError(f"pattern entries must lie in [0, {size})")
    if np.unique(pattern).size != size:
        raise IndexError("pattern contains duplicate indices")
    return pattern


def interleave(bits: np.ndarray, pattern: np.ndarray) -> np.ndarray:
    """Return `bits[pattern[i]]` for a permutation `pattern` of the bit positions."""

    bits = np.asarray(bits)
    if bits.ndim != 1:
        raise ShapeError("bits must be 1D")
    pattern = _check_pattern(pattern, bits.size)
    return bits[pattern]


def inverse_pattern(pattern: np.ndarray) -> np.ndarray:
    pattern = _check_pattern(pattern, np.asarray(pattern).size)
    inverse = np.empty_like(pattern)
    inverse[pattern] = np.arange(pattern.size)
    return inverse


def deinterleave(bits: np.ndarray, pattern: np.ndarray) -> np.ndarray:
    """Undo `interleave(bits, pattern)`."""

    return interleave(bits, inverse_pattern(pattern))


def subblock_pattern(N: int) -> np.ndarray:
    """Return the NR sub-block interleaver pattern J for a length-N codeword."""

    block = _INTERLEAVER_BLOCK
    if N < block or N % block:
        raise ValueError(f"N must be a positive multiple of {block}")
    sub = N // block
    n = np.arange(N)
    i = (block * n) // N
    return _SUBBLOCK_PERM[i] * sub + n % sub


__all__ = ["interleave", "deinterleave", "inverse_pattern", "subblock_pattern"]
