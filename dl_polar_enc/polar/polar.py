"""Polar code primitives: construction, frozen-bit insertion and the GF(2) transform."""

from __future__ import annotations

import functools
import math

import numpy as np

from ..errors import ShapeError
from .gf2 import as_bits, as_matrix, gf2_vecmat

# ------------------------------
# Helper functions
# ------------------------------

_KERNEL = np.array([[1, 0], [1, 1]], dtype=np.int8)


def polar_transform(u: np.ndarray) -> np.ndarray:
    """Apply the Arikan polar transform (non-systematic) with butterflies."""

    u = as_bits(u, "u")
    _check_power_of_two(u.size)
    n = int(math.log2(u.size))
    x = u.copy()
    for stage in range(n):
        step = 1 << stage
        block = step << 1
        for start in range(0, x.size, block):
            left = slice(start, start + step)
            right = slice(start + step, start + block)
            x[left] ^= x[right]
    return x


def _check_power_of_two(n: int) -> None:
    if n <= 0 or (n & (n - 1)) != 0:
        raise ValueError("N must be a power of two")


def _polarization_weights(N: int) -> np.ndarray:
    n = int(math.log2(N))
    weights = np.zeros(N, dtype=float)
    for idx in range(N):
        w = 0.0
        bits = idx
        for j in range(n):
            if bits & 1:
                w += 2 ** (j / 4.0)
            bits >>= 1
        weights[idx] = w
    return weights


def _phi_inv(x: float) -> float:
    if x > 12.0:
        return 0.9861 * x - 2.3152
    if x > 3.5:
        return x * (0.009005 * x + 0.7694) - 0.9507
    if x > 1.0:
        return x * (0.062883 * x + 0.3678) - 0.1627
    return x * (0.2202 * x + 0.06448)


def _gaussian_pe(N: int, K: int, design_snr_db: float) -> np.ndarray:
    rate = K / N
    snr = 10 ** (design_snr_db / 10.0)
    sigma_sq = 1.0 / (2.0 * rate * snr)

    m = np.zeros(N, dtype=float)
    m[0] = 2.0 / sigma_sq
    stages = int(math.log2(N))
    for level in range(1, stages + 1):
        B = 1 << level
        half = B >> 1
        for j in range(half):
            T = m[j]
            m[j] = _phi_inv(T)
            m[half + j] = 2.0 * T

    # Convert mean LLR to error probability via Q-function approximation.
    pe = np.zeros_like(m)
    for i in range(N):
        val = max(m[i], 1e-12)
        pe[i] = 0.5 - 0.5 * math.erf(math.sqrt(val) / 2.0)
    return pe


def _reliability_order(N: int, K: int, method: str, design_snr_db: float) -> np.ndarray:
    _check_power_of_two(N)
    if not (0 < K <= N):
        raise ValueError("K must satisfy 0 < K <= N")

    if method == "polarization":
        # Larger weight means a more reliable channel.
        return np.argsort(-_polarization_weights(N), kind="stable")
    if method == "gaussian":
        return np.argsort(_gaussian_pe(N, K, design_snr_db), kind="stable")
    raise ValueError(f"Unsupported construction method: {method}")


# ------------------------------
# Table construction
# ------------------------------

@functools.lru_cache(maxsize=None)
def construct_info_set(N: int, K: int, method: str = "gaussian", design_snr_db: float = 2.5) -> np.ndarray:
    """Return sorted indices of the information set for an (N, K) polar code."""

    order = _reliability_order(N, K, method, design_snr_db)
    info_idx = np.sort(order[:K]).astype(np.int32)
    # Cached result is shared between callers.
    info_idx.setflags(write=False)
    return info_idx


def info_bit_pattern(N: int, K: int, method: str = "gaussian", design_snr_db: float = 2.5) -> np.ndarray:
    """Return a length-N rank pattern: 0 for frozen positions, 1..K by reliability otherwise."""

    order = _reliability_order(N, K, method, design_snr_db)
    pattern = np.zeros(N, dtype=np.int64)
    pattern[order[:K]] = np.arange(1, K + 1)
    return pattern


def polar_generator_matrix(N: int) -> np.ndarray:
    """Return G_N, the n-fold Kronecker power of the 2x2 polar kernel."""

    _check_power_of_two(N)
    gen = np.ones((1, 1), dtype=np.int8)
    while gen.shape[0] < N:
        gen = np.kron(gen, _KERNEL).astype(np.int8)
    return gen


# ------------------------------
# Encoding stages
# ------------------------------

def map_frozen(bits: np.ndarray, pattern: np.ndarray, output_length: int) -> np.ndarray:
    """Scatter `bits` onto the positive entries of `pattern`; every other position is frozen to 0.

    Positions are filled in ascending index order. The rank values in
    `pattern` only mark a position as carrying information.
    """

    bits = as_bits(bits)
    pattern = np.asarray(pattern)
    if pattern.ndim != 1:
        raise ShapeError("pattern must be 1D")
    if pattern.size != output_length:
        raise ShapeError(f"pattern has {pattern.size} entries, expected {output_length}")
    info_mask = pattern > 0
    n_info = int(np.count_nonzero(info_mask))
    if n_info != bits.size:
        raise ShapeError(f"pattern marks {n_info} information positions for {bits.size} bits")

    frozen = np.zeros(output_length, dtype=np.int8)
    frozen[info_mask] = bits
    return frozen


def extract_info(frozen: np.ndarray, pattern: np.ndarray) -> np.ndarray:
    """Inverse of `map_frozen`: read back the bits at positive pattern positions."""

    frozen = as_bits(frozen, "frozen")
    pattern = np.asarray(pattern)
    if pattern.shape != frozen.shape:
        raise ShapeError(f"pattern has {pattern.size} entries, expected {frozen.size}")
    return frozen[pattern > 0]


def transform(frozen: np.ndarray, gen_matrix: np.ndarray) -> np.ndarray:
    """Multiply the frozen-bit vector by the square generator matrix over GF(2)."""

    frozen = as_bits(frozen, "frozen")
    gen_matrix = as_matrix(gen_matrix, "gen_matrix")
    if gen_matrix.shape != (frozen.size, frozen.size):
        raise ShapeError(
            f"gen_matrix has shape {gen_matrix.shape}, expected ({frozen.size}, {frozen.size})"
        )
    return gf2_vecmat(frozen, gen_matrix)


__all__ = [
    "construct_info_set",
    "extract_info",
    "info_bit_pattern",
    "map_frozen",
    "polar_generator_matrix",
    "polar_transform",
    "transform",
]
