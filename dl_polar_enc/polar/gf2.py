"""GF(2) vector and matrix helpers."""

from __future__ import annotations

import numpy as np

from ..errors import ShapeError


def as_bits(values: np.ndarray, name: str = "bits") -> np.ndarray:
    """Return `values` as a 1D int8 array, checking every entry is 0 or 1."""

    bits = np.asarray(values)
    if bits.ndim != 1:
        raise ShapeError(f"{name} must be 1D")
    if bits.size and not np.isin(bits, (0, 1)).all():
        raise ValueError(f"{name} must only contain 0 and 1")
    return bits.astype(np.int8)


def as_matrix(values: np.ndarray, name: str = "matrix") -> np.ndarray:
    mat = np.asarray(values)
    if mat.ndim != 2:
        raise ShapeError(f"{name} must be 2D")
    if mat.size and not np.isin(mat, (0, 1)).all():
        raise ValueError(f"{name} must only contain 0 and 1")
    return mat.astype(np.int8)


def as_indices(values: np.ndarray, name: str = "pattern") -> np.ndarray:
    """Return `values` as a 1D int64 index array without truncating non-integer entries."""

    pattern = np.asarray(values)
    if pattern.ndim != 1:
        raise ShapeError(f"{name} must be 1D")
    if pattern.size and not np.issubdtype(pattern.dtype, np.integer):
        raise IndexError(f"{name} must hold integer indices, got dtype {pattern.dtype}")
    return pattern.astype(np.int64)


def gf2_vecmat(vec: np.ndarray, mat: np.ndarray) -> np.ndarray:
    """Row vector times matrix over GF(2).

    Rows of `mat` selected by the ones in `vec` are XOR-accumulated, so the
    result never leaves {0, 1} regardless of the vector length.
    """

    vec = as_bits(vec, "vec")
    mat = as_matrix(mat)
    if mat.shape[0] != vec.size:
        raise ShapeError(f"matrix has {mat.shape[0]} rows, expected {vec.size}")
    return np.bitwise_xor.reduce(mat[vec.astype(bool)], axis=0).astype(np.int8)


__all__ = ["as_bits", "as_indices", "as_matrix", "gf2_vecmat"]
