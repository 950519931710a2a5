"""CRC attachment and scrambling for the downlink polar chain."""

from __future__ import annotations

import numpy as np

from ..errors import ShapeError
from .gf2 import as_bits, as_matrix, gf2_vecmat


def _poly_to_bits(poly: str) -> np.ndarray:
    if not poly:
        raise ValueError("CRC polynomial string must be non-empty")
    value = int(poly, 16)
    bit_length = value.bit_length()
    bits = [(value >> i) & 1 for i in reversed(range(bit_length))]
    return np.array(bits, dtype=np.int8)


def attach_crc(msg_bits: np.ndarray, poly: str) -> np.ndarray:
    """Append CRC parity bits to `msg_bits` using the given hex polynomial."""

    if msg_bits.ndim != 1:
        raise ValueError("msg_bits must be a 1D array")
    msg_bits = (msg_bits.astype(np.int8) & 1)
    poly_bits = _poly_to_bits(poly)
    degree = poly_bits.size - 1
    if degree <= 0:
        raise ValueError("Polynomial degree must be positive")

    buffer = np.concatenate([msg_bits, np.zeros(degree, dtype=np.int8)])
    for i in range(msg_bits.size):
        if buffer[i] == 0:
            continue
        buffer[i : i + degree + 1] ^= poly_bits
    remainder = buffer[-degree:]
    return np.concatenate([msg_bits, remainder])


def check_crc(msg_with_crc: np.ndarray, poly: str) -> bool:
    """Return True if `msg_with_crc` satisfies the CRC checksum."""

    if msg_with_crc.ndim != 1:
        raise ValueError("msg_with_crc must be a 1D array")
    msg_with_crc = (msg_with_crc.astype(np.int8) & 1)
    poly_bits = _poly_to_bits(poly)
    degree = poly_bits.size - 1
    if msg_with_crc.size <= degree:
        raise ValueError("Message too short for the provided CRC polynomial")

    buffer = msg_with_crc.copy()
    for i in range(msg_with_crc.size - degree):
        if buffer[i] == 0:
            continue
        buffer[i : i + degree + 1] ^= poly_bits
    return not buffer[-degree:].any()


def crc_generator_matrix(poly: str, K: int) -> np.ndarray:
    """Return the K x P generator matrix equivalent to `attach_crc` on K-bit inputs.

    Row i holds the parity of the unit vector with a single one at position i,
    so the CRC of any K-bit message is the GF(2) sum of the rows it selects.
    """

    if K <= 0:
        raise ValueError("K must be positive")
    P = _poly_to_bits(poly).size - 1
    gen = np.zeros((K, P), dtype=np.int8)
    unit = np.zeros(K, dtype=np.int8)
    for i in range(K):
        unit[i] = 1
        gen[i] = attach_crc(unit, poly)[K:]
        unit[i] = 0
    return gen


def compute_crc(info_bits: np.ndarray, crc_gen_matrix: np.ndarray, leading_ones: int = 1) -> np.ndarray:
    """Return the P parity bits of `info_bits` with `leading_ones` ones prepended."""

    info_bits = as_bits(info_bits, "info_bits")
    crc_gen_matrix = as_matrix(crc_gen_matrix, "crc_gen_matrix")
    if leading_ones < 0:
        raise ValueError("leading_ones must be non-negative")
    expected_rows = info_bits.size + leading_ones
    if crc_gen_matrix.shape[0] != expected_rows:
        raise ShapeError(
            f"crc_gen_matrix has {crc_gen_matrix.shape[0]} rows, expected {expected_rows}"
        )
    augmented = np.concatenate([np.ones(leading_ones, dtype=np.int8), info_bits])
    return gf2_vecmat(augmented, crc_gen_matrix)


def scramble(crc_bits: np.ndarray, rnti_bits: np.ndarray) -> np.ndarray:
    """XOR the trailing CRC bits with the RNTI mask."""

    crc_bits = as_bits(crc_bits, "crc_bits")
    rnti_bits = as_bits(rnti_bits, "rnti_bits")
    if rnti_bits.size > crc_bits.size:
        raise ShapeError(f"rnti_bits has {rnti_bits.size} bits, at most {crc_bits.size} allowed")
    mask = np.concatenate([np.zeros(crc_bits.size - rnti_bits.size, dtype=np.int8), rnti_bits])
    return crc_bits ^ mask


__all__ = ["attach_crc", "check_crc", "crc_generator_matrix", "compute_crc", "scramble"]
