"""Downlink polar encoding chain following the 5G NR flow.

CRC attachment, RNTI scrambling, CRC interleaving, frozen-bit insertion, polar
transform and rate matching run in a single pass over validated tables, and the
rate-matched output is compared with a reference vector.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Dict, List

import numpy as np

from ...config import EncoderParams
from ...errors import ShapeError
from ...polar.crc import compute_crc, scramble
from ...polar.gf2 import as_bits, as_indices, as_matrix
from ...polar.polar import map_frozen, transform
from .interleaver import interleave
from .rate_match import rate_match

_BIT_TABLES = ("info_bits", "rnti_bits", "reference_bits")
_PATTERN_TABLES = ("crc_interleaver_pattern", "info_bit_pattern", "rate_match_pattern")
_MATRIX_TABLES = ("crc_gen_matrix", "enc_gen_matrix")


def _readonly(arr: np.ndarray) -> np.ndarray:
    arr = np.array(arr, copy=True)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class EncoderTables:
    """Read-only inputs of one encoding run, in their logical (post-transpose) shapes."""

    info_bits: np.ndarray  # (A,)
    crc_gen_matrix: np.ndarray  # (K, P)
    rnti_bits: np.ndarray  # (<= P,)
    crc_interleaver_pattern: np.ndarray  # (A + P,)
    info_bit_pattern: np.ndarray  # (N,)
    enc_gen_matrix: np.ndarray  # (N, N)
    rate_match_pattern: np.ndarray  # (E,)
    reference_bits: np.ndarray  # (E,)

    def __post_init__(self) -> None:
        for name in _BIT_TABLES:
            object.__setattr__(self, name, _readonly(as_bits(getattr(self, name), name)))
        for name in _MATRIX_TABLES:
            object.__setattr__(self, name, _readonly(as_matrix(getattr(self, name), name)))
        for name in _PATTERN_TABLES:
            object.__setattr__(self, name, _readonly(as_indices(getattr(self, name), name)))

    def validate(self, params: EncoderParams) -> None:
        """Check every table against the scalar configuration."""

        A, P, K, E, N = params.A, params.P, params.K, params.E, params.N
        if K <= A:
            raise ShapeError(f"K={K} must exceed A={A}")
        expected = {
            "info_bits": (A,),
            "crc_gen_matrix": (K, P),
            "crc_interleaver_pattern": (A + P,),
            "info_bit_pattern": (N,),
            "enc_gen_matrix": (N, N),
            "rate_match_pattern": (E,),
            "reference_bits": (E,),
        }
        for name, shape in expected.items():
            actual = getattr(self, name).shape
            if actual != shape:
                raise ShapeError(f"{name} has shape {actual}, expected {shape}")
        if self.rnti_bits.size > P:
            raise ShapeError(f"rnti_bits has {self.rnti_bits.size} bits, at most {P} allowed")

        crc_ilv = self.crc_interleaver_pattern
        if crc_ilv.size and (crc_ilv.min() < 0 or crc_ilv.max() >= A + P):
            raise IndexError(f"crc_interleaver_pattern entries must lie in [0, {A + P})")
        if np.unique(crc_ilv).size != crc_ilv.size:
            raise IndexError("crc_interleaver_pattern contains duplicate indices")
        n_info = int(np.count_nonzero(self.info_bit_pattern > 0))
        if n_info != A + P:
            raise ShapeError(f"info_bit_pattern marks {n_info} information positions, expected {A + P}")
        rm = self.rate_match_pattern
        if rm.size and (rm.min() < 0 or rm.max() >= N):
            raise IndexError(f"rate_match_pattern entries must lie in [0, {N})")


@dataclass(frozen=True, eq=False)
class EncodeResult:
    crc_bits: np.ndarray
    scrambled_crc_bits: np.ndarray
    info_crc_bits: np.ndarray
    interleaved_bits: np.ndarray
    frozen_bits: np.ndarray
    encoded_bits: np.ndarray
    rate_matched: np.ndarray
    mismatches: int

    @property
    def ok(self) -> bool:
        return self.mismatches == 0

    def stages(self) -> Dict[str, np.ndarray]:
        """Return the intermediate vectors in pipeline order."""

        return {f.name: getattr(self, f.name) for f in fields(self) if f.name != "mismatches"}


def compare(candidate: np.ndarray, reference: np.ndarray) -> int:
    """Return the Hamming distance between two equal-length bit vectors."""

    candidate = np.asarray(candidate)
    reference = np.asarray(reference)
    if candidate.shape != reference.shape:
        raise ShapeError(f"candidate has shape {candidate.shape}, reference has {reference.shape}")
    return int(np.count_nonzero(candidate != reference))


def encode_dl(params: EncoderParams, tables: EncoderTables) -> EncodeResult:
    """Run the full encoding chain and compare against `tables.reference_bits`."""

    tables.validate(params)

    crc_bits = compute_crc(tables.info_bits, tables.crc_gen_matrix, leading_ones=params.leading_ones)
    scrambled = scramble(crc_bits, tables.rnti_bits)
    info_crc = np.concatenate([tables.info_bits, scrambled])
    interleaved = interleave(info_crc, tables.crc_interleaver_pattern)
    frozen = map_frozen(interleaved, tables.info_bit_pattern, params.N)
    encoded = transform(frozen, tables.enc_gen_matrix)
    rate_matched = rate_match(encoded, tables.rate_match_pattern)

    return EncodeResult(
        crc_bits=crc_bits,
        scrambled_crc_bits=scrambled,
        info_crc_bits=info_crc,
        interleaved_bits=interleaved,
        frozen_bits=frozen,
        encoded_bits=encoded,
        rate_matched=rate_matched,
        mismatches=compare(rate_matched, tables.reference_bits),
    )


def format_stages(result: EncodeResult) -> List[str]:
    """Render each intermediate vector as a `name:` header line followed by its bits."""

    lines: List[str] = []
    for name, bits in result.stages().items():
        lines.append(f"{name}:")
        lines.append(" ".join(str(int(b)) for b in bits))
    return lines


__all__ = ["EncoderTables", "EncodeResult", "compare", "encode_dl", "format_stages"]
