"""Synthetic test-case generation for the downlink polar chain."""

from __future__ import annotations

import argparse
import dataclasses
from pathlib import Path
from typing import List

import numpy as np

from .. import config
from ..config import EncoderParams
from ..errors import ShapeError
from ..utils.seeding import seed_all
from ..polar.crc import crc_generator_matrix
from ..polar.polar import info_bit_pattern, polar_generator_matrix
from ..nr.polar.encode_dl import EncoderTables, encode_dl
from ..nr.polar.rate_match import rate_match_pattern
from .testcase import save_testcase


def generate_tables(params: EncoderParams, rnti_len: int = 16, rm_mode: str = "puncture") -> EncoderTables:
    """Build a consistent table set whose reference bits are the chain's own output."""

    if params.crc_bits != params.P:
        raise ShapeError(f"crc_poly {params.crc_poly} has degree {params.crc_bits}, expected P={params.P}")
    rng = seed_all(params.seed)
    if not (0 <= rnti_len <= params.P):
        raise ValueError(f"rnti_len must lie in [0, {params.P}]")

    tables = EncoderTables(
        info_bits=rng.integers(0, 2, size=params.A, dtype=np.int8),
        crc_gen_matrix=crc_generator_matrix(params.crc_poly, params.K),
        rnti_bits=rng.integers(0, 2, size=rnti_len, dtype=np.int8),
        crc_interleaver_pattern=rng.permutation(params.A + params.P),
        info_bit_pattern=info_bit_pattern(params.N, params.A + params.P),
        enc_gen_matrix=polar_generator_matrix(params.N),
        rate_match_pattern=rate_match_pattern(params.N, params.E, mode=rm_mode),
        reference_bits=np.zeros(params.E, dtype=np.int8),
    )
    result = encode_dl(params, tables)
    return dataclasses.replace(tables, reference_bits=result.rate_matched)


def make_testcase(args: argparse.Namespace) -> Path:
    cfg = config.get_config()
    params = EncoderParams(
        A=args.A,
        P=cfg.crc_bits,
        K=args.A + (cfg.P if args.dci_ones else 1),
        E=args.E,
        N=args.N,
        crc_poly=cfg.crc_poly,
        seed=args.seed,
    )
    tables = generate_tables(params, rnti_len=args.rnti_len, rm_mode=args.rm_mode)
    out_dir = save_testcase(args.out, params, tables)
    print(f"Saved test case (A={params.A}, K={params.K}, E={params.E}, N={params.N}) to {out_dir}")
    return out_dir


def build_argparser() -> argparse.ArgumentParser:
    cfg = config.DEFAULTS
    parser = argparse.ArgumentParser(description="Generate a synthetic downlink polar test case")
    parser.add_argument("--A", type=int, default=cfg.A, help="Number of information bits")
    parser.add_argument("--E", type=int, default=cfg.E, help="Rate-matched output length")
    parser.add_argument("--N", type=int, default=cfg.N, help="Polar transform size")
    parser.add_argument("--rnti_len", type=int, default=16, help="Length of the RNTI scrambling mask")
    parser.add_argument("--rm_mode", choices=["puncture", "shorten"], default="puncture")
    parser.add_argument(
        "--dci_ones",
        action="store_true",
        help="Prepend P ones before the CRC (K = A + P) instead of a single one",
    )
    parser.add_argument("--seed", type=int, default=cfg.seed, help="RNG seed")
    parser.add_argument("--out", type=str, required=True, help="Output test-case directory")
    return parser


def main(argv: List[str] | None = None) -> None:
    parser = build_argparser()
    args = parser.parse_args(argv)
    make_testcase(args)


if __name__ == "__main__":
    main()
