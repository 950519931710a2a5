"""Run the downlink polar encoding chain on a test-case directory."""

from __future__ import annotations

import argparse
import sys
from typing import List

from ..nr.polar.encode_dl import EncodeResult, encode_dl, format_stages
from .testcase import load_testcase


def run(args: argparse.Namespace) -> EncodeResult:
    params, tables = load_testcase(args.testcase)
    print(f"params: A={params.A} P={params.P} K={params.K} E={params.E} N={params.N}")

    result = encode_dl(params, tables)
    if args.verbose:
        for line in format_stages(result):
            print(line)
    print(f"nDiffBits: {result.mismatches}")
    return result


def build_argparser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Encode a test case and compare with its reference bits")
    parser.add_argument("testcase", type=str, help="Directory holding params.txt and the table files")
    parser.add_argument("--verbose", action="store_true", help="Print every intermediate bit vector")
    return parser


def main(argv: List[str] | None = None) -> int:
    parser = build_argparser()
    args = parser.parse_args(argv)
    result = run(args)
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
