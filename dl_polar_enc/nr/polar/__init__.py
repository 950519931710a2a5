"""NR polar helpers (interleaver, rate matching, downlink encoding chain)."""

from .interleaver import interleave, deinterleave, inverse_pattern, subblock_pattern
from .rate_match import rate_match, rate_match_pattern
from .encode_dl import EncoderTables, EncodeResult, compare, encode_dl, format_stages

__all__ = [
    "interleave",
    "deinterleave",
    "inverse_pattern",
    "subblock_pattern",
    "rate_match",
    "rate_match_pattern",
    "EncoderTables",
    "EncodeResult",
    "compare",
    "encode_dl",
    "format_stages",
]
