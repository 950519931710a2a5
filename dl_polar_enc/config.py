"""Central configuration defaults for dl_polar_enc."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union


@dataclass
class EncoderParams:
    A: int = 40  # information bits
    P: int = 24  # CRC parity bits
    K: int = 64  # CRC generator rows (A + leading ones)
    E: int = 108  # rate-matched output bits
    N: int = 128  # polar transform size
    # Used only when generating tables; a loaded test case carries its own CRC matrix.
    crc_poly: str = "0x1B2B117"  # 5G CRC-24C
    seed: int = 0

    @property
    def crc_bits(self) -> int:
        """Degree of `crc_poly`."""

        return int(self.crc_poly, 16).bit_length() - 1

    @property
    def leading_ones(self) -> int:
        """Number of ones prepended to the information bits before the CRC."""

        return self.K - self.A


DEFAULTS = EncoderParams()


def get_config() -> EncoderParams:
    """Return a copy of the default configuration."""

    return EncoderParams(**DEFAULTS.__dict__)


def read_params(path: Union[str, Path]) -> EncoderParams:
    """Read A, P, K, E, N from `params.txt` (or the directory holding it).

    The CRC polynomial keeps its default; it only matters for table generation.
    """

    path = Path(path)
    if path.is_dir():
        path = path / "params.txt"
    tokens = path.read_text().replace(",", " ").split()
    values = [int(tok) for tok in tokens]
    if len(values) < 5:
        raise ValueError(f"{path} must hold at least five integers (A, P, K, E, N)")
    A, P, K, E, N = values[:5]
    return EncoderParams(A=A, P=P, K=K, E=E, N=N)
