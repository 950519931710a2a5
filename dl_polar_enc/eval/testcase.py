"""Reading and writing test-case directories of comma-separated tables."""

from __future__ import annotations

from pathlib import Path
from typing import Tuple, Union

import numpy as np

from ..config import EncoderParams, read_params
from ..errors import ShapeError
from ..nr.polar.encode_dl import EncoderTables

PARAMS_FILE = "params.txt"
TABLE_FILES = {
    "info_bits": "info_bits.txt",
    "crc_gen_matrix": "crc_gen_m.txt",
    "rnti_bits": "rnti_bits.txt",
    "crc_interleaver_pattern": "crc_interleaver_pattern.txt",
    "info_bit_pattern": "info_bit_pattern.txt",
    "enc_gen_matrix": "enc_gen_m.txt",
    "rate_match_pattern": "rate_matching_pattern.txt",
    "reference_bits": "rm_bits.txt",
}


def load_vector(path: Path) -> np.ndarray:
    """Read every integer in `path` (comma and/or whitespace separated) as a flat vector."""

    tokens = path.read_text().replace(",", " ").split()
    return np.array([int(tok) for tok in tokens], dtype=np.int64)


def _load_matrix(path: Path, rows: int, cols: int) -> np.ndarray:
    # Stored column-major with respect to the logical matrix, hence the transpose.
    flat = load_vector(path)
    if flat.size != rows * cols:
        raise ShapeError(f"{path.name} holds {flat.size} values, expected {rows * cols}")
    return flat.reshape(cols, rows).T


def load_testcase(path: Union[str, Path]) -> Tuple[EncoderParams, EncoderTables]:
    """Load and validate `params.txt` and all tables from a test-case directory."""

    root = Path(path)
    params = read_params(root / PARAMS_FILE)
    tables = EncoderTables(
        info_bits=load_vector(root / TABLE_FILES["info_bits"]),
        crc_gen_matrix=_load_matrix(root / TABLE_FILES["crc_gen_matrix"], params.K, params.P),
        rnti_bits=load_vector(root / TABLE_FILES["rnti_bits"]),
        crc_interleaver_pattern=load_vector(root / TABLE_FILES["crc_interleaver_pattern"]),
        info_bit_pattern=load_vector(root / TABLE_FILES["info_bit_pattern"]),
        enc_gen_matrix=_load_matrix(root / TABLE_FILES["enc_gen_matrix"], params.N, params.N),
        rate_match_pattern=load_vector(root / TABLE_FILES["rate_match_pattern"]),
        reference_bits=load_vector(root / TABLE_FILES["reference_bits"]),
    )
    tables.validate(params)
    return params, tables


def _write_vector(path: Path, values: np.ndarray) -> None:
    path.write_text(",".join(str(int(v)) for v in np.ravel(values)) + "\n")


def save_testcase(path: Union[str, Path], params: EncoderParams, tables: EncoderTables) -> Path:
    """Write a test-case directory readable by `load_testcase`."""

    tables.validate(params)
    root = Path(path)
    root.mkdir(parents=True, exist_ok=True)
    _write_vector(root / PARAMS_FILE, np.array([params.A, params.P, params.K, params.E, params.N]))
    for name, filename in TABLE_FILES.items():
        values = getattr(tables, name)
        if values.ndim == 2:
            values = values.T
        _write_vector(root / filename, values)
    return root


__all__ = ["TABLE_FILES", "load_testcase", "load_vector", "save_testcase"]
