import dataclasses

import numpy as np
import pytest

from dl_polar_enc import config
from dl_polar_enc.config import EncoderParams
from dl_polar_enc.errors import ShapeError
from dl_polar_enc.eval.make_testcase import generate_tables
from dl_polar_enc.nr.polar import EncoderTables, compare, deinterleave, encode_dl, format_stages
from dl_polar_enc.polar.polar import extract_info


def _small_case(reference=None):
    params = EncoderParams(A=3, P=2, K=4, E=8, N=8)
    tables = EncoderTables(
        info_bits=np.array([1, 0, 1]),
        crc_gen_matrix=np.array([[1, 0], [1, 1], [0, 0], [0, 0]]),
        rnti_bits=np.array([1, 1]),
        crc_interleaver_pattern=np.array([4, 3, 2, 1, 0]),
        info_bit_pattern=np.array([1, 0, 2, 0, 3, 4, 0, 5]),
        enc_gen_matrix=np.eye(8, dtype=np.int8),
        rate_match_pattern=np.arange(8),
        reference_bits=np.array([0, 0, 1, 0, 1, 0, 0, 1]) if reference is None else reference,
    )
    return params, tables


def test_small_case_stage_by_stage():
    params, tables = _small_case()
    result = encode_dl(params, tables)
    np.testing.assert_array_equal(result.crc_bits, [0, 1])
    np.testing.assert_array_equal(result.scrambled_crc_bits, [1, 0])
    np.testing.assert_array_equal(result.info_crc_bits, [1, 0, 1, 1, 0])
    np.testing.assert_array_equal(result.interleaved_bits, [0, 1, 1, 0, 1])
    np.testing.assert_array_equal(result.frozen_bits, [0, 0, 1, 0, 1, 0, 0, 1])
    np.testing.assert_array_equal(result.encoded_bits, result.frozen_bits)
    np.testing.assert_array_equal(result.rate_matched, result.encoded_bits)
    assert result.mismatches == 0
    assert result.ok


def test_small_case_single_mismatch():
    params, tables = _small_case(reference=np.array([0, 0, 1, 0, 1, 0, 1, 1]))
    result = encode_dl(params, tables)
    assert result.mismatches == 1
    assert not result.ok


def test_compare():
    assert compare(np.array([0, 1, 1]), np.array([0, 1, 1])) == 0
    assert compare(np.array([0, 1, 1]), np.array([1, 0, 1])) == 2
    with pytest.raises(ShapeError):
        compare(np.array([0, 1]), np.array([0, 1, 1]))


def test_default_config_is_deterministic_and_self_consistent():
    params = config.get_config()
    tables = generate_tables(params)
    first = encode_dl(params, tables)
    second = encode_dl(params, tables)
    np.testing.assert_array_equal(first.rate_matched, second.rate_matched)
    assert first.mismatches == 0

    assert first.crc_bits.shape == (params.P,)
    assert first.frozen_bits.shape == (params.N,)
    assert first.rate_matched.shape == (params.E,)
    for bits in first.stages().values():
        assert set(np.unique(bits)) <= {0, 1}

    np.testing.assert_array_equal(
        deinterleave(first.interleaved_bits, tables.crc_interleaver_pattern), first.info_crc_bits
    )
    np.testing.assert_array_equal(
        extract_info(first.frozen_bits, tables.info_bit_pattern), first.interleaved_bits
    )


def test_repetition_configuration():
    params = dataclasses.replace(config.get_config(), E=200, seed=9)
    tables = generate_tables(params, rnti_len=24)
    result = encode_dl(params, tables)
    assert result.rate_matched.shape == (200,)
    np.testing.assert_array_equal(result.rate_matched[128:], result.rate_matched[:72])


def test_tables_are_read_only():
    _, tables = _small_case()
    with pytest.raises(ValueError):
        tables.info_bits[0] = 0
    with pytest.raises(dataclasses.FrozenInstanceError):
        tables.info_bits = np.zeros(3)


def test_validate_rejects_inconsistent_tables():
    params, tables = _small_case()
    with pytest.raises(ShapeError):
        encode_dl(dataclasses.replace(params, K=5), tables)
    with pytest.raises(ShapeError):
        encode_dl(params, dataclasses.replace(tables, rnti_bits=np.array([1, 0, 1])))
    with pytest.raises(ShapeError):
        encode_dl(params, dataclasses.replace(tables, info_bit_pattern=np.array([1, 1, 2, 0, 3, 4, 0, 5])))
    with pytest.raises(IndexError):
        encode_dl(params, dataclasses.replace(tables, crc_interleaver_pattern=np.array([4, 3, 2, 1, 1])))
    with pytest.raises(IndexError):
        encode_dl(params, dataclasses.replace(tables, rate_match_pattern=np.array([0, 1, 2, 3, 4, 5, 6, 8])))


def test_tables_reject_non_binary_bits():
    params, tables = _small_case()
    with pytest.raises(ValueError):
        dataclasses.replace(tables, info_bits=np.array([1, 2, 1]))


def test_format_stages_lists_every_vector():
    params, tables = _small_case()
    lines = format_stages(encode_dl(params, tables))
    assert lines[0] == "crc_bits:"
    assert lines[1] == "0 1"
    assert "frozen_bits:" in lines
    assert len(lines) == 14


def test_tables_reject_float_patterns():
    _, tables = _small_case()
    with pytest.raises(IndexError):
        dataclasses.replace(tables, crc_interleaver_pattern=np.array([4.0, 3.0, 2.0, 1.0, 0.0]))
    with pytest.raises(IndexError):
        dataclasses.replace(tables, rate_match_pattern=np.linspace(0, 7, 8))
    with pytest.raises(ShapeError):
        dataclasses.replace(tables, info_bits=np.array([[1, 0, 1]]))


def test_generate_tables_rejects_poly_of_wrong_degree():
    params = dataclasses.replace(config.get_config(), crc_poly="0x61")
    assert params.crc_bits == 6
    with pytest.raises(ShapeError):
        generate_tables(params)
