import numpy as np
import pytest

from dl_polar_enc.errors import ShapeError
from dl_polar_enc.utils.seeding import seed_all
from dl_polar_enc.polar.polar import (
    construct_info_set,
    extract_info,
    info_bit_pattern,
    map_frozen,
    polar_generator_matrix,
    polar_transform,
    transform,
)


def test_generator_matrix_is_involution():
    G = polar_generator_matrix(16)
    assert G.shape == (16, 16)
    np.testing.assert_array_equal((G.astype(int) @ G) % 2, np.eye(16, dtype=int))
    # Lower triangular with ones on the diagonal and in the last row
    np.testing.assert_array_equal(np.triu(G, 1), 0)
    np.testing.assert_array_equal(G[-1], 1)


def test_transform_matches_butterfly():
    rng = seed_all(0)
    G = polar_generator_matrix(32)
    for _ in range(5):
        u = rng.integers(0, 2, size=32, dtype=np.int8)
        np.testing.assert_array_equal(transform(u, G), polar_transform(u))


def test_transform_is_linear_over_gf2():
    rng = seed_all(1)
    G = rng.integers(0, 2, size=(16, 16), dtype=np.int8)
    a = rng.integers(0, 2, size=16, dtype=np.int8)
    b = rng.integers(0, 2, size=16, dtype=np.int8)
    lhs = transform(a ^ b, G)
    rhs = transform(a, G) ^ transform(b, G)
    np.testing.assert_array_equal(lhs, rhs)
    assert set(np.unique(lhs)) <= {0, 1}


def test_transform_identity_and_zero():
    frozen = np.array([0, 0, 1, 0, 1, 0, 0, 1], dtype=np.int8)
    np.testing.assert_array_equal(transform(frozen, np.eye(8, dtype=np.int8)), frozen)
    np.testing.assert_array_equal(
        transform(np.zeros(8, dtype=np.int8), polar_generator_matrix(8)), np.zeros(8)
    )


def test_transform_rejects_bad_matrix():
    frozen = np.zeros(8, dtype=np.int8)
    with pytest.raises(ShapeError):
        transform(frozen, np.zeros((8, 4), dtype=np.int8))
    with pytest.raises(ShapeError):
        transform(frozen, np.eye(4, dtype=np.int8))


def test_map_frozen_fills_positions_in_index_order():
    bits = np.array([0, 1, 1, 0, 1], dtype=np.int8)
    pattern = np.array([1, 0, 2, 0, 3, 4, 0, 5])
    frozen = map_frozen(bits, pattern, 8)
    np.testing.assert_array_equal(frozen, [0, 0, 1, 0, 1, 0, 0, 1])


def test_map_frozen_ignores_rank_values():
    bits = np.array([1, 0, 0], dtype=np.int8)
    pattern = np.array([0, 9, 1, 4])
    np.testing.assert_array_equal(map_frozen(bits, pattern, 4), [0, 1, 0, 0])


def test_map_frozen_extract_roundtrip():
    rng = seed_all(3)
    pattern = info_bit_pattern(64, 20)
    bits = rng.integers(0, 2, size=20, dtype=np.int8)
    frozen = map_frozen(bits, pattern, 64)
    assert frozen.shape == (64,)
    np.testing.assert_array_equal(frozen[pattern == 0], 0)
    np.testing.assert_array_equal(extract_info(frozen, pattern), bits)


def test_map_frozen_rejects_count_mismatch():
    with pytest.raises(ShapeError):
        map_frozen(np.array([1, 0]), np.array([1, 0, 2, 3]), 4)
    with pytest.raises(ShapeError):
        map_frozen(np.array([1, 0]), np.array([1, 0, 2]), 4)


def test_info_bit_pattern_matches_info_set():
    for method in ("gaussian", "polarization"):
        pattern = info_bit_pattern(128, 40, method=method)
        assert np.count_nonzero(pattern) == 40
        np.testing.assert_array_equal(np.sort(pattern[pattern > 0]), np.arange(1, 41))
        np.testing.assert_array_equal(
            np.flatnonzero(pattern), construct_info_set(128, 40, method=method)
        )


def test_polarization_set_prefers_high_indices():
    info_set = construct_info_set(8, 1, method="polarization")
    np.testing.assert_array_equal(info_set, [7])


def test_construction_rejects_bad_sizes():
    with pytest.raises(ValueError):
        polar_generator_matrix(12)
    with pytest.raises(ValueError):
        info_bit_pattern(16, 0)


def test_cached_info_set_cannot_be_mutated():
    first = construct_info_set(16, 4)
    with pytest.raises(ValueError):
        first[0] = 99
    np.testing.assert_array_equal(construct_info_set(16, 4), first)
    assert 99 not in construct_info_set(16, 4)


def test_bit_rank_errors_are_shape_errors():
    with pytest.raises(ShapeError):
        map_frozen(np.zeros((2, 2), dtype=np.int8), np.array([1, 1, 1, 1]), 4)
    with pytest.raises(ShapeError):
        transform(np.zeros((2, 4), dtype=np.int8), np.eye(4, dtype=np.int8))
