import warnings

import numpy as np
import pytest

from ai_copter.errors import DegenerateInputError, DimensionError, ResourceExhaustionError
from ai_copter.mathutil import (
    k_unique_pairs,
    mat_vec,
    mean,
    moving_average,
    pstdev,
    rescale,
    sample_without_replacement,
    sigmoid,
)


def test_mat_vec():
    np.testing.assert_allclose(mat_vec([[1, 0], [0, 2]], [3, 4]), [3, 8])


def test_dimension_mismatch_is_fatal():
    with pytest.raises(DimensionError):
        mat_vec([[1, 2, 3]], [1, 2])


def test_statistics_on_empty_input():
    with pytest.raises(DegenerateInputError):
        mean([])
    with pytest.raises(DegenerateInputError):
        pstdev([])
    with pytest.raises(DegenerateInputError):
        moving_average([], 3)


def test_pstdev_single_value_is_zero():
    assert pstdev([4.0]) == 0.0
    assert pstdev([1.0, 3.0]) == pytest.approx(1.0)


def test_moving_average_uses_last_window():
    assert moving_average([1, 2, 3, 4, 5], 2) == pytest.approx(4.5)
    assert moving_average([1, 2], 10) == pytest.approx(1.5)


def test_rescale():
    assert rescale(5, 0, 10) == 0.5
    assert rescale(-5, -5, 5) == 0.0
    with pytest.raises(DegenerateInputError):
        rescale(1, 2, 2)


def test_sigmoid_midpoint():
    assert sigmoid(0.0) == 0.5


def test_sigmoid_saturates_strictly_inside_the_unit_interval():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        out = sigmoid(np.array([-1e6, -800.0, 800.0, 1e6]))
    assert np.all(out > 0.0)
    assert np.all(out < 1.0)


def test_sample_without_replacement(rng):
    picked = sample_without_replacement(10, 10, rng)
    assert sorted(picked) == list(range(10))
    with pytest.raises(ResourceExhaustionError):
        sample_without_replacement(3, 4, rng)


@pytest.mark.parametrize("n", [2, 3, 6])
def test_k_unique_pairs_all_valid_k(rng, n):
    limit = n * (n - 1) // 2
    for k in range(limit + 1):
        pairs = k_unique_pairs(n, k, rng)
        assert len(pairs) == k
        assert len(set(pairs)) == k
        assert all(0 <= i < j < n for i, j in pairs)


def test_k_unique_pairs_beyond_bound(rng):
    with pytest.raises(ResourceExhaustionError):
        k_unique_pairs(4, 7, rng)
    with pytest.raises(ResourceExhaustionError):
        k_unique_pairs(1, 1, rng)


def test_k_unique_pairs_covers_every_combination(rng):
    pairs = k_unique_pairs(5, 10, rng)
    assert set(pairs) == {(i, j) for i in range(5) for j in range(i + 1, 5)}


def test_ordered_pairs(rng):
    pairs = k_unique_pairs(4, 12, rng, ordered=True)
    assert set(pairs) == {(i, j) for i in range(4) for j in range(4) if i != j}
    with pytest.raises(ResourceExhaustionError):
        k_unique_pairs(4, 13, rng, ordered=True)
