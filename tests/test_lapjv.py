import itertools
import random

import pytest

from bytetrack.lapjv import AssignmentError, lapjv_internal


def _total(cost, x):
    return sum(cost[i][j] for i, j in enumerate(x))


def _best_total(cost):
    n = len(cost)
    return min(
        sum(cost[i][p[i]] for i in range(n)) for p in itertools.permutations(range(n))
    )


def _assert_consistent(x, y, n):
    assert sorted(x) == list(range(n))
    assert sorted(y) == list(range(n))
    for i, j in enumerate(x):
        assert y[j] == i


def test_empty_matrix():
    assert lapjv_internal([]) == ([], [])


def test_single_element():
    assert lapjv_internal([[5.0]]) == ([0], [0])


def test_diagonal_is_chosen_when_cheapest():
    cost = [[0, 1, 1], [1, 0, 1], [1, 1, 0]]
    x, y = lapjv_internal(cost)
    assert x == [0, 1, 2]
    assert y == [0, 1, 2]


def test_anti_diagonal():
    cost = [[1, 1, 0], [1, 0, 1], [0, 1, 1]]
    x, y = lapjv_internal(cost)
    assert x == [2, 1, 0]
    _assert_consistent(x, y, 3)


def test_all_equal_costs_give_a_permutation():
    cost = [[0.0] * 4 for _ in range(4)]
    x, y = lapjv_internal(cost)
    _assert_consistent(x, y, 4)


@pytest.mark.parametrize("seed", range(12))
@pytest.mark.parametrize("n", [2, 3, 4, 5])
def test_random_matrices_are_optimal(seed, n):
    rng = random.Random(seed * 31 + n)
    cost = [[rng.random() for _ in range(n)] for _ in range(n)]
    x, y = lapjv_internal(cost)
    _assert_consistent(x, y, n)
    assert _total(cost, x) == pytest.approx(_best_total(cost))


@pytest.mark.parametrize("seed", range(8))
def test_integer_matrices_with_ties_are_optimal(seed):
    rng = random.Random(seed)
    n = 5
    cost = [[rng.randint(0, 3) for _ in range(n)] for _ in range(n)]
    x, y = lapjv_internal(cost)
    _assert_consistent(x, y, n)
    assert _total(cost, x) == pytest.approx(_best_total(cost))


def test_extended_matrix_with_threshold_padding():
    # Two rows, one column padded the way a thresholded rectangular problem is.
    limit_half = 0.4
    cost = [
        [0.1, limit_half, limit_half],
        [0.9, limit_half, limit_half],
        [limit_half, 0.0, 0.0],
    ]
    x, y = lapjv_internal(cost)
    _assert_consistent(x, y, 3)
    assert x[0] == 0
    assert x[1] != 0
    assert _total(cost, x) == pytest.approx(_best_total(cost))


def test_non_square_matrix_raises():
    with pytest.raises(AssignmentError):
        lapjv_internal([[1.0, 2.0]])


def test_ragged_matrix_raises():
    with pytest.raises(AssignmentError):
        lapjv_internal([[1.0, 2.0], [3.0]])


def test_assignment_error_is_value_error():
    with pytest.raises(ValueError):
        lapjv_internal([[1.0], [2.0]])


def test_input_is_not_modified():
    cost = [[3.0, 1.0], [2.0, 4.0]]
    snapshot = [row[:] for row in cost]
    x, _ = lapjv_internal(cost)
    assert cost == snapshot
    assert x == [1, 0]