"""Small numeric helpers shared by the simulation and the genetic algorithm."""

import statistics

import numpy as np

from .errors import DegenerateInputError, DimensionError, ResourceExhaustionError

# 1 / (1 + exp(-x)) rounds to exactly 1.0 in float64 once x exceeds about 36.7
SIGMOID_CLIP = 36.0


def mat_vec(matrix, vector):
    """Multiply a (rows, cols) matrix by a vector of length cols."""
    matrix = np.asarray(matrix, dtype=float)
    vector = np.asarray(vector, dtype=float)
    if matrix.ndim != 2 or vector.ndim != 1 or matrix.shape[1] != vector.shape[0]:
        raise DimensionError(
            f"cannot multiply matrix {matrix.shape} by vector {vector.shape}"
        )
    return matrix @ vector


def relu(x):
    return np.maximum(x, 0.0)


def sigmoid(x):
    """Logistic function, strictly inside (0, 1) for every finite input."""
    x = np.clip(x, -SIGMOID_CLIP, SIGMOID_CLIP)
    return 1.0 / (1.0 + np.exp(-x))


def mean(values):
    values = list(values)
    if not values:
        raise DegenerateInputError("mean of an empty sequence")
    return statistics.mean(values)


def pstdev(values):
    """Population standard deviation; a single value has zero spread."""
    values = list(values)
    if not values:
        raise DegenerateInputError("standard deviation of an empty sequence")
    if len(values) == 1:
        return 0.0
    return statistics.pstdev(values)


def moving_average(values, window):
    """Mean of the last `window` values."""
    if window < 1:
        raise DegenerateInputError(f"moving average window must be >= 1, got {window}")
    values = list(values)
    if not values:
        raise DegenerateInputError("moving average of an empty sequence")
    return mean(values[-window:])


def rescale(value, low, high):
    """Map `value` from [low, high] onto [0, 1] (no clipping)."""
    if high == low:
        raise DegenerateInputError(f"cannot rescale over a zero-width range [{low}, {high}]")
    return (value - low) / (high - low)


def sample_without_replacement(n, k, rng):
    """Draw `k` distinct indices out of range(n)."""
    if k < 0 or k > n:
        raise ResourceExhaustionError(f"cannot sample {k} distinct elements out of {n}")
    if k == 0:
        return []
    return [int(i) for i in rng.choice(n, size=k, replace=False)]


def k_unique_pairs(n, k, rng, ordered=False):
    """Return `k` pairwise distinct index pairs (i, j), i != j, drawn from range(n).

    Unordered pairs are returned with i < j, and at most n*(n-1)/2 exist.
    With `ordered=True`, (i, j) and (j, i) count as different pairs, so
    up to n*(n-1) can be drawn.
    """
    available = n * (n - 1) if ordered else n * (n - 1) // 2
    if k < 0 or k > available:
        raise ResourceExhaustionError(
            f"cannot draw {k} unique pairs from {n} elements ({available} available)"
        )

    pairs = []
    for code in sample_without_replacement(available, k, rng):
        if ordered:
            # Row i holds the n-1 partners j != i
            i, rest = divmod(code, n - 1)
            j = rest if rest < i else rest + 1
        else:
            i, j = _unordered_pair(code, n)
        pairs.append((i, j))
    return pairs


def _unordered_pair(code, n):
    """Decode a combination index into the pair (i, j), i < j, in lexicographic order."""
    i = 0
    row = n - 1
    while code >= row:
        code -= row
        i += 1
        row -= 1
    return i, i + 1 + code
