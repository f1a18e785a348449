"""
Fixed topology feed-forward network used as the copter controller.

A network with layer sizes [n0, n1, ..., nk] has k weight matrices. Matrix i
has shape (n_i, n_{i-1} + 1); the last column multiplies a constant bias
input of 1. Hidden layers use ReLU, the output layer a logistic sigmoid.

Genomes are the matrices flattened row-major and concatenated in layer order.
"""

import numpy as np

from .errors import ConstructionError, DimensionError
from .mathutil import mat_vec, relu, sigmoid


def layer_sizes_to_shapes(layer_sizes):
    """[n0, n1, ..., nk] -> [(n1, n0 + 1), ..., (nk, n_{k-1} + 1)]"""
    layer_sizes = list(layer_sizes)
    if len(layer_sizes) < 2:
        raise ConstructionError(f"need at least two layer sizes, got {layer_sizes}")
    if any(int(n) != n or n < 1 for n in layer_sizes):
        raise ConstructionError(f"layer sizes must be positive integers, got {layer_sizes}")
    return [(int(n_out), int(n_in) + 1) for n_in, n_out in zip(layer_sizes, layer_sizes[1:])]


def shapes_to_layer_sizes(shapes):
    """Inverse of layer_sizes_to_shapes. Fails if the shapes do not chain."""
    check_shapes(shapes)
    return [shapes[0][1] - 1] + [rows for rows, _ in shapes]


def check_shapes(shapes):
    if len(shapes) == 0:
        raise DimensionError("a network needs at least one weight matrix")
    for rows, cols in shapes:
        if rows < 1 or cols < 2:
            raise DimensionError(f"invalid weight matrix shape {(rows, cols)}")
    for (rows, _), (_, cols) in zip(shapes, shapes[1:]):
        if rows + 1 != cols:
            raise DimensionError(f"layer with {rows} outputs cannot feed a matrix with {cols} columns")


def check_matrix_shapes(matrices):
    """Raise DimensionError unless the matrices form a consistent chain."""
    for m in matrices:
        if np.ndim(m) != 2:
            raise DimensionError(f"weight matrices must be 2-D, got {np.ndim(m)}-D")
    check_shapes([np.shape(m) for m in matrices])


def matrices_to_shapes(matrices):
    return [tuple(np.shape(m)) for m in matrices]


def matrices_to_layer_sizes(matrices):
    check_matrix_shapes(matrices)
    return shapes_to_layer_sizes(matrices_to_shapes(matrices))


def shapes_to_matrices(shapes):
    """Zero-filled matrices of the given shapes."""
    return [np.zeros(shape) for shape in shapes]


def genome_length(layer_sizes):
    return sum(rows * cols for rows, cols in layer_sizes_to_shapes(layer_sizes))


def flatten(matrices):
    """Concatenate all matrices row-major into one genome."""
    if len(matrices) == 0 or any(np.ndim(m) != 2 for m in matrices):
        raise DimensionError("flatten expects a non-empty list of 2-D matrices")
    return np.concatenate([np.asarray(m, dtype=float).ravel() for m in matrices])


def unflatten(genome, shapes):
    """Cut a genome back into matrices of the given shapes (chaining is not checked)."""
    genome = np.asarray(genome, dtype=float)
    if any(rows < 1 or cols < 1 for rows, cols in shapes):
        raise DimensionError(f"invalid matrix shapes {shapes}")
    total = sum(rows * cols for rows, cols in shapes)
    if genome.ndim != 1 or genome.shape[0] != total:
        raise DimensionError(f"genome of length {genome.size} does not fill shapes totalling {total}")

    matrices = []
    start = 0
    for rows, cols in shapes:
        stop = start + rows * cols
        matrices.append(genome[start:stop].reshape(rows, cols).copy())
        start = stop
    return matrices


def he_init(layer_sizes, rng):
    """Random matrices with variance 2 / fan_in (bias column included in fan_in)."""
    return [
        rng.normal(0.0, np.sqrt(2.0 / cols), size=(rows, cols))
        for rows, cols in layer_sizes_to_shapes(layer_sizes)
    ]


class Network:
    """A stack of weight matrices with ReLU hidden layers and a sigmoid output."""

    def __init__(self, matrices):
        check_matrix_shapes(matrices)
        self.matrices = [np.asarray(m, dtype=float) for m in matrices]

    @classmethod
    def random(cls, layer_sizes, rng):
        return cls(he_init(layer_sizes, rng))

    @classmethod
    def from_genome(cls, genome, layer_sizes):
        return cls(unflatten(genome, layer_sizes_to_shapes(layer_sizes)))

    @property
    def shapes(self):
        return matrices_to_shapes(self.matrices)

    @property
    def layer_sizes(self):
        return shapes_to_layer_sizes(self.shapes)

    @property
    def n_inputs(self):
        return self.matrices[0].shape[1] - 1

    @property
    def n_outputs(self):
        return self.matrices[-1].shape[0]

    def forward(self, inputs):
        x = np.asarray(inputs, dtype=float)
        if x.ndim != 1:
            raise DimensionError(f"network input must be a vector, got shape {x.shape}")
        last = len(self.matrices) - 1
        for i, m in enumerate(self.matrices):
            x = mat_vec(m, np.append(x, 1.0))
            x = sigmoid(x) if i == last else relu(x)
        return x

    def flatten(self):
        return flatten(self.matrices)
