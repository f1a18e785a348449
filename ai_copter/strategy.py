"""
Control sources deciding, once per tick, whether a copter thrusts.

Every control source has the same two-step interface:

    encoded = control.encode(cave, copter)
    thrust = control.decide(encoded)

Human input ignores the cave entirely; network controls turn the upcoming
cave samples and the copter's own state into a normalized input vector.
"""

import numpy as np

from .mathutil import rescale


def encode_input(cave, copter, look_ahead):
    """
    Sensor vector for a network controller.

    For each of the next `look_ahead` samples: ceiling y and floor y as a
    fraction of the cave height, and horizontal distance to the copter as a
    fraction of the cave width. Then the copter's own y (fraction of height)
    and vertical speed mapped from [-max, max] onto [0, 1].
    """
    features = []
    for radius, dy, x in cave.upcoming(copter.x, look_ahead):
        features.append(rescale(cave.ceiling_y(radius, dy), 0.0, cave.height))
        features.append(rescale(cave.floor_y(radius, dy), 0.0, cave.height))
        features.append((x - copter.x) / cave.width)
    features.append(rescale(copter.y, 0.0, cave.height))
    features.append(rescale(copter.y_speed, -copter.max_y_speed, copter.max_y_speed))
    return np.array(features, dtype=float)


class HumanControl:
    """Thrust follows whatever the input collaborator last reported."""

    is_human = True

    def __init__(self):
        self.engaged = False

    def thrust_on(self):
        self.engaged = True

    def thrust_off(self):
        self.engaged = False

    def set_thrust(self, engaged):
        self.engaged = bool(engaged)

    def encode(self, cave, copter):
        return None

    def decide(self, encoded):
        return self.engaged


class RandomControl:
    """Thrusts at random; a baseline that needs no training."""

    is_human = False

    def __init__(self, rng, probability=0.2):
        self.rng = rng
        self.probability = probability

    def encode(self, cave, copter):
        return None

    def decide(self, encoded):
        return bool(self.rng.random() < self.probability)


class NetworkControl:
    """Base for controls driven by a Network's forward pass."""

    is_human = False

    def __init__(self, network, look_ahead):
        self.network = network
        self.look_ahead = look_ahead

    def encode(self, cave, copter):
        return encode_input(cave, copter, self.look_ahead)

    def decide(self, encoded):
        return self.threshold(self.network.forward(encoded))

    def threshold(self, output):
        raise NotImplementedError


class ThresholdControl(NetworkControl):
    """Single output: thrust when the sigmoid fires above 0.5."""

    def threshold(self, output):
        return bool(output[0] > 0.5)


class CompareControl(NetworkControl):
    """Two outputs: thrust when the first beats the second."""

    def threshold(self, output):
        return bool(output[0] > output[1])


def network_control(network, look_ahead):
    """Pick the decision rule matching the network's output count."""
    if network.n_outputs == 1:
        return ThresholdControl(network, look_ahead)
    if network.n_outputs == 2:
        return CompareControl(network, look_ahead)
    raise ValueError(f"no decision rule for a network with {network.n_outputs} outputs")
