import numpy as np
import pytest

from ai_copter.cave import Cave
from ai_copter.config import CaveConfig, CopterConfig
from ai_copter.copter import Copter
from ai_copter.network import Network
from ai_copter.strategy import (
    CompareControl,
    HumanControl,
    RandomControl,
    ThresholdControl,
    encode_input,
    network_control,
)


@pytest.fixture
def cave(rng):
    return Cave.from_config(CaveConfig(), rng)


@pytest.fixture
def copter():
    return Copter.from_config(CopterConfig(), CaveConfig())


def test_encode_input_layout(cave, copter):
    encoded = encode_input(cave, copter, 2)
    assert encoded.shape == (8,)
    # first upcoming sample: x=500, radius=220, dy=40 in an 800 high cave
    assert encoded[0] == pytest.approx((400 - 220 - 40) / 800)
    assert encoded[1] == pytest.approx((400 + 220 - 40) / 800)
    assert encoded[2] == pytest.approx(0.0)
    # second: x=600, radius=200, dy=0
    assert encoded[3] == pytest.approx(200 / 800)
    assert encoded[4] == pytest.approx(600 / 800)
    assert encoded[5] == pytest.approx(100 / 1200)
    assert encoded[6] == pytest.approx(300 / 800)
    assert encoded[7] == pytest.approx(0.5)  # zero speed is the middle of [-5, 5]


def test_human_control_follows_input(cave, copter):
    human = HumanControl()
    assert human.is_human
    assert human.decide(human.encode(cave, copter)) is False
    human.thrust_on()
    assert human.decide(None) is True
    human.set_thrust(False)
    assert human.decide(None) is False


def test_random_control_is_reproducible(cave, copter):
    a = RandomControl(np.random.default_rng(3))
    b = RandomControl(np.random.default_rng(3))
    assert [a.decide(None) for _ in range(50)] == [b.decide(None) for _ in range(50)]
    assert RandomControl(np.random.default_rng(3), probability=0.0).decide(None) is False
    assert RandomControl(np.random.default_rng(3), probability=1.0).decide(None) is True


def bias_only_network(n_inputs, biases):
    matrix = np.zeros((len(biases), n_inputs + 1))
    matrix[:, -1] = biases
    return Network([matrix])


def test_threshold_control(cave, copter):
    # sigmoid(0) = 0.5 is not above the threshold
    control = network_control(bias_only_network(8, [0.0]), 2)
    assert isinstance(control, ThresholdControl)
    assert control.decide(control.encode(cave, copter)) is False

    control = network_control(bias_only_network(8, [1.0]), 2)
    assert control.decide(control.encode(cave, copter)) is True


def test_compare_control(cave, copter):
    control = network_control(bias_only_network(8, [1.0, -1.0]), 2)
    assert isinstance(control, CompareControl)
    assert not control.is_human
    assert control.decide(control.encode(cave, copter)) is True

    control = network_control(bias_only_network(8, [-1.0, 1.0]), 2)
    assert control.decide(control.encode(cave, copter)) is False


def test_unsupported_output_count():
    with pytest.raises(ValueError):
        network_control(bias_only_network(8, [0.0, 0.0, 0.0]), 2)
