import numpy as np
import pytest

from ai_copter.config import CaveConfig, CopterConfig, GameConfig, GeneticConfig, TrainingConfig


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def flat_cave_config():
    """A straight tunnel: ceiling at y=300, floor at y=500, forever."""
    return CaveConfig(
        width=1200.0,
        height=800.0,
        min_radius=100.0,
        radius_variation=0.0,
        dy_variation=0.0,
        initial_radiuses=tuple([100.0] * 16),
        initial_dys=tuple([0.0] * 16),
    )


@pytest.fixture
def flat_config(flat_cave_config):
    return GameConfig(
        cave=flat_cave_config,
        copter=CopterConfig(start_y=400.0),
        genetic=GeneticConfig(population_size=6, retained_fraction=0.5, look_ahead=2,
                              hidden_layers=(4,)),
        training=TrainingConfig(max_ticks=300, fitness_threshold=None),
    )


@pytest.fixture
def small_config():
    """Default cave, small population, short episodes."""
    return GameConfig(
        genetic=GeneticConfig(population_size=6, retained_fraction=0.5, hidden_layers=(5, 5)),
        training=TrainingConfig(max_ticks=400, fitness_threshold=None, moving_average_window=2),
    )
