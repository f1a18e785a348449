"""
Copter cave flying with neuroevolution.

Copters fly through a procedurally generated, scrolling cave; a population of
fixed topology feed-forward networks learns to steer them with a genetic
algorithm scored by distance flown.
"""

from .cave import Cave
from .config import CaveConfig, CopterConfig, GameConfig, GeneticConfig, TrainingConfig
from .copter import Copter, Trail
from .errors import (
    ConfigurationError,
    ConstructionError,
    CopterError,
    DegenerateInputError,
    DimensionError,
    ResourceExhaustionError,
)
from .evolution import Evolution, EvolutionStats, FitnessHistory, SimpleReporter
from .game import CopterState, Game, GameSnapshot
from .network import Network
from .population import Individual, Population
from .strategy import CompareControl, HumanControl, RandomControl, ThresholdControl, network_control

__version__ = "0.1.0"
