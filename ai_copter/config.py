"""
Game and training parameters.

Parameters are grouped in frozen dataclasses and can be read from an INI
file laid out like NEAT's Config_Feedforward.txt:

    [Cave]
    min_radius = 70
    ...
    [GeneticAlgorithm]
    population_size = 50

Keys that are left out keep their defaults.
"""

import configparser
import dataclasses
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .errors import ConfigurationError

DEFAULT_RADIUSES = (100.0, 200.0, 300.0, 350.0, 250.0, 270.0, 220.0, 200.0,
                    300.0, 240.0, 150.0, 250.0, 50.0, 120.0, 100.0, 60.0)
DEFAULT_DYS = (0.0, 50.0, -50.0, 10.0, 20.0, 100.0, 40.0, 0.0,
               50.0, -50.0, 10.0, 20.0, 100.0, 40.0, 60.0, 120.0)
DEFAULT_XS = tuple(float(x) for x in range(-100, 1500, 100))

# Points on the copter body (relative to its anchor) probed against the cave walls
DEFAULT_COLLISION_OFFSETS = ((-1.0, -4.0), (0.0, -30.0), (-52.0, -30.0), (-63.0, -23.0), (-44.0, -3.0))


@dataclass(frozen=True)
class CaveConfig:
    width: float = 1200.0
    height: float = 800.0
    scroll_speed: float = 0.5  # pixels per millisecond
    min_radius: float = 70.0
    radius_variation: float = 80.0
    dy_variation: float = 160.0
    x_spacing: float = 100.0
    max_regeneration_attempts: int = 1000
    initial_radiuses: Tuple[float, ...] = DEFAULT_RADIUSES
    initial_dys: Tuple[float, ...] = DEFAULT_DYS
    initial_xs: Tuple[float, ...] = DEFAULT_XS

    @property
    def sample_count(self):
        return len(self.initial_xs)

    def validate(self):
        if self.height <= 0 or self.width <= 0:
            raise ConfigurationError("cave width and height must be positive")
        if self.min_radius < 0 or self.radius_variation < 0 or self.dy_variation < 0:
            raise ConfigurationError("cave radius and dy variations must be non-negative")
        if self.min_radius > self.height / 2:
            raise ConfigurationError(
                f"min_radius {self.min_radius} does not fit in half the cave height {self.height / 2}"
            )
        if self.x_spacing <= 0:
            raise ConfigurationError("x_spacing must be positive")
        if self.max_regeneration_attempts < 1:
            raise ConfigurationError("max_regeneration_attempts must be >= 1")
        if self.sample_count < 2:
            raise ConfigurationError("the cave needs at least two samples")


@dataclass(frozen=True)
class CopterConfig:
    x: float = 500.0
    start_y: float = 300.0
    start_y_speed: float = 0.0
    max_y_speed: float = 5.0
    gravity: float = 0.3
    thrust: float = 1.6
    time_scaling: float = 15.0  # milliseconds per unit of speed
    distance_rate: float = 0.02  # distance per millisecond alive
    collision_offsets: Tuple[Tuple[float, float], ...] = DEFAULT_COLLISION_OFFSETS
    trail_length: int = 11
    trail_interval: float = 10.0

    def validate(self):
        if self.max_y_speed <= 0:
            raise ConfigurationError("max_y_speed must be positive")
        if self.time_scaling <= 0:
            raise ConfigurationError("time_scaling must be positive")
        if not self.collision_offsets:
            raise ConfigurationError("at least one collision offset is required")
        if self.trail_length < 1:
            raise ConfigurationError("trail_length must be >= 1")


@dataclass(frozen=True)
class GeneticConfig:
    population_size: int = 50
    retained_fraction: float = 0.2
    crossover_fraction: float = 0.5
    mutation_probability: float = 0.05
    mutation_scale: float = 0.1
    look_ahead: int = 6
    hidden_layers: Tuple[int, ...] = (5, 5)
    outputs: int = 1

    def validate(self):
        if self.population_size < 2:
            raise ConfigurationError("population_size must be >= 2")
        for name in ("retained_fraction", "crossover_fraction", "mutation_probability"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{name} must lie in [0, 1], got {value}")
        retained = int(self.population_size * self.retained_fraction)
        offspring = self.population_size - retained
        if offspring > retained * (retained - 1):
            raise ConfigurationError(
                f"{retained} retained parents cannot produce {offspring} offspring "
                f"from unique parent pairs; raise retained_fraction"
            )
        if self.mutation_scale < 0:
            raise ConfigurationError("mutation_scale must be non-negative")
        if self.look_ahead < 1:
            raise ConfigurationError("look_ahead must be >= 1")
        if any(size < 1 for size in self.hidden_layers):
            raise ConfigurationError("hidden layer sizes must be >= 1")
        if self.outputs not in (1, 2):
            raise ConfigurationError("outputs must be 1 (threshold) or 2 (compare)")

    @property
    def input_size(self):
        # ceiling, floor and distance per look-ahead sample + own y and speed
        return 3 * self.look_ahead + 2

    @property
    def layer_sizes(self):
        return [self.input_size, *self.hidden_layers, self.outputs]


@dataclass(frozen=True)
class TrainingConfig:
    tick_ms: float = 16.0
    max_ticks: int = 20000
    fitness_threshold: Optional[float] = 5000.0
    moving_average_window: int = 10
    workers: int = 0
    seed: Optional[int] = None

    def validate(self):
        if self.tick_ms <= 0:
            raise ConfigurationError("tick_ms must be positive")
        if self.max_ticks < 1:
            raise ConfigurationError("max_ticks must be >= 1")
        if self.moving_average_window < 1:
            raise ConfigurationError("moving_average_window must be >= 1")
        if self.workers < 0:
            raise ConfigurationError("workers must be >= 0")


SECTIONS = {
    "Cave": "cave",
    "Copter": "copter",
    "GeneticAlgorithm": "genetic",
    "Training": "training",
}


@dataclass(frozen=True)
class GameConfig:
    cave: CaveConfig = field(default_factory=CaveConfig)
    copter: CopterConfig = field(default_factory=CopterConfig)
    genetic: GeneticConfig = field(default_factory=GeneticConfig)
    training: TrainingConfig = field(default_factory=TrainingConfig)

    def __post_init__(self):
        self.cave.validate()
        self.copter.validate()
        self.genetic.validate()
        self.training.validate()
        if self.genetic.look_ahead > self.cave.sample_count:
            raise ConfigurationError(
                f"look_ahead {self.genetic.look_ahead} exceeds the {self.cave.sample_count} cave samples"
            )
        if not 0 <= self.copter.start_y <= self.cave.height:
            raise ConfigurationError("start_y must lie inside the cave height")

        # Once the initial samples are recycled the window spans [< 0, >= (n - 2) * x_spacing]
        probe_xs = [self.copter.x + dx for dx, _ in self.copter.collision_offsets]
        reach = (self.cave.sample_count - 2) * self.cave.x_spacing
        if min(probe_xs) < 0 or max(probe_xs) > reach:
            raise ConfigurationError(
                f"copter probes span x in [{min(probe_xs)}, {max(probe_xs)}] but a regenerated "
                f"cave only guarantees [0, {reach}]"
            )
        if min(probe_xs) < self.cave.initial_xs[0] or max(probe_xs) > self.cave.initial_xs[-1]:
            raise ConfigurationError("the initial cave samples do not cover the copter probes")

    @classmethod
    def from_file(cls, path):
        parser = configparser.ConfigParser()
        with open(path) as f:
            parser.read_file(f)
        return cls.from_parser(parser)

    @classmethod
    def from_string(cls, text):
        parser = configparser.ConfigParser()
        parser.read_string(text)
        return cls.from_parser(parser)

    @classmethod
    def from_parser(cls, parser):
        unknown = set(parser.sections()) - set(SECTIONS)
        if unknown:
            raise ConfigurationError(f"unknown config sections: {sorted(unknown)}")

        groups = {}
        for section, attr in SECTIONS.items():
            group_cls = cls.__dataclass_fields__[attr].default_factory
            if parser.has_section(section):
                groups[attr] = _read_section(group_cls, parser[section])
            else:
                groups[attr] = group_cls()
        return cls(**groups)


def _read_section(group_cls, section):
    fields = {f.name: f for f in dataclasses.fields(group_cls)}
    values = {}
    for key, raw in section.items():
        if key not in fields:
            raise ConfigurationError(f"unknown key '{key}' in [{section.name}]")
        default = fields[key].default
        try:
            values[key] = _parse_value(raw, default)
        except ValueError as e:
            raise ConfigurationError(f"bad value for '{key}' in [{section.name}]: {raw!r}") from e
    return group_cls(**values)


def _parse_value(raw, default):
    raw = raw.strip()
    if isinstance(default, tuple):
        return _parse_tuple(raw, default)
    if raw.lower() == "none":
        return None
    if default is None:
        # only the seed defaults to None
        return int(raw)
    if isinstance(default, bool):
        if raw.lower() in ("true", "yes", "1"):
            return True
        if raw.lower() in ("false", "no", "0"):
            return False
        raise ValueError(raw)
    if isinstance(default, int):
        return int(raw)
    return float(raw)


def _parse_tuple(raw, default):
    """Parse "1, 2, 3" or "-1 -4; 0 -30" (semicolon separated pairs)."""
    if not raw:
        return ()
    if default and isinstance(default[0], tuple):
        return tuple(
            tuple(float(v) for v in pair.replace(",", " ").split())
            for pair in raw.split(";")
            if pair.strip()
        )
    items = [v for v in raw.replace(",", " ").split()]
    if default and isinstance(default[0], int) and not isinstance(default[0], bool):
        return tuple(int(v) for v in items)
    return tuple(float(v) for v in items)
