"""
One simulation episode: a cave and a cohort of copters stepped together.

Per tick, in this order:

1. every live non-human copter decides from the same cave state, and human
   copters pick up the latest input signal;
2. the cave recycles samples that scrolled out, then scrolls;
3. every copter integrates its physics and live copters are probed against
   the walls, first hit wins and becomes the death point.

The episode is over once every copter is dead.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from .cave import Cave
from .copter import Copter
from .strategy import HumanControl

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CopterState:
    x: float
    y: float
    alive: bool
    distance: float
    hit_point: Optional[Tuple[float, float]]
    trail: Tuple[Tuple[float, float], ...]


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only view of an episode handed to rendering."""

    tick: int
    copters: Tuple[CopterState, ...]
    samples: Tuple[Tuple[float, float, float], ...]
    game_over: bool


class Game:

    def __init__(self, config, rng, controls=None, executor=None):
        """
        `controls` holds one control source per copter; by default a single
        human-controlled copter. `executor` (a concurrent.futures executor)
        spreads the per-copter decisions over workers; the results are
        joined before the cave moves. Keep it for network controls only,
        random controls would draw from the shared generator out of order.
        """
        if controls is None:
            controls = [HumanControl()]
        self.config = config
        self.rng = rng
        self.executor = executor
        self.cave = Cave.from_config(config.cave, rng)
        self.copters = [
            Copter.from_config(config.copter, config.cave, control=control)
            for control in controls
        ]
        self.tick = 0
        self.game_over = len(self.copters) == 0

    @property
    def alive_count(self):
        return sum(1 for copter in self.copters if copter.alive)

    @property
    def distances(self):
        return [copter.distance for copter in self.copters]

    def _decide(self, copter):
        control = copter.control
        return control.decide(control.encode(self.cave, copter))

    def ai_step(self):
        deciding = [c for c in self.copters if c.alive and c.control is not None]
        if self.executor is not None:
            decisions = list(self.executor.map(self._decide, deciding))
        else:
            decisions = [self._decide(c) for c in deciding]

        for copter, thrust in zip(deciding, decisions):
            if thrust:
                copter.thrust_on()
            else:
                copter.thrust_off()

    def cave_step(self, elapsed_time):
        """Regenerate, scroll, then recycle whatever a long tick pushed out of the window."""
        self.cave.maybe_regenerate()
        self.cave.scroll(elapsed_time)
        self.cave.maybe_regenerate()

    def check_collision(self, copter):
        """First collision point of the copter that touches a wall, or None."""
        for x, y in copter.collision_points():
            if self.cave.collides(x, y):
                return (x, y)
        return None

    def copter_step(self, elapsed_time):
        for copter in self.copters:
            was_alive = copter.alive
            copter.update(elapsed_time)
            if not was_alive:
                continue
            hit_point = self.check_collision(copter)
            if hit_point is not None:
                copter.die(hit_point)

    def step(self, elapsed_time):
        self.ai_step()
        self.cave_step(elapsed_time)
        self.copter_step(elapsed_time)
        self.tick += 1
        self.game_over = all(copter.dead for copter in self.copters)

    def run(self, elapsed_time, max_ticks=None, on_tick=None):
        """
        Step until every copter is dead or `max_ticks` ticks have run.
        Returns True if the episode ended because everyone crashed.
        `on_tick(game)` is called after each tick; returning False stops early.
        """
        while not self.game_over:
            if max_ticks is not None and self.tick >= max_ticks:
                logger.warning("episode stopped at the %d tick cap with %d copters alive",
                               max_ticks, self.alive_count)
                return False
            self.step(elapsed_time)
            if on_tick is not None and on_tick(self) is False:
                return self.game_over
        return True

    def snapshot(self):
        copters = tuple(
            CopterState(
                x=c.x,
                y=c.y,
                alive=c.alive,
                distance=c.distance,
                hit_point=c.hit_point,
                trail=tuple(tuple(p) for p in c.trail.positions) if c.trail is not None else (),
            )
            for c in self.copters
        )
        return GameSnapshot(
            tick=self.tick,
            copters=copters,
            samples=tuple(self.cave.samples()),
            game_over=self.game_over,
        )
