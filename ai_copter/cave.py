"""
The scrolling cave the copters fly through.

A cave is a fixed number of samples (radius, dy, x) ordered by x. Each
sample describes a cross-section of the tunnel:

    ceiling = height / 2 - radius - dy
    floor   = height / 2 + radius - dy

Between two samples the walls are linearly interpolated. The samples live in
a ring buffer: when the second sample has scrolled past x = 0 the first one
is overwritten by a freshly generated sample at the far right.
"""

import numpy as np

from .errors import ConfigurationError, ConstructionError


def y_coord_valid(radius, dy, height):
    """True if the cross-section stays inside the visible area."""
    return abs(dy) + radius <= height / 2


class Cave:
    """Ring buffer of tunnel samples with wall collision tests."""

    def __init__(self, radiuses, dys, xs, height, width, min_radius, radius_variation,
                 dy_variation, x_spacing, scroll_speed, rng, max_attempts=1000):
        if not (len(radiuses) == len(dys) == len(xs)):
            raise ConstructionError("cave coordinates differ in length")
        if len(radiuses) == 0:
            raise ConstructionError("cave coordinates have zero length")
        if len(radiuses) < 2:
            raise ConstructionError("a cave needs at least two samples")

        for r, dy in zip(radiuses, dys):
            if not y_coord_valid(r, dy, height):
                raise ConstructionError(f"sample (radius={r}, dy={dy}) does not fit in height {height}")
        if any(b <= a for a, b in zip(xs, xs[1:])):
            raise ConstructionError("cave x coordinates must be strictly increasing")

        self.radiuses = np.array(radiuses, dtype=float)
        self.dys = np.array(dys, dtype=float)
        self.xs = np.array(xs, dtype=float)
        self.start = 0  # ring index of the leftmost sample

        self.height = height
        self.width = width
        self.min_radius = min_radius
        self.radius_variation = radius_variation
        self.dy_variation = dy_variation
        self.x_spacing = x_spacing
        self.scroll_speed = scroll_speed
        self.max_attempts = max_attempts
        self.rng = rng

    @classmethod
    def from_config(cls, config, rng):
        """Build a fresh cave from a CaveConfig."""
        return cls(
            list(config.initial_radiuses),
            list(config.initial_dys),
            list(config.initial_xs),
            height=config.height,
            width=config.width,
            min_radius=config.min_radius,
            radius_variation=config.radius_variation,
            dy_variation=config.dy_variation,
            x_spacing=config.x_spacing,
            scroll_speed=config.scroll_speed,
            rng=rng,
            max_attempts=config.max_regeneration_attempts,
        )

    def __len__(self):
        """Number of samples in the ring."""
        return self.xs.shape[0]

    def _index(self, i):
        """Ring position of the i-th sample in x order."""
        return (self.start + i) % len(self)

    def ordered_xs(self):
        """Sample x coordinates in increasing order."""
        return np.roll(self.xs, -self.start)

    def samples(self):
        """List of (radius, dy, x) in increasing x."""
        return [
            (float(self.radiuses[j]), float(self.dys[j]), float(self.xs[j]))
            for j in (self._index(i) for i in range(len(self)))
        ]

    def ceiling_y(self, radius, dy):
        """Ceiling height of a cross-section."""
        return self.height / 2 - radius - dy

    def floor_y(self, radius, dy):
        """Floor height of a cross-section."""
        return self.height / 2 + radius - dy

    # ------------------------------------------------------------------
    # Scrolling and regeneration
    # ------------------------------------------------------------------

    def scroll(self, elapsed_time):
        """Move every sample left by scroll_speed * elapsed_time."""
        self.xs -= self.scroll_speed * elapsed_time

    def update_required(self):
        """True once the second sample has scrolled past x = 0."""
        return bool(self.xs[self._index(1)] < 0)

    def new_radius(self):
        """min_radius plus a uniform draw in [0, radius_variation)."""
        return self.min_radius + self.rng.uniform(0, self.radius_variation)

    def new_dy(self):
        """Random walk step from the last sample's dy."""
        previous = self.dys[self._index(len(self) - 1)]
        half = self.dy_variation / 2
        return previous + self.rng.uniform(-half, half)

    def new_x(self):
        """One x_spacing right of the last sample."""
        return self.xs[self._index(len(self) - 1)] + self.x_spacing

    def new_sample(self):
        """Draw (radius, dy) until the cross-section fits inside the cave."""
        for _ in range(self.max_attempts):
            r = self.new_radius()
            dy = self.new_dy()
            if y_coord_valid(r, dy, self.height):
                return r, dy
        raise ConfigurationError(
            f"no valid cave sample after {self.max_attempts} attempts "
            f"(min_radius={self.min_radius}, radius_variation={self.radius_variation}, "
            f"height={self.height})"
        )

    def maybe_regenerate(self):
        """Recycle leading samples that have scrolled out; return how many were replaced."""
        if self.min_radius > self.height / 2:
            raise ConfigurationError(
                f"min_radius {self.min_radius} exceeds half the cave height {self.height / 2}"
            )

        replaced = 0
        while self.update_required():
            r, dy = self.new_sample()
            x = self.new_x()
            # The first slot becomes the last one
            slot = self.start
            self.radiuses[slot] = r
            self.dys[slot] = dy
            self.xs[slot] = x
            self.start = self._index(1)
            replaced += 1
        return replaced

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def bracket(self, x):
        """Index i (in x order) such that x lies between samples i and i + 1."""
        xs = self.ordered_xs()
        i = int(np.searchsorted(xs, x, side="right")) - 1
        if i == len(xs) - 1 and x == xs[-1]:
            i -= 1
        if i < 0 or i >= len(xs) - 1:
            raise ValueError(f"x={x} is outside the cave window [{xs[0]}, {xs[-1]}]")
        return i

    def walls_at(self, x):
        """Interpolated (ceiling, floor) y at horizontal position x."""
        i = self.bracket(x)
        a = self._index(i)
        b = self._index(i + 1)
        x0, x1 = self.xs[a], self.xs[b]
        ceiling = _interpolate(
            x, x0, x1,
            self.ceiling_y(self.radiuses[a], self.dys[a]),
            self.ceiling_y(self.radiuses[b], self.dys[b]),
        )
        floor = _interpolate(
            x, x0, x1,
            self.floor_y(self.radiuses[a], self.dys[a]),
            self.floor_y(self.radiuses[b], self.dys[b]),
        )
        return float(ceiling), float(floor)

    def collides(self, x, y):
        """True if (x, y) touches or lies beyond the ceiling or the floor."""
        ceiling, floor = self.walls_at(x)
        return y <= ceiling or y >= floor

    def upcoming(self, x, count):
        """The next `count` samples at or after x, as (radius, dy, x) in x order.

        Near the right edge of the window the last `count` samples are used.
        """
        n = len(self)
        count = min(count, n)
        xs = self.ordered_xs()
        first = int(np.searchsorted(xs, x, side="left"))
        first = min(first, n - count)
        return [
            (float(self.radiuses[j]), float(self.dys[j]), float(self.xs[j]))
            for j in (self._index(i) for i in range(first, first + count))
        ]


def _interpolate(x, x0, x1, y0, y1):
    return (y0 * (x1 - x) + y1 * (x - x0)) / (x1 - x0)
