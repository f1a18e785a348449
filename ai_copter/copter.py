"""Copter physics: gravity, thrust, distance and the one-way death latch."""

from collections import deque


class Trail:
    """Recent copter positions, scrolled along with the cave (for drawing)."""

    def __init__(self, max_length, interval, scroll_speed):
        self.positions = deque(maxlen=max_length)
        self.interval = interval
        self.scroll_speed = scroll_speed

    def update(self, x, y, elapsed_time):
        """Record a position at most once per `interval` ms."""
        if elapsed_time < self.interval:
            return

        # Stored x values move left with the cave
        shift = self.scroll_speed * elapsed_time
        for pos in self.positions:
            pos[0] -= shift

        self.positions.append([x - 40, y - 5])

    def __len__(self):
        return len(self.positions)


class Copter:
    """
    A single copter. Positive y points down (screen coordinates), so gravity
    increases ySpeed and thrust decreases it.

    Whether the copter thrusts is decided by its control source (see
    strategy.py); the game copies the decision into `give_thrust` each tick.
    """

    def __init__(self, x, y, max_y, y_speed, max_y_speed, gravity, thrust, scroll_speed,
                 collision_offsets, time_scaling=15.0, distance_rate=0.02, trail=None,
                 control=None):
        self.x = x
        self.y = y
        self.max_y = max_y
        self.y_speed = y_speed
        self.max_y_speed = max_y_speed
        self.gravity = gravity
        self.thrust = thrust
        self.scroll_speed = scroll_speed
        self.collision_offsets = [tuple(offset) for offset in collision_offsets]
        self.time_scaling = time_scaling
        self.distance_rate = distance_rate
        self.trail = trail
        self.control = control

        self.distance = 0.0
        self.give_thrust = False
        self.dead = False
        self.hit_point = None

    @classmethod
    def from_config(cls, config, cave_config, control=None):
        """Build a copter (with its trail) from CopterConfig and CaveConfig."""
        trail = Trail(config.trail_length, config.trail_interval, cave_config.scroll_speed)
        return cls(
            x=config.x,
            y=config.start_y,
            max_y=cave_config.height,
            y_speed=config.start_y_speed,
            max_y_speed=config.max_y_speed,
            gravity=config.gravity,
            thrust=config.thrust,
            scroll_speed=cave_config.scroll_speed,
            collision_offsets=config.collision_offsets,
            time_scaling=config.time_scaling,
            distance_rate=config.distance_rate,
            trail=trail,
            control=control,
        )

    @property
    def alive(self):
        """False once the copter has crashed."""
        return not self.dead

    @property
    def is_human(self):
        """True when a player, not a network, flies this copter."""
        return self.control is not None and self.control.is_human

    def thrust_on(self):
        """Start thrusting until thrust_off is called."""
        self.give_thrust = True

    def thrust_off(self):
        """Stop thrusting."""
        self.give_thrust = False

    def update_speed(self, elapsed_time):
        """Apply gravity and thrust, then clamp to max_y_speed."""
        multiplier = elapsed_time / self.time_scaling
        self.y_speed += self.gravity * multiplier
        if self.give_thrust:
            self.y_speed -= self.thrust * multiplier

        if self.y_speed > self.max_y_speed:
            self.y_speed = self.max_y_speed
        elif self.y_speed < -self.max_y_speed:
            self.y_speed = -self.max_y_speed

    def update_position(self, elapsed_time):
        """Move by y_speed and keep y inside [0, max_y]."""
        self.y += self.y_speed * (elapsed_time / self.time_scaling)

        if self.y > self.max_y:
            self.y = self.max_y
        elif self.y < 0:
            self.y = 0

    def update_distance(self, elapsed_time):
        """Distance grows with the time spent alive."""
        self.distance += elapsed_time * self.distance_rate

    def collision_points(self):
        """Absolute probe points, in the order they are tested."""
        return [(self.x + dx, self.y + dy) for dx, dy in self.collision_offsets]

    def die(self, hit_point=None):
        """Latch the copter dead. There is no way back."""
        self.dead = True
        if hit_point is not None:
            self.hit_point = hit_point

    def scroll_with_background(self, elapsed_time):
        """Dead copters drift left with the cave so they stay where they crashed."""
        shift = self.scroll_speed * elapsed_time
        self.x -= shift
        if self.hit_point is not None:
            self.hit_point = (self.hit_point[0] - shift, self.hit_point[1])

    def update(self, elapsed_time):
        """Advance one tick: physics while alive, background drift once dead."""
        if self.dead:
            self.scroll_with_background(elapsed_time)
            return

        self.update_speed(elapsed_time)
        self.update_position(elapsed_time)
        self.update_distance(elapsed_time)
        if self.trail is not None:
            self.trail.update(self.x, self.y, elapsed_time)
