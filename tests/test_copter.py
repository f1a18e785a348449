import pytest

from ai_copter.config import CaveConfig, CopterConfig
from ai_copter.copter import Copter, Trail


@pytest.fixture
def copter():
    return Copter.from_config(CopterConfig(), CaveConfig())


def test_gravity_pulls_down(copter):
    copter.update_speed(15)
    assert copter.y_speed == pytest.approx(0.3)


def test_thrust_pushes_up(copter):
    copter.thrust_on()
    copter.update_speed(15)
    assert copter.y_speed == pytest.approx(0.3 - 1.6)


def test_speed_is_clamped(copter):
    for _ in range(100):
        copter.update_speed(16)
    assert copter.y_speed == 5.0

    copter.thrust_on()
    for _ in range(100):
        copter.update_speed(16)
    assert copter.y_speed == -5.0


def test_position_follows_speed_and_is_clamped(copter):
    copter.y_speed = 3.0
    copter.update_position(30)
    assert copter.y == pytest.approx(306.0)

    copter.y_speed = 5.0
    for _ in range(1000):
        copter.update_position(16)
    assert copter.y == copter.max_y == 800.0

    copter.y_speed = -5.0
    for _ in range(1000):
        copter.update_position(16)
    assert copter.y == 0


def test_distance_depends_on_time_only(copter):
    copter.update(16)
    assert copter.distance == pytest.approx(0.32)
    copter.y_speed = -5.0
    copter.update(16)
    assert copter.distance == pytest.approx(0.64)


def test_collision_points_in_order(copter):
    points = copter.collision_points()
    assert points[0] == (499.0, 296.0)
    assert points[1] == (500.0, 270.0)
    assert len(points) == 5


def test_death_is_a_one_way_latch(copter):
    copter.update(16)
    copter.die((480.0, 290.0))
    y, speed, distance = copter.y, copter.y_speed, copter.distance

    for _ in range(10):
        copter.thrust_on()
        copter.update(10)

    assert copter.dead
    assert not copter.alive
    assert (copter.y, copter.y_speed, copter.distance) == (y, speed, distance)
    # dead copters drift with the cave
    assert copter.x == pytest.approx(500.0 - 10 * 0.5 * 10)
    assert copter.hit_point == pytest.approx((480.0 - 50.0, 290.0))


def test_trail_skips_short_ticks_and_scrolls():
    trail = Trail(max_length=3, interval=10, scroll_speed=0.5)
    trail.update(100, 100, 5)
    assert len(trail) == 0

    trail.update(100, 100, 20)
    assert list(trail.positions) == [[60, 95]]

    trail.update(100, 110, 20)
    assert list(trail.positions) == [[50, 95], [60, 105]]

    for _ in range(5):
        trail.update(100, 100, 20)
    assert len(trail) == 3
