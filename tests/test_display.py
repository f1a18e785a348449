import os

import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

pygame = pytest.importorskip("pygame")

from ai_copter import display  # noqa: E402
from ai_copter.evolution import EvolutionStats  # noqa: E402
from ai_copter.game import Game  # noqa: E402
from ai_copter.strategy import HumanControl  # noqa: E402


def test_y_offsets():
    assert display.get_y_offsets(8, 4, 2) == [0, 4, 16, 36, 64, 100, 144, 196]
    assert display.get_y_offsets(3, 1000) == [0, 750, 750]


def test_draw_frame_off_screen(flat_config, rng):
    game = Game(flat_config, rng)
    game.step(16)
    win = pygame.Surface((1200, 800))
    stats = EvolutionStats(generation=3, best=10.0, average=5.0, stdev=1.0, moving_average=8.0)

    display.draw_frame(win, game.snapshot(), stats)

    # darkest cave layer reaches down to y = 300 - 196
    darkest = display.hsl(display.CAVE_HUE, 100, display.CAVE_LIGHTNESSES[-1])
    assert tuple(win.get_at((600, 10)))[:3] == tuple(darkest)[:3]
    assert tuple(win.get_at((600, 400)))[:3] != tuple(darkest)[:3]


def test_draw_dead_copter(flat_config, rng):
    game = Game(flat_config, rng)
    game.run(16, max_ticks=1000)
    win = pygame.Surface((1200, 800))
    display.draw_frame(win, game.snapshot())
    x, y = game.copters[0].hit_point
    assert tuple(win.get_at((int(x), int(y))))[:3] == display.HIT_COLOR


def test_keyboard_drives_human_thrust():
    try:
        pygame.display.init()
    except pygame.error:
        pytest.skip("no video driver available")

    human = HumanControl()
    pygame.event.clear()
    pygame.event.post(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_SPACE))
    assert display.handle_events(human) is True
    assert human.engaged

    pygame.event.post(pygame.event.Event(pygame.KEYUP, key=pygame.K_SPACE))
    assert display.handle_events(human) is True
    assert not human.engaged

    pygame.event.post(pygame.event.Event(pygame.QUIT))
    assert display.handle_events(human) is False
    pygame.display.quit()
