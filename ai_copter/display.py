"""
pygame front end: draws game snapshots and turns keyboard / mouse input into
thrust for a human copter. Nothing in here feeds back into the simulation
except HumanControl.thrust_on() / thrust_off().

Keys: any key or mouse button = thrust (human play), F = fast mode,
Q = quit the champion viewer.
"""

import sys

import pygame

from .game import Game
from .strategy import HumanControl

pygame.font.init()  # init font

STAT_FONT = pygame.font.SysFont("bold", 30)
DEBUG_FONT = pygame.font.SysFont("bold", 18)

CAVE_HUE = 191
CAVE_LIGHTNESSES = [39, 37, 34, 30, 27, 25, 22, 20]

COPTER_COLOR = (255, 200, 40)
DEAD_COPTER_COLOR = (120, 120, 120)
TRAIL_COLOR = (255, 136, 0)
HIT_COLOR = (255, 0, 0)

# Global UX flags
FAST_MODE = False  # when True: no drawing, no frame cap (fast training)
FPS = 60


def hsl(hue, saturation, lightness):
    color = pygame.Color(0, 0, 0)
    color.hsla = (hue, saturation, lightness, 100)
    return color


def get_y_offsets(n, a, b=2, max_value=750):
    """Wall offsets for the layered cave look: a * i**b, capped at max_value."""
    return [min(a * i ** b, max_value) for i in range(n)]


_backgrounds = {}  # window size -> pre-rendered gradient


def draw_background(win):
    """Vertical sky gradient."""
    size = win.get_size()
    if size not in _backgrounds:
        width, height = size
        surface = pygame.Surface(size)
        top = hsl(285, 100, 80)
        middle = hsl(199, 100, 90)
        bottom = hsl(199, 100, 50)
        for y in range(height):
            t = y / max(1, height - 1)
            if t < 0.5:
                color = top.lerp(middle, t * 2)
            else:
                color = middle.lerp(bottom, (t - 0.5) * 2)
            pygame.draw.line(surface, color, (0, y), (width, y))
        _backgrounds[size] = surface
    win.blit(_backgrounds[size], (0, 0))


def draw_shape(win, shape, samples, color, y_offset=0):
    """Fill the region between the screen edge and the ceiling (or floor) line."""
    width, height = win.get_size()
    y_max = 0 if shape == "ceiling" else height
    half = height / 2

    points = [(0, y_max)]
    for radius, dy, x in samples:
        if shape == "ceiling":
            y = half - radius - dy - y_offset
        else:
            y = half + radius - dy + y_offset
        points.append((x, y))
    points.append((width, y_max))
    pygame.draw.polygon(win, color, points)


def draw_cave(win, samples):
    y_offsets = get_y_offsets(len(CAVE_LIGHTNESSES), 4, 2)
    for lightness, y_offset in zip(CAVE_LIGHTNESSES, y_offsets):
        color = hsl(CAVE_HUE, 100, lightness)
        draw_shape(win, "ceiling", samples, color, y_offset)
        draw_shape(win, "floor", samples, color, y_offset)


def draw_trail(win, trail):
    last = len(trail) - 1
    if last < 1:
        return
    for i in range(last, -1, -1):
        x, y = trail[i]
        fade = i / last
        color = pygame.Color(*TRAIL_COLOR).lerp((255, 255, 255), 1 - 0.6 * fade)
        pygame.draw.circle(win, color, (int(x), int(y)), max(1, int(7 * fade)))


def draw_copter(win, state):
    """Body box spanning the default collision points (anchor = front bottom)."""
    if state.alive:
        draw_trail(win, state.trail)
    color = COPTER_COLOR if state.alive else DEAD_COPTER_COLOR
    body = pygame.Rect(int(state.x) - 63, int(state.y) - 30, 63, 27)
    pygame.draw.ellipse(win, color, body)
    pygame.draw.line(win, (40, 40, 40), (body.left + 5, body.top - 4), (body.right - 5, body.top - 4), 3)

    if not state.alive and state.hit_point is not None:
        x, y = state.hit_point
        pygame.draw.circle(win, HIT_COLOR, (int(x), int(y)), 5)


def draw_text(win, text, pos, font=STAT_FONT):
    label = font.render(text, True, (255, 255, 255))
    shadow = font.render(text, True, (0, 0, 0))
    win.blit(shadow, (pos[0] + 2, pos[1] + 2))
    win.blit(label, pos)


def draw_frame(win, snapshot, stats=None):
    """Draw one snapshot (and optional EvolutionStats) without flipping the display."""
    draw_background(win)
    draw_cave(win, snapshot.samples)
    for state in snapshot.copters:
        draw_copter(win, state)

    alive = [s for s in snapshot.copters if s.alive]
    if len(snapshot.copters) == 1:
        draw_text(win, f"Distance: {int(snapshot.copters[0].distance)}", (30, 20))
    else:
        best = max(s.distance for s in snapshot.copters)
        draw_text(win, f"Distance: {int(best)}", (30, 20))
        draw_text(win, f"Alive: {len(alive)}", (30, 50))

    if stats is not None:
        draw_text(win, f"Gen: {stats.generation}", (win.get_width() - 300, 20))
        draw_text(win, f"Best: {stats.best:.1f}  Avg: {stats.average:.1f}",
                  (win.get_width() - 300, 50), DEBUG_FONT)
        draw_text(win, f"Moving avg: {stats.moving_average:.1f}",
                  (win.get_width() - 300, 70), DEBUG_FONT)

    if FAST_MODE:
        draw_text(win, "FAST", (30, win.get_height() - 30), DEBUG_FONT)


def draw_window(win, snapshot, stats=None):
    draw_frame(win, snapshot, stats)
    pygame.display.update()


def open_window(config):
    pygame.init()
    win = pygame.display.set_mode((int(config.cave.width), int(config.cave.height)))
    pygame.display.set_caption("Copter")
    return win


def handle_events(human=None):
    """Process pending events. Returns False when the window was closed or Q pressed."""
    global FAST_MODE

    for event in pygame.event.get():
        if event.type == pygame.QUIT:
            return False
        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_q:
                return False
            if human is None and event.key == pygame.K_f:
                FAST_MODE = not FAST_MODE
                print(f"[DEBUG] FAST_MODE = {FAST_MODE}")
            elif human is not None:
                human.thrust_on()
        elif event.type == pygame.MOUSEBUTTONDOWN and human is not None:
            human.thrust_on()
        elif event.type in (pygame.KEYUP, pygame.MOUSEBUTTONUP) and human is not None:
            human.thrust_off()
    return True


class TrainingViewer:
    """on_tick callback for Evolution.run that draws the episode as it trains."""

    def __init__(self, win, evolution):
        self.win = win
        self.evolution = evolution
        self.clock = pygame.time.Clock()

    def __call__(self, game):
        if not handle_events():
            pygame.quit()
            sys.exit()
        if FAST_MODE:
            return True
        self.clock.tick(FPS)
        draw_window(self.win, game.snapshot(), self.evolution.history.latest)
        return True


def play(config, rng):
    """Single human player; press a key after a crash to fly again."""
    win = open_window(config)
    clock = pygame.time.Clock()
    print("\n[INFO] Hold any key or mouse button to thrust. Q = quit\n")

    while True:
        human = HumanControl()
        game = Game(config, rng, controls=[human])
        clock.tick(FPS)
        while not game.game_over:
            elapsed = clock.tick(FPS)
            if not handle_events(human):
                pygame.quit()
                return game.copters[0].distance
            game.step(elapsed)
            draw_window(win, game.snapshot())

        print(f"[INFO] Crashed after distance {int(game.copters[0].distance)}")
        if not wait_for_restart():
            pygame.quit()
            return game.copters[0].distance


def wait_for_restart():
    while True:
        event = pygame.event.wait()
        if event.type == pygame.QUIT:
            return False
        if event.type == pygame.KEYDOWN:
            return event.key != pygame.K_q
        if event.type == pygame.MOUSEBUTTONDOWN:
            return True


def watch_winner(config, control, rng, win=None):
    """
    After training, watch the champion fly indefinitely. The cave is rebuilt
    every time it crashes.
    """
    if win is None:
        win = open_window(config)
    clock = pygame.time.Clock()
    dt = config.training.tick_ms

    print("\n[INFO] Watching champion fly. Keys: F=fast, Q=quit\n")

    game = Game(config, rng, controls=[control])
    while handle_events():
        if not FAST_MODE:
            clock.tick(FPS)
        game.step(dt)
        if game.game_over:
            print(f"[INFO] Champion crashed after distance {int(game.copters[0].distance)}")
            game = Game(config, rng, controls=[control])
            continue
        if not FAST_MODE:
            draw_window(win, game.snapshot())
    pygame.quit()
