# dino_runner/tests/test_night.py
import random

from dino_runner.game.config import MOON_PHASES, NUM_STARS, STAR_MAX_Y, MOON_WIDTH
from dino_runner.game.night import NightMode


def fade(night, activated, ticks=60):
    for _ in range(ticks):
        night.update(activated)


def test_fade_in_and_out_is_clamped():
    n = NightMode(600, random.Random(1))
    n.update(True)
    assert n.current_phase == 1
    assert n.opacity > 0
    fade(n, True)
    assert n.opacity == 1.0
    assert n.current_phase == 1      # only advances when starting from 0
    fade(n, False)
    assert n.opacity == 0.0


def test_phase_cycles_through_all_moon_phases():
    n = NightMode(600, random.Random(2))
    seen = []
    for _ in range(len(MOON_PHASES)):
        fade(n, True)
        seen.append(n.moon_frame)
        fade(n, False)
    assert n.current_phase == 0
    assert sorted(seen) == sorted(MOON_PHASES)


def test_stars_are_spread_over_segments():
    n = NightMode(600, random.Random(3))
    assert len(n.stars) == NUM_STARS
    segment = 600 // NUM_STARS
    for i, star in enumerate(n.stars):
        assert segment * i <= star.x <= segment * (i + 1)
        assert 0 <= star.y <= STAR_MAX_Y


def test_moon_drifts_and_wraps():
    n = NightMode(600, random.Random(4))
    n.opacity = 1.0
    x0 = n.x
    n.update(True)
    assert n.x < x0
    n.x = -MOON_WIDTH - 1
    n.update(True)
    assert n.x == 600


def test_reset():
    n = NightMode(600, random.Random(5))
    fade(n, True)
    n.reset()
    assert n.opacity == 0.0
    assert n.current_phase == 0
