# dino_runner/game/night.py
from __future__ import annotations
import random
from dataclasses import dataclass
from typing import List

from .config import (
    NIGHT_FADE_SPEED, MOON_WIDTH, MOON_SPEED, NUM_STARS, STAR_SPEED,
    STAR_MAX_Y, MOON_PHASES,
)
from .determinism import random_int
from .geometry import round_half_up


@dataclass
class Star:
    x: float
    y: int


class NightMode:
    """
    Moon and stars that fade in while the scene is inverted.
    - phase advances once per fade-in (7 phases, cyclic)
    - opacity moves by a fixed step per tick, clamped to [0, 1]
    """
    def __init__(self, container_width: int, rng: random.Random):
        self.container_width = container_width
        self.rng = rng
        self.x: float = container_width - 50
        self.y: int = 30
        self.current_phase = 0
        self.opacity = 0.0
        self.stars: List[Star] = []
        self.draw_stars = False
        self.place_stars()

    @property
    def moon_frame(self) -> int:
        return MOON_PHASES[self.current_phase]

    def update(self, activated: bool):
        if activated and self.opacity == 0:
            self.current_phase = (self.current_phase + 1) % len(MOON_PHASES)

        if activated:
            self.opacity = min(1.0, self.opacity + NIGHT_FADE_SPEED)
        elif self.opacity > 0:
            self.opacity = max(0.0, self.opacity - NIGHT_FADE_SPEED)

        if self.opacity > 0:
            self.x = self._update_x(self.x, MOON_SPEED)
            if self.draw_stars:
                for star in self.stars:
                    star.x = self._update_x(star.x, STAR_SPEED)
        else:
            self.opacity = 0.0
            self.place_stars()
        self.draw_stars = True

    def _update_x(self, current: float, speed: float) -> float:
        if current < -MOON_WIDTH:
            return float(self.container_width)
        return current - speed

    def place_stars(self):
        segment = round_half_up(self.container_width / NUM_STARS)
        self.stars = [
            Star(x=float(random_int(self.rng, segment * i, segment * (i + 1))),
                 y=random_int(self.rng, 0, STAR_MAX_Y))
            for i in range(NUM_STARS)
        ]

    def reset(self):
        self.current_phase = 0
        self.opacity = 0.0
        self.update(False)
