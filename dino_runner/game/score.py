# dino_runner/game/score.py
from __future__ import annotations
import logging
from typing import List

from .config import (
    MAX_DISTANCE_UNITS, ACHIEVEMENT_DISTANCE, DISTANCE_COEFFICIENT,
    FLASH_DURATION_MS, FLASH_ITERATIONS,
)
from .geometry import round_half_up

logger = logging.getLogger(__name__)

HIGH_SCORE_PREFIX = ("H", "I", " ")


def get_actual_distance(distance: float) -> int:
    """Pixel distance -> displayed score units."""
    return round_half_up(distance * DISTANCE_COEFFICIENT) if distance else 0


class ScoreTracker:
    """
    Digit display for the current run and the session high score.
    - the digit width starts at MAX_DISTANCE_UNITS and only ever grows
    - every ACHIEVEMENT_DISTANCE units the score flashes for FLASH_ITERATIONS
      on/off cycles; digits are frozen (and hidden on the "off" half) meanwhile
    """
    def __init__(self):
        self.max_score_units = MAX_DISTANCE_UNITS
        self.max_score = 10 ** self.max_score_units - 1
        self.distance = 0
        self.digits: List[str] = self._pad(0)
        self.high_score = 0
        self.achievement = False
        self.flash_timer = 0.0
        self.flash_iterations = 0
        self.paint = True
        self._last_achievement = 0

    def _pad(self, value: int) -> List[str]:
        return list(str(value).zfill(self.max_score_units))

    @property
    def high_score_digits(self) -> List[str]:
        if not self.high_score:
            return []
        return list(HIGH_SCORE_PREFIX) + self._pad(self.high_score)

    def update(self, delta_time: float, distance: float) -> bool:
        """Returns True on the tick an achievement starts (sound cue)."""
        self.paint = True
        play_sound = False

        if not self.achievement:
            actual = get_actual_distance(distance)
            self.distance = actual

            while actual > self.max_score:
                self.max_score_units += 1
                self.max_score = self.max_score * 10 + 9

            if actual > 0:
                if actual % ACHIEVEMENT_DISTANCE == 0 and actual != self._last_achievement:
                    self.achievement = True
                    self.flash_timer = 0.0
                    self.flash_iterations = 0
                    self._last_achievement = actual
                    play_sound = True
                    logger.debug("achievement reached at %d", actual)
            self.digits = self._pad(actual)
        elif self.flash_iterations < FLASH_ITERATIONS:
            self.flash_timer += delta_time
            if self.flash_timer < FLASH_DURATION_MS:
                self.paint = False
            elif self.flash_timer > FLASH_DURATION_MS * 2:
                self.flash_timer = 0.0
                self.flash_iterations += 1
        else:
            self.clear_achievement()

        return play_sound

    def clear_achievement(self):
        self.achievement = False
        self.flash_iterations = 0
        self.flash_timer = 0.0

    def set_high_score(self, distance: float) -> bool:
        """Keep the best real distance seen this session. Returns True if it improved."""
        actual = get_actual_distance(distance)
        if actual <= self.high_score:
            return False
        self.high_score = actual
        return True

    def reset(self):
        self.clear_achievement()
        self._last_achievement = 0
        self.update(0, 0)
