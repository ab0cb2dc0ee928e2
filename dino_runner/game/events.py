# dino_runner/game/events.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto


class InputAction(Enum):
    """Abstract actions produced by the host's input mapping."""
    JUMP_PRESSED = auto()
    JUMP_RELEASED = auto()
    DUCK_PRESSED = auto()
    DUCK_RELEASED = auto()
    RESTART_REQUESTED = auto()
    VISIBILITY_LOST = auto()
    VISIBILITY_REGAINED = auto()


class SoundCue(Enum):
    BUTTON_PRESS = auto()
    HIT = auto()
    ACHIEVEMENT_REACHED = auto()


@dataclass(frozen=True)
class ScoreChanged:
    current_score: int       # displayed (real) distance
    is_new_high_score: bool
