# dino_runner/game/player.py
from __future__ import annotations
import math
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .config import (
    RunnerConfig, PLAYER_WIDTH, PLAYER_WIDTH_DUCK, PLAYER_HEIGHT, PLAYER_HEIGHT_DUCK, START_X_POS,
    INTRO_DURATION_MS, BLINK_TIMING_MS,
)
from .errors import PlayerStateError
from .geometry import CollisionBox, round_half_up


class PlayerStatus(Enum):
    WAITING = "waiting"
    RUNNING = "running"
    JUMPING = "jumping"
    DUCKING = "ducking"
    CRASHED = "crashed"


@dataclass(frozen=True)
class AnimFrames:
    frames: Tuple[int, ...]   # sprite x offsets
    ms_per_frame: float


ANIM_FRAMES: Dict[PlayerStatus, AnimFrames] = {
    PlayerStatus.WAITING: AnimFrames((44, 0), 1000 / 3),
    PlayerStatus.RUNNING: AnimFrames((88, 132), 1000 / 12),
    PlayerStatus.CRASHED: AnimFrames((220,), 1000 / 60),
    PlayerStatus.JUMPING: AnimFrames((0,), 1000 / 60),
    PlayerStatus.DUCKING: AnimFrames((264, 323), 1000 / 8),
}

RUNNING_BOXES: Tuple[CollisionBox, ...] = (
    CollisionBox(22, 0, 17, 16),
    CollisionBox(1, 18, 30, 9),
    CollisionBox(10, 35, 14, 8),
    CollisionBox(1, 24, 29, 5),
    CollisionBox(5, 30, 21, 4),
    CollisionBox(9, 34, 15, 4),
)
DUCKING_BOXES: Tuple[CollisionBox, ...] = (
    CollisionBox(1, 18, 55, 25),
)

# Delta fed to the animation when switching to the crashed pose.
CRASH_ANIM_DELTA_MS = 100


@dataclass
class Player:
    """
    The runner character. x stays put once the intro is over; y follows the jump:
    - y grows downwards, ground_y is the resting position
    - velocity is in px per 60 Hz frame, integrated against the status frame duration
    """
    config: RunnerConfig
    rng: random.Random
    x: float = 0.0
    y: float = 0.0
    velocity: float = 0.0
    status: PlayerStatus = PlayerStatus.WAITING
    jumping: bool = False
    ducking: bool = False
    reached_min_height: bool = False
    speed_drop: bool = False
    jump_count: int = 0
    playing_intro: bool = False
    current_frame: int = 0
    blink_count: int = 0
    blink_delay: float = 0.0

    _timer: float = 0.0          # time spent on the current animation frame
    _clock_ms: float = 0.0       # own accumulated clock, drives blinking
    _anim_start_ms: float = 0.0
    ground_y: float = field(init=False)
    min_jump_y: float = field(init=False)

    def __post_init__(self):
        self.ground_y = float(self.config.ground_y)
        self.y = self.ground_y
        self.min_jump_y = self.ground_y - self.config.min_jump_height
        self.update(0, PlayerStatus.WAITING)

    # -------------------- Geometry --------------------

    @property
    def width(self) -> int:
        if self.ducking and self.status is not PlayerStatus.CRASHED:
            return PLAYER_WIDTH_DUCK
        return PLAYER_WIDTH

    @property
    def height(self) -> int:
        if self.ducking and self.status is not PlayerStatus.CRASHED:
            return PLAYER_HEIGHT_DUCK
        return PLAYER_HEIGHT

    @property
    def collision_boxes(self) -> Tuple[CollisionBox, ...]:
        return DUCKING_BOXES if self.ducking else RUNNING_BOXES

    def world_boxes(self) -> List[CollisionBox]:
        return [b.translated(self.x, self.y) for b in self.collision_boxes]

    @property
    def sprite_frame(self) -> int:
        anim = ANIM_FRAMES[self.status]
        if self.status is PlayerStatus.WAITING and not self.is_blinking:
            return anim.frames[0]
        return anim.frames[self.current_frame % len(anim.frames)]

    @property
    def is_blinking(self) -> bool:
        return (self.status is PlayerStatus.WAITING and
                self._clock_ms - self._anim_start_ms >= self.blink_delay)

    # -------------------- Animation --------------------

    def update(self, delta_time: float, status: Optional[PlayerStatus] = None):
        """Advance the animation clock, optionally switching status first."""
        self._timer += delta_time
        self._clock_ms += delta_time

        if status is not None:
            self.status = status
            self.current_frame = 0
            if status is PlayerStatus.WAITING:
                self._anim_start_ms = self._clock_ms
                self._set_blink_delay()

        # Intro: slide in from the left edge.
        if self.playing_intro and self.x < START_X_POS:
            self.x = min(float(START_X_POS),
                         self.x + START_X_POS / INTRO_DURATION_MS * delta_time)

        if self.status is PlayerStatus.WAITING:
            self._blink()

        anim = ANIM_FRAMES[self.status]
        if self._timer >= anim.ms_per_frame:
            last = len(anim.frames) - 1
            self.current_frame = 0 if self.current_frame >= last else self.current_frame + 1
            self._timer = 0.0

    def _set_blink_delay(self):
        self.blink_delay = math.ceil(self.rng.random() * BLINK_TIMING_MS)

    def _blink(self):
        if self._clock_ms - self._anim_start_ms >= self.blink_delay and self.current_frame == 1:
            self._set_blink_delay()
            self._anim_start_ms = self._clock_ms
            self.blink_count += 1

    # -------------------- Jumping / ducking --------------------

    def _ensure_alive(self, op: str):
        if self.status is PlayerStatus.CRASHED:
            raise PlayerStateError(f"{op}() rejected: player has crashed")

    def start_jump(self, speed: float):
        """Start a jump; faster runs jump with a bit more initial velocity."""
        self._ensure_alive("start_jump")
        if self.jumping:
            return
        self.update(0, PlayerStatus.JUMPING)
        self.velocity = self.config.initial_jump_velocity - speed / 10
        self.jumping = True
        self.reached_min_height = False
        self.speed_drop = False

    def end_jump(self):
        """Cut the jump short (early release) once the minimum height is cleared."""
        self._ensure_alive("end_jump")
        if self.reached_min_height and self.velocity < self.config.drop_velocity:
            self.velocity = self.config.drop_velocity

    def update_jump(self, delta_time: float):
        self._ensure_alive("update_jump")
        if not self.jumping or delta_time <= 0:
            return

        frames_elapsed = delta_time / ANIM_FRAMES[self.status].ms_per_frame

        step = self.velocity * frames_elapsed
        if self.speed_drop:
            step *= self.config.speed_drop_coefficient
        self.y += round_half_up(step)

        self.velocity += self.config.gravity * frames_elapsed

        if self.y < self.min_jump_y or self.speed_drop:
            self.reached_min_height = True

        if self.y < self.config.max_jump_height or self.speed_drop:
            self.end_jump()

        if self.y > self.ground_y:
            self._land()

        self.update(delta_time)

    def set_speed_drop(self):
        """Abort the rising part of a jump and fall fast until landing."""
        self._ensure_alive("set_speed_drop")
        if not self.jumping:
            return
        self.speed_drop = True
        self.velocity = 1.0

    def set_duck(self, is_ducking: bool):
        self._ensure_alive("set_duck")
        if is_ducking and self.status is PlayerStatus.RUNNING:
            self.update(0, PlayerStatus.DUCKING)
            self.ducking = True
        elif not is_ducking and self.status is PlayerStatus.DUCKING:
            self.update(0, PlayerStatus.RUNNING)
            self.ducking = False

    def _land(self):
        duck_held = self.speed_drop
        self._reset_motion()
        self.jump_count += 1
        if duck_held:
            self.set_duck(True)

    # -------------------- Lifecycle --------------------

    def crash(self):
        self.update(CRASH_ANIM_DELTA_MS, PlayerStatus.CRASHED)

    def _reset_motion(self):
        self.y = self.ground_y
        self.velocity = 0.0
        self.jumping = False
        self.ducking = False
        self.speed_drop = False
        self.reached_min_height = False
        self.update(0, PlayerStatus.RUNNING)

    def reset(self):
        """Back to running on the ground (restart / resume)."""
        self._reset_motion()
        self.jump_count = 0
