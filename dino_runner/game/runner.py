# dino_runner/game/runner.py
from __future__ import annotations
import logging
import math
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, List, Optional, Sequence, Union

from .clock import FrameScheduler
from .config import RunnerConfig, DEFAULT_WIDTH, START_X_POS
from .determinism import derive_rng, resolve_seed
from .errors import ConfigError
from .events import InputAction, ScoreChanged, SoundCue
from .horizon import Horizon, ObstacleType, OBSTACLE_TYPES, check_for_collision
from .player import Player, PlayerStatus
from .score import ScoreTracker, get_actual_distance
from .storage import HighScoreStore, MemoryHighScoreStore

logger = logging.getLogger(__name__)

OutputEvent = Union[SoundCue, ScoreChanged]

# Baked into the player, horizon and spawner geometry when the runner is built.
FIXED_SETTINGS = frozenset({
    "width", "height", "bottom_pad", "constrained_viewport", "fps", "max_obstacle_duplication",
})


class GamePhase(Enum):
    WAITING = "waiting"
    INTRO = "intro"
    PLAYING = "playing"
    CRASHED = "crashed"
    PAUSED = "paused"


@dataclass(frozen=True)
class GameState:
    phase: GamePhase
    distance_ran: float
    current_speed: float
    running_time: float
    invert_timer: float
    inverted: bool


class Runner:
    """
    Owns and drives one game session.

    The host supplies frames through a FrameScheduler; each frame runs update(),
    which drains queued inputs and then, in order: player physics, horizon,
    collision, distance/speed, score, night-mode timer. All state is mutated
    from that single callback, so a threaded host must call advance() and
    push_input() from one thread.
    """

    def __init__(self,
                 config: Optional[RunnerConfig] = None,
                 scheduler: Optional[FrameScheduler] = None,
                 seed: Optional[int] = None,
                 high_score_store: Optional[HighScoreStore] = None,
                 obstacle_types: Sequence[ObstacleType] = OBSTACLE_TYPES):
        self.config = config or RunnerConfig()
        self.scheduler = scheduler or FrameScheduler()
        self.seed = resolve_seed(seed)
        self.store = high_score_store or MemoryHighScoreStore()

        self.base_speed = self._initial_speed(self.config.speed)
        self.current_speed = self.base_speed
        self.player = Player(self.config, derive_rng(self.seed, "player"))
        self.horizon = Horizon(self.config, self.seed, obstacle_types, start_speed=self.base_speed)
        self.score = ScoreTracker()

        self.phase = GamePhase.WAITING
        self.activated = False          # the horizon scrolls once the intro has begun
        self.distance_ran = 0.0
        self.running_time = 0.0
        self.invert_timer = 0.0
        self.invert_trigger = False
        self.inverted = False
        self.play_count = 0
        self.crash_time: Optional[float] = None
        self.time: Optional[float] = None   # timestamp of the previous tick

        self.highest_score = max(0, int(self.store.load()))
        if self.highest_score:
            self.score.set_high_score(self.highest_score)

        self._inputs: Deque[InputAction] = deque()
        self._outbox: List[OutputEvent] = []
        self._frame_handle: Optional[int] = None
        self._reported_score = 0
        self.update_pending = False

        logger.debug("runner created seed=%d base_speed=%.2f", self.seed, self.base_speed)
        self.schedule_next_update()

    def _initial_speed(self, speed: float) -> float:
        # Narrow viewports run slower so obstacles stay reachable.
        if self.config.width < DEFAULT_WIDTH:
            mobile = speed * self.config.width / DEFAULT_WIDTH * self.config.mobile_speed_coefficient
            return min(mobile, speed)
        return speed

    # -------------------- Host API --------------------

    def push_input(self, action: InputAction):
        """Queue an input; it is applied at the start of the next tick."""
        self._inputs.append(action)
        self.schedule_next_update()

    def drain_events(self) -> List[OutputEvent]:
        events, self._outbox = self._outbox, []
        return events

    def snapshot(self) -> GameState:
        return GameState(
            phase=self.phase,
            distance_ran=self.distance_ran,
            current_speed=self.current_speed,
            running_time=self.running_time,
            invert_timer=self.invert_timer,
            inverted=self.inverted,
        )

    def update_config(self, **overrides):
        """
        Retune a live session, e.g. update_config(gravity=0.8, speed=8).

        The player reads the new config from its next step. A new
        initial_jump_velocity also sets drop_velocity to half of it unless one
        is given. A new speed replaces both the current and the restart speed.
        Viewport and spawner-layout settings are fixed at construction.
        """
        fixed = sorted(set(overrides) & FIXED_SETTINGS)
        if fixed:
            raise ConfigError(f"cannot change {', '.join(fixed)} on a running game")
        if "initial_jump_velocity" in overrides and "drop_velocity" not in overrides:
            overrides["drop_velocity"] = overrides["initial_jump_velocity"] / 2
        self.config = self.config.with_overrides(**overrides)

        self.player.config = self.config
        self.player.min_jump_y = self.player.ground_y - self.config.min_jump_height
        self.horizon.config = self.config

        if "speed" in overrides:
            self.base_speed = self._initial_speed(self.config.speed)
            self.current_speed = self.base_speed
        logger.info("config updated: %s", ", ".join(f"{k}={v}" for k, v in sorted(overrides.items())))

    @property
    def is_running(self) -> bool:
        return self._frame_handle is not None

    @property
    def current_score(self) -> int:
        return get_actual_distance(math.ceil(self.distance_ran))

    # -------------------- Scheduling --------------------

    def schedule_next_update(self):
        if not self.update_pending:
            self.update_pending = True
            self._frame_handle = self.scheduler.request_frame(self.update)

    def stop(self):
        """Cancel the pending tick; the next tick after a restart starts with delta 0."""
        if self._frame_handle is not None:
            self.scheduler.cancel(self._frame_handle)
        self._frame_handle = None
        self.update_pending = False
        self.time = None

    def _set_phase(self, phase: GamePhase):
        if phase is not self.phase:
            logger.info("phase %s -> %s", self.phase.value, phase.value)
            self.phase = phase

    # -------------------- Tick --------------------

    def update(self, now_ms: float):
        self.update_pending = False
        self._frame_handle = None

        delta_time = 0.0 if self.time is None else max(0.0, now_ms - self.time)
        self.time = now_ms

        while self._inputs:
            self._handle_input(self._inputs.popleft(), now_ms)

        if self.phase is GamePhase.INTRO:
            self._update_intro(delta_time)
        elif self.phase is GamePhase.PLAYING:
            self._update_playing(delta_time, now_ms)

        keep_running = (self.phase in (GamePhase.INTRO, GamePhase.PLAYING) or
                        (self.phase is GamePhase.WAITING and
                         self.player.blink_count < self.config.max_blink_count))
        if keep_running:
            self.player.update(delta_time)
            self.schedule_next_update()
        else:
            self.time = None

    def _update_intro(self, delta_time: float):
        if self.player.jumping:
            self.player.update_jump(delta_time)

        # The first landing starts the slide-in; the game starts once it is done.
        if not self.activated and self.player.jump_count >= 1:
            self.activated = True
            self.player.playing_intro = True
        if self.activated and self.player.x >= START_X_POS:
            self._start_game()

        self.horizon.update(0, self.current_speed, False)

    def _update_playing(self, delta_time: float, now_ms: float):
        if self.player.jumping:
            self.player.update_jump(delta_time)

        self.running_time += delta_time
        has_obstacles = self.running_time > self.config.clear_time
        self.horizon.update(delta_time, self.current_speed, has_obstacles, self.inverted)

        collision = has_obstacles and check_for_collision(
            self.horizon.nearest_obstacle, self.player) is not None

        if collision:
            self.game_over(now_ms)
            return

        self.distance_ran += self.current_speed * delta_time / self.config.ms_per_frame
        if self.current_speed < self.config.max_speed:
            self.current_speed = min(self.config.max_speed,
                                     self.current_speed + self.config.acceleration)

        if self.score.update(delta_time, math.ceil(self.distance_ran)):
            self._outbox.append(SoundCue.ACHIEVEMENT_REACHED)
            logger.info("achievement: %d", self.score.distance)
        if self.score.distance != self._reported_score:
            self._reported_score = self.score.distance
            self._outbox.append(ScoreChanged(self.score.distance,
                                             self.score.distance > self.score.high_score))

        self._update_night_mode(delta_time)

    def _update_night_mode(self, delta_time: float):
        if self.invert_timer > self.config.invert_fade_duration:
            self.invert_timer = 0.0
            self.invert_trigger = False
            self.invert()
        elif self.invert_timer:
            self.invert_timer += delta_time
        else:
            actual = self.current_score
            if actual > 0:
                self.invert_trigger = actual % self.config.invert_distance == 0
                if self.invert_trigger and self.invert_timer == 0:
                    self.invert_timer += delta_time
                    self.invert()

    def invert(self, reset: bool = False):
        if reset:
            self.invert_timer = 0.0
            self.invert_trigger = False
            self.inverted = False
        else:
            self.inverted = self.invert_trigger
            logger.debug("inverted=%s", self.inverted)

    # -------------------- Inputs --------------------

    def _handle_input(self, action: InputAction, now_ms: float):
        in_play = self.phase in (GamePhase.INTRO, GamePhase.PLAYING)

        if action is InputAction.JUMP_PRESSED:
            if self.phase is GamePhase.WAITING:
                self._begin()
                in_play = True
            if in_play and not self.player.jumping and not self.player.ducking:
                self._outbox.append(SoundCue.BUTTON_PRESS)
                self.player.start_jump(self.current_speed)

        elif action is InputAction.JUMP_RELEASED:
            if in_play:
                self.player.end_jump()
            elif self.phase is GamePhase.CRASHED:
                if self.crash_time is not None and now_ms - self.crash_time >= self.config.gameover_clear_time:
                    self.restart()
            elif self.phase is GamePhase.PAUSED:
                self.player.reset()
                self.play()

        elif action is InputAction.DUCK_PRESSED:
            if in_play:
                if self.player.jumping:
                    self.player.set_speed_drop()
                elif not self.player.ducking:
                    self.player.set_duck(True)

        elif action is InputAction.DUCK_RELEASED:
            if in_play:
                self.player.speed_drop = False
                self.player.set_duck(False)

        elif action is InputAction.RESTART_REQUESTED:
            if self.phase is GamePhase.CRASHED:
                self.restart()

        elif action is InputAction.VISIBILITY_LOST:
            if self.phase is GamePhase.PLAYING:
                self.stop()
                self._set_phase(GamePhase.PAUSED)

        elif action is InputAction.VISIBILITY_REGAINED:
            if self.phase is GamePhase.PAUSED:
                self.player.reset()
                self.play()

    # -------------------- Lifecycle --------------------

    def _begin(self):
        """First jump: straight into play on constrained viewports, intro otherwise."""
        if self.config.constrained_viewport:
            self.activated = True
            self.player.x = float(START_X_POS)
            self._start_game()
        else:
            self._set_phase(GamePhase.INTRO)

    def _start_game(self):
        self.player.playing_intro = False
        self.player.x = float(START_X_POS)
        self.running_time = 0.0
        self.play_count += 1
        self._set_phase(GamePhase.PLAYING)

    def play(self):
        """Resume after a pause."""
        if self.phase is GamePhase.CRASHED:
            return
        self._set_phase(GamePhase.PLAYING)
        self.player.update(0, PlayerStatus.RUNNING)
        self.schedule_next_update()

    def game_over(self, now_ms: float):
        self._outbox.append(SoundCue.HIT)
        self.stop()
        self._set_phase(GamePhase.CRASHED)
        self.score.clear_achievement()
        self.player.crash()

        final = math.ceil(self.distance_ran)
        # The flag is in displayed units; the store keeps the raw distance.
        is_new_high_score = self.score.set_high_score(final)
        if final > self.highest_score:
            self.highest_score = final
            self.store.save(final)
        self._outbox.append(ScoreChanged(get_actual_distance(final), is_new_high_score))
        logger.info("crashed at distance %d (score %d, high score %d)",
                    final, get_actual_distance(final), self.score.high_score)
        self.crash_time = now_ms

    def restart(self):
        if self.is_running:
            return
        self.play_count += 1
        self.running_time = 0.0
        self.distance_ran = 0.0
        self.current_speed = self.base_speed
        self.crash_time = None
        self._reported_score = 0
        self.score.reset()
        self.horizon.reset()
        self.player.reset()
        self.player.x = float(START_X_POS)
        self._outbox.append(SoundCue.BUTTON_PRESS)
        self.invert(reset=True)
        self._set_phase(GamePhase.PLAYING)
        self.schedule_next_update()
