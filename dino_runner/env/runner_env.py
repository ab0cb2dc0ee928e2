# dino_runner/env/runner_env.py
from __future__ import annotations
from typing import Optional, Dict, Any
import numpy as np
import gymnasium as gym
import pygame

from dino_runner.game.clock import FrameScheduler
from dino_runner.game.config import RunnerConfig
from dino_runner.game.events import InputAction
from dino_runner.game.render import draw_world
from dino_runner.game.runner import GamePhase, Runner
from dino_runner.env.observations import build_observation, OBS_DIM

NOOP, JUMP, DUCK = 0, 1, 2

# Frames allowed for the opening jump (and intro) before control is handed over.
MAX_START_FRAMES = 600


class RunnerEnv(gym.Env):
    """
    Endless runner Gymnasium environment (vector observations).
    - The game ticks at config.fps, fed fixed 1000/fps ms frames.
    - Agent acts every `frame_skip` frames (default 4) -> 15 decisions/sec.
    - Actions hold a key: 1 keeps jump pressed, 2 keeps duck pressed, 0 releases both.
    - Observation: shape (12,), float32 (see build_observation).
    """
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 60}

    def __init__(self,
                 render_mode: Optional[str] = None,
                 frame_skip: int = 4,
                 time_limit_seconds: Optional[float] = 60.0,
                 config: Optional[RunnerConfig] = None):
        super().__init__()
        assert frame_skip >= 1, "frame_skip must be >= 1"
        assert render_mode is None or render_mode in self.metadata["render_modes"]
        self.render_mode = render_mode
        self.frame_skip = int(frame_skip)
        self.config = config or RunnerConfig(constrained_viewport=True)
        self.frame_ms = self.config.ms_per_frame

        self.time_limit_decisions = None
        if time_limit_seconds is not None:
            self.time_limit_decisions = int(self.config.fps * time_limit_seconds / self.frame_skip)

        # --- Gym spaces ---
        self.action_space = gym.spaces.Discrete(3)
        low = np.array([0.0, -1.0, 0.0, 0.0] + [0.0] * (OBS_DIM - 4), dtype=np.float32)
        high = np.ones(OBS_DIM, dtype=np.float32)
        self.observation_space = gym.spaces.Box(low=low, high=high, dtype=np.float32)

        # --- Runtime state ---
        self.scheduler: Optional[FrameScheduler] = None
        self.runner: Optional[Runner] = None
        self.timestep: int = 0
        self.current_seed: Optional[int] = None
        self._jump_held = False
        self._duck_held = False

        # Rendering
        self.screen = None
        self.clock = None
        self.font = None

    # -------------------- Core API --------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None):
        super().reset(seed=seed)

        # Seeding policy (same as the game CLI):
        # - a given seed is used directly for strict reproducibility
        # - otherwise the Runner draws a fresh one
        self.scheduler = FrameScheduler()
        self.runner = Runner(self.config, self.scheduler, seed=seed)
        self.current_seed = self.runner.seed
        self.timestep = 0
        self._jump_held = False
        self._duck_held = False

        self._start_run()
        self.runner.drain_events()

        obs = self._get_obs()
        return obs, self._info()

    def step(self, action: int):
        assert self.action_space.contains(action), f"Invalid action {action}"
        assert self.runner is not None and self.scheduler is not None

        self._apply_action(int(action))

        for _ in range(self.frame_skip):
            self.scheduler.advance(self.frame_ms)
            if self.runner.phase is GamePhase.CRASHED:
                break
        self.runner.drain_events()

        crashed = self.runner.phase is GamePhase.CRASHED
        reward = -1.0 if crashed else 1.0

        self.timestep += 1
        terminated = crashed
        truncated = False
        if (self.time_limit_decisions is not None) and (self.timestep >= self.time_limit_decisions):
            truncated = True

        obs = self._get_obs()
        info = self._info()

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    # -------------------- Helpers --------------------

    def _start_run(self):
        """Press jump once and tick until the opening jump has landed in the Playing phase."""
        runner = self.runner
        runner.push_input(InputAction.JUMP_PRESSED)
        runner.push_input(InputAction.JUMP_RELEASED)
        for _ in range(MAX_START_FRAMES):
            self.scheduler.advance(self.frame_ms)
            if runner.phase is GamePhase.PLAYING and not runner.player.jumping:
                return
        raise RuntimeError("runner did not reach the Playing phase")

    def _apply_action(self, action: int):
        runner = self.runner
        if action != JUMP and self._jump_held:
            runner.push_input(InputAction.JUMP_RELEASED)
            self._jump_held = False
        if action != DUCK and self._duck_held:
            runner.push_input(InputAction.DUCK_RELEASED)
            self._duck_held = False
        if action == JUMP and not self._jump_held:
            runner.push_input(InputAction.JUMP_PRESSED)
            self._jump_held = True
        if action == DUCK and not self._duck_held:
            runner.push_input(InputAction.DUCK_PRESSED)
            self._duck_held = True

    def _get_obs(self) -> np.ndarray:
        assert self.runner is not None
        return build_observation(self.runner)

    def _info(self) -> Dict[str, Any]:
        runner = self.runner
        return {
            "seed": self.current_seed,
            "timestep": self.timestep,
            "distance": runner.distance_ran,
            "score": runner.current_score,
            "speed": runner.current_speed,
            "phase": runner.phase.value,
        }

    # -------------------- Rendering --------------------

    def render(self):
        if self.render_mode is None or self.runner is None:
            return

        if self.screen is None:
            pygame.init()
            size = (self.config.width, self.config.height)
            if self.render_mode == "human":
                self.screen = pygame.display.set_mode(size)
                pygame.display.set_caption("Dino Runner - Gym Env")
                self.clock = pygame.time.Clock()
            else:
                self.screen = pygame.Surface(size)
            pygame.font.init()
            self.font = pygame.font.SysFont("jetbrainsmono", 14)

        if self.render_mode == "human":
            # Pump the event queue so the OS doesn't think we're hung
            pygame.event.pump()

        draw_world(self.screen, self.runner, self.font)

        if self.render_mode == "human":
            pygame.display.flip()
            if self.clock is not None:
                self.clock.tick(self.metadata.get("render_fps", 60))
            return None

        # (H, W, 3) uint8
        arr = pygame.surfarray.array3d(self.screen)  # (W, H, 3)
        return np.transpose(arr, (1, 0, 2))

    def close(self):
        if self.screen is not None:
            if self.render_mode == "human":
                pygame.display.quit()
            pygame.quit()
            self.screen = None
            self.clock = None
            self.font = None
