# dino_runner/env/observations.py
from __future__ import annotations
from typing import List
import numpy as np

from dino_runner.game.horizon import Obstacle

# Obstacles described in the observation (nearest first)
NUM_OBSTACLES_OBS: int = 2
OBS_DIM: int = 4 + 4 * NUM_OBSTACLES_OBS

MAX_ABS_VY: float = 15.0          # a fresh jump at MAX_SPEED starts at -11.3
MAX_OBSTACLE_WIDTH: float = 150.0 # widest group is 3 large cacti (75 px)


def _clamp01(x: float) -> float:
    return 0.0 if x < 0.0 else (1.0 if x > 1.0 else x)


def obstacles_ahead(runner) -> List[Obstacle]:
    """Obstacles whose right edge is still in front of the player's left edge."""
    px = runner.player.x
    return [o for o in runner.horizon.obstacles if o.x + o.width > px]


def build_observation(runner) -> np.ndarray:
    """
    Vector observation, shape (12,), float32:
      [y_norm, vy_norm, ducking, speed_norm,
       dx_1, y_1, w_1, h_1,
       dx_2, y_2, w_2, h_2]
    - y_norm: 0 at the top of the canvas, 1 on the ground
    - vy_norm: clipped to [-1, 1]
    - dx_i: distance ahead / canvas width; a missing obstacle reads dx=1 and zeros
    """
    cfg = runner.config
    player = runner.player

    obs: List[float] = [
        _clamp01(player.y / max(1.0, player.ground_y)),
        max(-1.0, min(1.0, player.velocity / MAX_ABS_VY)),
        1.0 if player.ducking else 0.0,
        _clamp01(runner.current_speed / cfg.max_speed),
    ]

    ahead = obstacles_ahead(runner)
    for i in range(NUM_OBSTACLES_OBS):
        if i < len(ahead):
            o = ahead[i]
            obs += [
                _clamp01((o.x - player.x) / cfg.width),
                _clamp01(o.y / cfg.height),
                _clamp01(o.width / MAX_OBSTACLE_WIDTH),
                _clamp01(o.height / cfg.height),
            ]
        else:
            obs += [1.0, 0.0, 0.0, 0.0]

    return np.asarray(obs, dtype=np.float32)
