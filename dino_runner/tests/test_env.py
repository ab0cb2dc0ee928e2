# dino_runner/tests/test_env.py
import os
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

from typing import List, Tuple

import numpy as np
from gymnasium.utils.env_checker import check_env

from dino_runner.env.observations import OBS_DIM, build_observation
from dino_runner.env.runner_env import RunnerEnv, NOOP, JUMP, DUCK
from dino_runner.game.runner import GamePhase


def test_api_check():
    """Gym API contract (spaces, step/reset signatures, types)."""
    env = RunnerEnv(frame_skip=4)
    try:
        check_env(env, skip_render_check=True)
    finally:
        env.close()


def test_reset_starts_a_run():
    env = RunnerEnv()
    try:
        obs, info = env.reset(seed=5)
        assert obs.shape == (OBS_DIM,)
        assert obs.dtype == np.float32
        assert env.observation_space.contains(obs)
        assert info["seed"] == 5
        assert info["phase"] == GamePhase.PLAYING.value
        assert not env.runner.player.jumping
        # No obstacle yet: sentinel slots
        assert obs[4] == 1.0 and obs[8] == 1.0
    finally:
        env.close()


def test_noop_rollout_ends_with_a_crash():
    env = RunnerEnv(time_limit_seconds=None)
    try:
        env.reset(seed=3)
        rewards = []
        for _ in range(2000):
            obs, r, term, trunc, info = env.step(NOOP)
            assert env.observation_space.contains(obs)
            rewards.append(r)
            if term or trunc:
                break
        assert term and not trunc
        assert rewards[-1] == -1.0
        assert all(r == 1.0 for r in rewards[:-1])
        assert info["score"] > 0
    finally:
        env.close()


def test_time_limit_truncates():
    env = RunnerEnv(frame_skip=4, time_limit_seconds=1.0)
    try:
        env.reset(seed=1)
        steps = 0
        while True:
            _, _, term, trunc, _ = env.step(NOOP)
            steps += 1
            if term or trunc:
                break
        assert trunc and not term
        assert steps == 15
    finally:
        env.close()


def test_actions_hold_keys():
    env = RunnerEnv()
    try:
        env.reset(seed=2)
        env.step(DUCK)
        assert env.runner.player.ducking
        env.step(NOOP)
        assert not env.runner.player.ducking
        env.step(JUMP)
        assert env.runner.player.jumping
    finally:
        env.close()


def test_observation_sees_the_next_obstacle():
    env = RunnerEnv(time_limit_seconds=None)
    try:
        env.reset(seed=4)
        for _ in range(200):
            obs, _, term, _, _ = env.step(NOOP)
            if env.runner.horizon.obstacles or term:
                break
        np.testing.assert_allclose(obs, build_observation(env.runner))
        assert obs[4] < 1.0
        assert obs[6] > 0.0 and obs[7] > 0.0
    finally:
        env.close()


def test_determinism():
    """Same seed + same action sequence => identical obs/reward/terminal flags."""
    def rollout(seed_val: int, action_seq: List[int]) -> List[Tuple[np.ndarray, float, bool, bool]]:
        env = RunnerEnv()
        traj = []
        try:
            env.reset(seed=seed_val)
            for a in action_seq:
                obs, r, term, trunc, _ = env.step(int(a))
                traj.append((obs.copy(), float(r), bool(term), bool(trunc)))
                if term or trunc:
                    break
        finally:
            env.close()
        return traj

    rng = np.random.RandomState(42)
    action_seq = [int(rng.randint(0, 3)) for _ in range(300)]
    t1 = rollout(123, action_seq)
    t2 = rollout(123, action_seq)
    assert len(t1) == len(t2)
    for (o1, r1, te1, tr1), (o2, r2, te2, tr2) in zip(t1, t2):
        assert np.allclose(o1, o2)
        assert (r1, te1, tr1) == (r2, te2, tr2)


def test_rgb_array_render():
    env = RunnerEnv(render_mode="rgb_array")
    try:
        env.reset(seed=0)
        env.step(NOOP)
        frame = env.render()
        assert frame.shape == (env.config.height, env.config.width, 3)
        assert frame.dtype == np.uint8
    finally:
        env.close()
