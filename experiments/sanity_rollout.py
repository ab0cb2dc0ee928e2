# /experiments/sanity_rollout.py
"""
Random and rule-based rollouts of RunnerEnv over fixed seeds.

  python -m experiments.sanity_rollout --policy heuristic --seeds 101,102 --save-actions

One row per episode goes to <out-dir>/episodes.csv; --save-actions also keeps
the int8 action sequence of each episode, which replays exactly under the same
seed and frame skip.
"""

from __future__ import annotations
import argparse
import csv
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Callable, List

import numpy as np

from dino_runner.env.runner_env import RunnerEnv, NOOP, JUMP, DUCK

Policy = Callable[[np.ndarray], int]


def random_policy(seed: int) -> Policy:
    rng = np.random.default_rng(10_000 + seed)
    return lambda _obs: int(rng.integers(0, 3))


def heuristic_policy(_seed: int) -> Policy:
    """Jump low obstacles, duck mid pterodactyls, once inside a speed-scaled window."""
    def act(obs: np.ndarray) -> int:
        speed_n, dx, oy = obs[3], obs[4], obs[5]
        if dx >= 1.0 or dx > 0.08 + 0.17 * speed_n:
            return NOOP
        if oy >= 0.6:
            return JUMP
        return DUCK if oy >= 0.45 else NOOP
    return act


POLICIES = {"random": random_policy, "heuristic": heuristic_policy}


@dataclass
class EpisodeResult:
    policy: str
    seed: int
    frame_skip: int
    steps: int = 0
    reward: float = 0.0
    score: int = 0
    distance: float = 0.0
    final_speed: float = 0.0
    terminated: bool = False
    truncated: bool = False


def rollout(policy_name: str, seed: int, frame_skip: int, max_steps: int) -> tuple:
    policy = POLICIES[policy_name](seed)
    result = EpisodeResult(policy_name, seed, frame_skip)
    actions: List[int] = []

    env = RunnerEnv(frame_skip=frame_skip)
    try:
        obs, info = env.reset(seed=seed)
        while result.steps < max_steps and not (result.terminated or result.truncated):
            action = policy(obs)
            actions.append(action)
            obs, reward, result.terminated, result.truncated, info = env.step(action)
            result.reward += float(reward)
            result.steps += 1
    finally:
        env.close()

    result.score = int(info["score"])
    result.distance = round(float(info["distance"]), 1)
    result.final_speed = round(float(info["speed"]), 3)
    return result, np.asarray(actions, dtype=np.int8)


def main():
    ap = argparse.ArgumentParser(description=__doc__.split("\n")[1])
    ap.add_argument("--policy", choices=[*POLICIES, "both"], default="both")
    ap.add_argument("--seeds", default="101-120", help="comma list or inclusive range a-b")
    ap.add_argument("--frame-skip", type=int, default=4)
    ap.add_argument("--max-steps", type=int, default=10_000)
    ap.add_argument("--out-dir", type=Path, default=Path("experiments/runs"))
    ap.add_argument("--save-actions", action="store_true")
    args = ap.parse_args()

    if "-" in args.seeds:
        lo, hi = (int(s) for s in args.seeds.split("-", 1))
        seeds = list(range(lo, hi + 1))
    else:
        seeds = [int(s) for s in args.seeds.split(",") if s.strip()]
    policies = list(POLICIES) if args.policy == "both" else [args.policy]

    args.out_dir.mkdir(parents=True, exist_ok=True)
    csv_path = args.out_dir / "episodes.csv"
    with csv_path.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=list(EpisodeResult.__dataclass_fields__))
        writer.writeheader()
        for name in policies:
            for seed in seeds:
                result, actions = rollout(name, seed, args.frame_skip, args.max_steps)
                writer.writerow(asdict(result))
                if args.save_actions:
                    np.save(args.out_dir / f"{name}_{seed}_actions.npy", actions)
                print(f"[{name}] seed={seed} steps={result.steps} score={result.score} "
                      f"reward={result.reward:.1f}")

    print(f"wrote {csv_path}")


if __name__ == "__main__":
    main()
