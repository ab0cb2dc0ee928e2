# dino_runner/game/determinism.py
"""
Seeded randomness for one runner session.

Each subsystem (player blink, obstacle spawner, clouds, night sky) draws from
its own stream derived from the session seed, so adding a random call in one
system never shifts the sequence seen by another.
"""

from __future__ import annotations

import random
import zlib
from typing import Optional


def resolve_seed(seed: Optional[int]) -> int:
    """None -> fresh random seed, otherwise the seed masked to 32 bits."""
    if seed is None:
        return random.randrange(0, 2**32 - 1)
    return int(seed) & 0xFFFFFFFF


def derive_rng(seed: int, tag: str) -> random.Random:
    # crc32, not hash(): str hashing is salted per process.
    crc = zlib.crc32(tag.encode("utf-8")) & 0xFFFFFFFF
    return random.Random((int(seed) ^ crc) & 0xFFFFFFFF)


def random_int(rng: random.Random, lo: int, hi: int) -> int:
    """Uniform integer in [lo, hi], both ends inclusive."""
    return rng.randint(int(lo), int(hi))
