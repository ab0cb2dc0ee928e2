# dino_runner/game/geometry.py
from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

import pygame


def round_half_up(x: float) -> int:
    """Round .5 away from -inf (browser-style), unlike Python's banker's round()."""
    return int(math.floor(x + 0.5))


@dataclass(frozen=True)
class CollisionBox:
    """Axis-aligned rectangle, relative to its owner's origin unless translated."""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def translated(self, dx: float, dy: float) -> "CollisionBox":
        return CollisionBox(self.x + dx, self.y + dy, self.width, self.height)

    def to_rect(self) -> pygame.Rect:
        return pygame.Rect(int(self.x), int(self.y), int(self.width), int(self.height))


def boxes_overlap(a: CollisionBox, b: CollisionBox) -> bool:
    """Touching edges and zero-size boxes never collide (pygame.Rect semantics)."""
    return a.to_rect().colliderect(b.to_rect())


def bounding_box(boxes: Iterable[CollisionBox]) -> Optional[CollisionBox]:
    rects = [b.to_rect() for b in boxes]
    if not rects:
        return None
    outer = rects[0].unionall(rects[1:])
    return CollisionBox(outer.x, outer.y, outer.width, outer.height)


def first_overlap(boxes_a: Sequence[CollisionBox],
                  boxes_b: Sequence[CollisionBox]) -> Optional[tuple]:
    """
    Returns the first overlapping (a, b) pair in world coordinates, or None.
    The union rects are compared first so disjoint sets exit early.
    """
    if not boxes_a or not boxes_b:
        return None
    rects_a = [a.to_rect() for a in boxes_a]
    rects_b = [b.to_rect() for b in boxes_b]
    if not rects_a[0].unionall(rects_a[1:]).colliderect(rects_b[0].unionall(rects_b[1:])):
        return None
    for a, ra in zip(boxes_a, rects_a):
        for b, rb in zip(boxes_b, rects_b):
            if ra.colliderect(rb):
                return a, b
    return None
