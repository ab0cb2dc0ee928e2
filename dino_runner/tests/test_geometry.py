# dino_runner/tests/test_geometry.py
import random

from dino_runner.game.geometry import (
    CollisionBox, boxes_overlap, bounding_box, first_overlap, round_half_up,
)


def test_round_half_up_matches_browser_rounding():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3          # round() would give 2
    assert round_half_up(-0.5) == 0
    assert round_half_up(-10.6) == -11
    assert round_half_up(173.9) == 174


def test_overlap_requires_both_axes():
    a = CollisionBox(0, 0, 10, 10)
    assert boxes_overlap(a, CollisionBox(5, 5, 10, 10))
    assert not boxes_overlap(a, CollisionBox(5, 20, 10, 10))   # x overlaps only
    assert not boxes_overlap(a, CollisionBox(20, 5, 10, 10))   # y overlaps only


def test_touching_edges_do_not_overlap():
    a = CollisionBox(0, 0, 10, 10)
    assert not boxes_overlap(a, CollisionBox(10, 0, 10, 10))
    assert not boxes_overlap(a, CollisionBox(0, 10, 10, 10))


def test_translated_and_edges():
    b = CollisionBox(1, 2, 3, 4).translated(10, 20)
    assert (b.x, b.y, b.right, b.bottom) == (11, 22, 14, 26)
    r = b.to_rect()
    assert (r.x, r.y, r.w, r.h) == (11, 22, 3, 4)


def test_bounding_box():
    assert bounding_box([]) is None
    outer = bounding_box([CollisionBox(0, 5, 2, 2), CollisionBox(8, 0, 2, 3)])
    assert outer == CollisionBox(0, 0, 10, 7)


def test_first_overlap_returns_pair_or_none():
    a = [CollisionBox(0, 0, 4, 4), CollisionBox(10, 10, 4, 4)]
    b = [CollisionBox(12, 12, 4, 4)]
    assert first_overlap(a, b) == (a[1], b[0])
    assert first_overlap(a, [CollisionBox(50, 50, 1, 1)]) is None
    assert first_overlap([], b) is None


def test_first_overlap_when_only_the_union_boxes_meet():
    # Two L-shaped sets whose bounding boxes overlap but whose parts never do
    a = [CollisionBox(0, 0, 10, 2), CollisionBox(0, 0, 2, 10)]
    b = [CollisionBox(5, 8, 5, 2), CollisionBox(8, 5, 2, 5)]
    assert boxes_overlap(bounding_box(a), bounding_box(b))
    assert first_overlap(a, b) is None


def test_overlap_agrees_with_strict_intervals_on_whole_number_boxes():
    rng = random.Random(11)
    for _ in range(2000):
        a = CollisionBox(rng.randint(-20, 20), rng.randint(-20, 20), rng.randint(0, 15), rng.randint(0, 15))
        b = CollisionBox(rng.randint(-20, 20), rng.randint(-20, 20), rng.randint(0, 15), rng.randint(0, 15))
        strict = (a.width > 0 and a.height > 0 and b.width > 0 and b.height > 0 and
                  a.x < b.right and a.right > b.x and a.y < b.bottom and a.bottom > b.y)
        assert boxes_overlap(a, b) == strict, (a, b)
        assert bounding_box([a, b]).to_rect() == a.to_rect().union(b.to_rect())
