# dino_runner/tests/test_score.py
from dino_runner.game.config import FLASH_ITERATIONS, FLASH_DURATION_MS
from dino_runner.game.score import ScoreTracker, get_actual_distance

FRAME_MS = 1000 / 60


def raw(units):
    """Pixel distance that displays as `units`."""
    return units * 40


def test_actual_distance():
    assert get_actual_distance(0) == 0
    assert get_actual_distance(40) == 1
    assert get_actual_distance(59) == 1       # 1.475
    assert get_actual_distance(28000) == 700


def test_digits_are_zero_padded():
    s = ScoreTracker()
    assert s.digits == list("00000")
    s.update(FRAME_MS, raw(42))
    assert s.digits == list("00042")
    assert s.distance == 42


def test_digit_width_only_grows():
    s = ScoreTracker()
    s.update(FRAME_MS, raw(99_999))
    assert s.max_score_units == 5
    s.update(FRAME_MS, raw(123_456))
    assert s.max_score_units == 6
    assert s.digits == list("123456")

    s.clear_achievement()
    s.update(FRAME_MS, raw(7))
    assert s.max_score_units == 6
    assert s.digits == list("000007")


def test_achievement_fires_once_per_milestone():
    s = ScoreTracker()
    assert not s.update(FRAME_MS, raw(99))
    assert s.update(FRAME_MS, raw(100))
    assert s.achievement

    ticks = 0
    painted = []
    max_iterations = 0
    while s.achievement:
        assert not s.update(FRAME_MS, raw(100))
        painted.append(s.paint)
        max_iterations = max(max_iterations, s.flash_iterations)
        ticks += 1
        assert ticks < 1000

    assert max_iterations == FLASH_ITERATIONS
    assert False in painted and True in painted
    # Each cycle lasts a little over two flash durations
    assert ticks * FRAME_MS >= FLASH_ITERATIONS * 2 * FLASH_DURATION_MS

    # Same milestone again does not re-fire; the next one does
    assert not s.update(FRAME_MS, raw(100))
    assert not s.achievement
    assert s.update(FRAME_MS, raw(200))


def test_digits_frozen_while_flashing():
    s = ScoreTracker()
    s.update(FRAME_MS, raw(100))
    s.update(FRAME_MS, raw(103))
    assert s.digits == list("00100")


def test_high_score_is_monotonic():
    s = ScoreTracker()
    assert s.high_score_digits == []
    assert s.set_high_score(raw(100))
    assert not s.set_high_score(raw(50))
    assert s.high_score == 100
    assert s.high_score_digits == list("HI 00100")


def test_reset_keeps_high_score():
    s = ScoreTracker()
    s.set_high_score(raw(300))
    s.update(FRAME_MS, raw(100))
    s.reset()
    assert not s.achievement
    assert s.digits == list("00000")
    assert s.high_score == 300
    # Milestones fire again in the next run
    assert s.update(FRAME_MS, raw(100))
