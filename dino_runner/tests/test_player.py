# dino_runner/tests/test_player.py
import random
import pytest

from dino_runner.game.config import RunnerConfig, PLAYER_WIDTH, PLAYER_WIDTH_DUCK
from dino_runner.game.errors import PlayerStateError
from dino_runner.game.player import Player, PlayerStatus, DUCKING_BOXES, RUNNING_BOXES

FRAME_MS = 1000 / 60


def make_player(seed=1, **overrides):
    cfg = RunnerConfig().with_overrides(**overrides) if overrides else RunnerConfig()
    return Player(cfg, random.Random(seed))


def running_player():
    p = make_player()
    p.reset()
    return p


def test_starts_waiting_on_the_ground():
    p = make_player()
    assert p.status is PlayerStatus.WAITING
    assert p.y == p.ground_y == 150 - 47 - 10
    assert p.width == PLAYER_WIDTH


def test_start_jump_velocity_and_first_step():
    p = running_player()
    p.start_jump(6)
    assert p.velocity == pytest.approx(-10.6)
    assert p.status is PlayerStatus.JUMPING

    p.update_jump(FRAME_MS)
    assert p.velocity == pytest.approx(-10.0)
    assert p.y == p.ground_y - 11


def test_start_jump_while_jumping_is_noop():
    p = running_player()
    p.start_jump(6)
    p.update_jump(FRAME_MS)
    v, y = p.velocity, p.y
    p.start_jump(13)
    assert (p.velocity, p.y) == (v, y)


def test_update_jump_ignores_zero_delta():
    p = running_player()
    p.start_jump(6)
    p.update_jump(0)
    assert p.y == p.ground_y
    assert p.velocity == pytest.approx(-10.6)


def test_end_jump_only_after_min_height_and_idempotent():
    p = running_player()
    p.start_jump(6)
    p.end_jump()
    assert p.velocity == pytest.approx(-10.6)     # min height not reached yet

    p.reached_min_height = True
    p.velocity = -8.0
    p.end_jump()
    assert p.velocity == -5.0
    p.end_jump()
    assert p.velocity == -5.0

    p.velocity = -2.0                              # already slower than the drop velocity
    p.end_jump()
    assert p.velocity == -2.0


def test_jump_lands_back_running():
    p = running_player()
    p.start_jump(6)
    apex = p.y
    for _ in range(200):
        if not p.jumping:
            break
        p.update_jump(FRAME_MS)
        apex = min(apex, p.y)
    assert not p.jumping
    assert apex < p.min_jump_y
    assert p.y == p.ground_y
    assert p.status is PlayerStatus.RUNNING
    assert p.jump_count == 1
    assert p.velocity == 0


def test_early_release_gives_a_lower_jump():
    def apex(release_after):
        p = running_player()
        p.start_jump(6)
        top = p.y
        for i in range(200):
            if not p.jumping:
                break
            if i == release_after:
                p.end_jump()
            p.update_jump(FRAME_MS)
            top = min(top, p.y)
        return top

    assert apex(release_after=4) > apex(release_after=10_000)


def test_speed_drop_lands_sooner_and_ducks():
    def frames_to_land(drop_at):
        p = running_player()
        p.start_jump(6)
        for i in range(200):
            if not p.jumping:
                return i, p
            if i == drop_at:
                p.set_speed_drop()
            p.update_jump(FRAME_MS)
        raise AssertionError("never landed")

    slow, _ = frames_to_land(drop_at=-1)
    fast, p = frames_to_land(drop_at=5)
    assert fast < slow
    assert p.ducking and p.status is PlayerStatus.DUCKING
    assert not p.speed_drop


def test_set_speed_drop_needs_a_jump():
    p = running_player()
    p.set_speed_drop()
    assert not p.speed_drop
    assert p.velocity == 0


def test_duck_only_from_running():
    p = make_player()
    p.set_duck(True)                    # waiting
    assert not p.ducking

    p = running_player()
    p.set_duck(True)
    assert p.ducking and p.status is PlayerStatus.DUCKING
    assert (p.width, p.height) == (PLAYER_WIDTH_DUCK, 25)
    assert p.collision_boxes == DUCKING_BOXES

    p.set_duck(False)
    assert not p.ducking and p.status is PlayerStatus.RUNNING
    assert p.collision_boxes == RUNNING_BOXES


def test_mutations_rejected_after_crash():
    p = running_player()
    p.crash()
    assert p.status is PlayerStatus.CRASHED
    for op in (lambda: p.start_jump(6), p.end_jump, p.set_speed_drop,
               lambda: p.set_duck(True), lambda: p.update_jump(FRAME_MS)):
        with pytest.raises(PlayerStateError):
            op()


def test_reset_after_crash():
    p = running_player()
    p.start_jump(6)
    p.update_jump(FRAME_MS)
    p.crash()
    p.reset()
    assert p.status is PlayerStatus.RUNNING
    assert p.y == p.ground_y
    assert p.jump_count == 0
    assert not p.jumping


def test_waiting_player_blinks():
    p = make_player(seed=3)
    for _ in range(int(30_000 / FRAME_MS)):
        p.update(FRAME_MS)
    assert p.blink_count >= 1
    assert 0 < p.blink_delay <= 7000


def test_running_animation_wraps():
    p = running_player()
    frames = set()
    for _ in range(60):
        p.update(FRAME_MS)
        frames.add(p.sprite_frame)
    assert frames == {88, 132}
