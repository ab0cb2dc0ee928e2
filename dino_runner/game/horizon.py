# dino_runner/game/horizon.py
from __future__ import annotations
import logging
import math
import random
from collections import deque
from dataclasses import dataclass, replace
from enum import Enum
from typing import Deque, List, Optional, Sequence, Tuple

from .config import (
    RunnerConfig, MAX_GAP_COEFFICIENT, MAX_SPAWN_ATTEMPTS,
    CLOUD_WIDTH, MIN_CLOUD_GAP, MAX_CLOUD_GAP, MAX_SKY_LEVEL, MIN_SKY_LEVEL,
    HORIZON_LINE_WIDTH, HORIZON_LINE_HEIGHT, HORIZON_LINE_Y, BUMP_THRESHOLD,
)
from .determinism import derive_rng, random_int
from .errors import ConfigError
from .geometry import CollisionBox, first_overlap, round_half_up
from .night import NightMode

logger = logging.getLogger(__name__)


class ObstacleKind(Enum):
    CACTUS_SMALL = "cactus_small"
    CACTUS_LARGE = "cactus_large"
    PTERODACTYL = "pterodactyl"


@dataclass(frozen=True)
class ObstacleType:
    """
    One row of the obstacle table.
    - multiple_speed: speed from which groups of 2..3 are allowed
    - min_gap: base spacing before the next obstacle, scaled by the gap coefficient
    - min_speed: slowest speed at which the type may appear
    - speed_offset: extra (+/-) speed relative to the ground
    """
    kind: ObstacleKind
    width: int
    height: int
    y_positions: Tuple[int, ...]
    multiple_speed: float
    min_gap: int
    min_speed: float
    collision_boxes: Tuple[CollisionBox, ...]
    y_positions_constrained: Tuple[int, ...] = ()
    num_frames: int = 0
    frame_rate: float = 0.0
    speed_offset: float = 0.0


OBSTACLE_TYPES: Tuple[ObstacleType, ...] = (
    ObstacleType(
        kind=ObstacleKind.CACTUS_SMALL, width=17, height=35, y_positions=(105,),
        multiple_speed=4, min_gap=120, min_speed=0,
        collision_boxes=(
            CollisionBox(0, 7, 5, 27),
            CollisionBox(4, 0, 6, 34),
            CollisionBox(10, 4, 7, 14),
        ),
    ),
    ObstacleType(
        kind=ObstacleKind.CACTUS_LARGE, width=25, height=50, y_positions=(90,),
        multiple_speed=7, min_gap=120, min_speed=0,
        collision_boxes=(
            CollisionBox(0, 12, 7, 38),
            CollisionBox(8, 0, 7, 49),
            CollisionBox(13, 10, 10, 38),
        ),
    ),
    ObstacleType(
        kind=ObstacleKind.PTERODACTYL, width=46, height=40,
        y_positions=(100, 75, 50), y_positions_constrained=(100, 50),
        multiple_speed=999, min_gap=150, min_speed=8.5,
        collision_boxes=(
            CollisionBox(15, 15, 16, 5),
            CollisionBox(18, 21, 24, 6),
            CollisionBox(2, 14, 4, 3),
            CollisionBox(6, 10, 4, 7),
            CollisionBox(10, 8, 6, 9),
        ),
        num_frames=2, frame_rate=1000 / 6, speed_offset=0.8,
    ),
)


def gap_bounds(width: int, speed: float, type_min_gap: int,
               gap_coefficient: float) -> Tuple[int, int]:
    """(min_gap, max_gap): spacing grows with speed so density stays bounded."""
    min_gap = round_half_up(width * speed + type_min_gap * gap_coefficient)
    max_gap = round_half_up(min_gap * MAX_GAP_COEFFICIENT)
    return min_gap, max_gap


def stretch_boxes(boxes: Sequence[CollisionBox], width: int) -> List[CollisionBox]:
    """Head, stretched middle, tail: the middle box absorbs the extra width of a group."""
    head, middle, tail = boxes[0], boxes[1], boxes[2]
    middle = replace(middle, width=width - head.width - tail.width)
    tail = replace(tail, x=width - tail.width)
    return [head, middle, tail] + list(boxes[3:])


@dataclass
class Obstacle:
    type: ObstacleType
    x: float
    y: int
    size: int
    width: int
    gap: int
    collision_boxes: List[CollisionBox]
    speed_offset: float = 0.0
    remove: bool = False
    following_obstacle_created: bool = False
    current_frame: int = 0
    timer: float = 0.0

    @classmethod
    def spawn(cls, obstacle_type: ObstacleType, rng: random.Random, speed: float,
              config: RunnerConfig) -> "Obstacle":
        size = random_int(rng, 1, config.max_obstacle_length)
        # Groups only once the run is fast enough to clear them.
        if size > 1 and obstacle_type.multiple_speed > speed:
            size = 1
        width = obstacle_type.width * size

        ys = obstacle_type.y_positions
        if config.constrained_viewport and obstacle_type.y_positions_constrained:
            ys = obstacle_type.y_positions_constrained
        y = ys[random_int(rng, 0, len(ys) - 1)] if len(ys) > 1 else ys[0]

        boxes = list(obstacle_type.collision_boxes)
        if size > 1:
            boxes = stretch_boxes(boxes, width)

        speed_offset = 0.0
        if obstacle_type.speed_offset:
            speed_offset = obstacle_type.speed_offset if rng.random() > 0.5 else -obstacle_type.speed_offset

        min_gap, max_gap = gap_bounds(width, speed, obstacle_type.min_gap, config.gap_coefficient)
        return cls(
            type=obstacle_type,
            x=float(config.width + obstacle_type.width),
            y=y,
            size=size,
            width=width,
            gap=random_int(rng, min_gap, max_gap),
            collision_boxes=boxes,
            speed_offset=speed_offset,
        )

    @property
    def kind(self) -> ObstacleKind:
        return self.type.kind

    @property
    def height(self) -> int:
        return self.type.height

    def is_visible(self) -> bool:
        return self.x + self.width > 0

    def world_boxes(self) -> List[CollisionBox]:
        return [b.translated(self.x, self.y) for b in self.collision_boxes]

    def update(self, delta_time: float, speed: float, fps: int):
        if self.remove:
            return
        if self.type.speed_offset:
            speed += self.speed_offset
        self.x -= math.floor(speed * fps / 1000 * delta_time)

        if self.type.num_frames:
            self.timer += delta_time
            if self.timer >= self.type.frame_rate:
                self.current_frame = (self.current_frame + 1) % self.type.num_frames
                self.timer = 0.0

        if not self.is_visible():
            self.remove = True


@dataclass
class Cloud:
    """Decorative, never collides."""
    x: float
    y: int
    gap: int
    remove: bool = False

    @classmethod
    def spawn(cls, container_width: int, rng: random.Random) -> "Cloud":
        gap = random_int(rng, MIN_CLOUD_GAP, MAX_CLOUD_GAP)
        y = random_int(rng, MAX_SKY_LEVEL, MIN_SKY_LEVEL)
        return cls(x=float(container_width), y=y, gap=gap)

    def is_visible(self) -> bool:
        return self.x + CLOUD_WIDTH > 0

    def update(self, speed: float):
        if self.remove:
            return
        self.x -= math.ceil(speed)
        if not self.is_visible():
            self.remove = True


class HorizonLine:
    """Two ground segments leapfrogging each other; each wrap picks flat or bumpy."""
    def __init__(self, rng: random.Random):
        self.rng = rng
        self.width = HORIZON_LINE_WIDTH
        self.height = HORIZON_LINE_HEIGHT
        self.y = HORIZON_LINE_Y
        self.x: List[float] = [0.0, float(self.width)]
        self.variants: List[int] = [0, self.width]   # sprite offsets: 0 flat, width bumpy

    def _random_variant(self) -> int:
        return self.width if self.rng.random() > BUMP_THRESHOLD else 0

    def _update_x(self, line1: int, increment: int):
        line2 = 1 - line1
        self.x[line1] -= increment
        self.x[line2] = self.x[line1] + self.width

        if self.x[line1] <= -self.width:
            self.x[line1] += self.width * 2
            self.x[line2] = self.x[line1] - self.width
            self.variants[line1] = self._random_variant()

    def update(self, delta_time: float, speed: float, fps: int):
        increment = math.floor(speed * (fps / 1000) * delta_time)
        if self.x[0] <= 0:
            self._update_x(0, increment)
        else:
            self._update_x(1, increment)

    def reset(self):
        self.x = [0.0, float(self.width)]


class Horizon:
    """
    Everything that scrolls: ground, clouds, obstacles and the night sky.
    Obstacles are kept oldest first; at most one look-ahead obstacle is queued.
    """
    def __init__(self, config: RunnerConfig, seed: int,
                 obstacle_types: Sequence[ObstacleType] = OBSTACLE_TYPES,
                 start_speed: Optional[float] = None):
        self.config = config
        self.obstacle_types: Tuple[ObstacleType, ...] = tuple(obstacle_types)
        floor_speed = config.speed if start_speed is None else start_speed
        if not self.obstacle_types:
            raise ConfigError("obstacle table is empty")
        if not any(t.min_speed <= floor_speed for t in self.obstacle_types):
            raise ConfigError(
                f"no obstacle type is available at the starting speed {floor_speed}")

        self.rng = derive_rng(seed, "obstacles")
        self.cloud_rng = derive_rng(seed, "clouds")
        self.obstacles: List[Obstacle] = []
        # Last N spawned kinds; N identical entries block that kind.
        self.obstacle_history: Deque[ObstacleKind] = deque(maxlen=config.max_obstacle_duplication)
        self.clouds: List[Cloud] = []
        self.horizon_line = HorizonLine(derive_rng(seed, "horizon_line"))
        self.night_mode = NightMode(config.width, derive_rng(seed, "night"))
        self.add_cloud()

    # -------------------- Per-tick update --------------------

    def update(self, delta_time: float, speed: float, update_obstacles: bool,
               show_night_mode: bool = False):
        self.horizon_line.update(delta_time, speed, self.config.fps)
        self.night_mode.update(show_night_mode)
        self.update_clouds(delta_time, speed)
        if update_obstacles:
            self.update_obstacles(delta_time, speed)

    def update_clouds(self, delta_time: float, speed: float):
        if not self.clouds:
            self.add_cloud()
            return

        cloud_speed = self.config.bg_cloud_speed / 1000 * delta_time * speed
        for cloud in reversed(self.clouds):
            cloud.update(cloud_speed)

        last = self.clouds[-1]
        if (len(self.clouds) < self.config.max_clouds and
                (self.config.width - last.x) > last.gap and
                self.config.cloud_frequency > self.cloud_rng.random()):
            self.add_cloud()

        self.clouds = [c for c in self.clouds if not c.remove]

    def update_obstacles(self, delta_time: float, speed: float):
        for obstacle in self.obstacles:
            obstacle.update(delta_time, speed, self.config.fps)
        self.obstacles = [o for o in self.obstacles if not o.remove]

        if not self.obstacles:
            self.add_new_obstacle(speed)
            return

        last = self.obstacles[-1]
        if (not last.following_obstacle_created and last.is_visible() and
                last.x + last.width + last.gap < self.config.width):
            self.add_new_obstacle(speed)
            last.following_obstacle_created = True

    # -------------------- Spawning --------------------

    def is_duplicate(self, kind: ObstacleKind) -> bool:
        """True when the last max_obstacle_duplication spawns were all `kind`."""
        history = self.obstacle_history
        return len(history) == history.maxlen and all(k is kind for k in history)

    def is_eligible(self, obstacle_type: ObstacleType, speed: float) -> bool:
        return speed >= obstacle_type.min_speed and not self.is_duplicate(obstacle_type.kind)

    def pick_obstacle_type(self, speed: float) -> ObstacleType:
        for _ in range(MAX_SPAWN_ATTEMPTS):
            candidate = self.obstacle_types[random_int(self.rng, 0, len(self.obstacle_types) - 1)]
            if self.is_eligible(candidate, speed):
                return candidate

        for candidate in self.obstacle_types:
            if self.is_eligible(candidate, speed):
                return candidate

        speed_ok = [t for t in self.obstacle_types if speed >= t.min_speed]
        assert speed_ok, "obstacle table has no type available at this speed"
        logger.warning("only %s is available at speed %.2f; duplication limit exceeded",
                       speed_ok[0].kind.value, speed)
        return speed_ok[0]

    def add_new_obstacle(self, speed: float) -> Obstacle:
        obstacle_type = self.pick_obstacle_type(speed)
        obstacle = Obstacle.spawn(obstacle_type, self.rng, speed, self.config)
        self.obstacles.append(obstacle)
        self.obstacle_history.append(obstacle_type.kind)
        logger.debug("spawned %s size=%d gap=%d at speed %.2f",
                     obstacle_type.kind.value, obstacle.size, obstacle.gap, speed)
        return obstacle

    def add_cloud(self) -> Cloud:
        cloud = Cloud.spawn(self.config.width, self.cloud_rng)
        self.clouds.append(cloud)
        return cloud

    # -------------------- Queries / lifecycle --------------------

    @property
    def nearest_obstacle(self) -> Optional[Obstacle]:
        return self.obstacles[0] if self.obstacles else None

    def reset(self):
        self.obstacles = []
        self.horizon_line.reset()
        self.night_mode.reset()


def check_for_collision(obstacle: Optional[Obstacle], player) -> Optional[Tuple[CollisionBox, CollisionBox]]:
    """
    Player boxes (duck set while ducking) against the obstacle's boxes, both in
    world coordinates. Returns the first overlapping pair, or None.
    """
    if obstacle is None:
        return None
    return first_overlap(player.world_boxes(), obstacle.world_boxes())
