# dino_runner/game/config.py
from __future__ import annotations
from dataclasses import dataclass, fields, replace

from .errors import ConfigError

# --- Display ---
DEFAULT_WIDTH = 600
DEFAULT_HEIGHT = 150
FPS = 60
BOTTOM_PAD = 10             # ground gap below the player sprite

# --- Runner ---
ACCELERATION = 0.001        # speed gained per tick while playing
SPEED = 6.0                 # base speed (px per frame at 60 fps)
MAX_SPEED = 13.0
MOBILE_SPEED_COEFFICIENT = 1.2
CLEAR_TIME_MS = 3000        # obstacle-free run-in after the game starts
GAMEOVER_CLEAR_TIME_MS = 750  # jump key ignored for restarts before this
MAX_BLINK_COUNT = 3
INVERT_DISTANCE = 700       # real distance between night cycles
INVERT_FADE_DURATION_MS = 12000

# --- Player ---
PLAYER_WIDTH = 44
PLAYER_HEIGHT = 47
PLAYER_WIDTH_DUCK = 59
PLAYER_HEIGHT_DUCK = 25
GRAVITY = 0.6
INITIAL_JUMP_VELOCITY = -10.0
DROP_VELOCITY = -5.0
MIN_JUMP_HEIGHT = 30        # relative to ground
MAX_JUMP_HEIGHT = 30        # absolute y, jump is cut past it
SPEED_DROP_COEFFICIENT = 3
START_X_POS = 50
INTRO_DURATION_MS = 1500
BLINK_TIMING_MS = 7000

# --- Obstacles ---
GAP_COEFFICIENT = 0.6
MAX_GAP_COEFFICIENT = 1.5
MAX_OBSTACLE_LENGTH = 3
MAX_OBSTACLE_DUPLICATION = 2
MAX_SPAWN_ATTEMPTS = 32

# --- Clouds ---
BG_CLOUD_SPEED = 0.2
CLOUD_FREQUENCY = 0.5
MAX_CLOUDS = 6
CLOUD_WIDTH = 46
CLOUD_HEIGHT = 14
MIN_CLOUD_GAP = 100
MAX_CLOUD_GAP = 400
MAX_SKY_LEVEL = 30          # smallest cloud y
MIN_SKY_LEVEL = 71          # largest cloud y

# --- Horizon line ---
HORIZON_LINE_WIDTH = 600
HORIZON_LINE_HEIGHT = 12
HORIZON_LINE_Y = 127
BUMP_THRESHOLD = 0.5

# --- Night mode ---
NIGHT_FADE_SPEED = 0.035
MOON_WIDTH = 20
MOON_HEIGHT = 40
MOON_SPEED = 0.25
NUM_STARS = 2
STAR_SIZE = 9
STAR_SPEED = 0.3
STAR_MAX_Y = 70
MOON_PHASES = (140, 120, 100, 60, 40, 20, 0)

# --- Score ---
MAX_DISTANCE_UNITS = 5      # initial digit width
ACHIEVEMENT_DISTANCE = 100
DISTANCE_COEFFICIENT = 0.025
FLASH_DURATION_MS = 1000 / 4
FLASH_ITERATIONS = 3

# --- Colors (RGB) ---
COLOR_BG = (247, 247, 247)
COLOR_BG_NIGHT = (32, 33, 36)
COLOR_FG = (83, 83, 83)
COLOR_FG_NIGHT = (172, 172, 172)
COLOR_CLOUD = (218, 218, 218)
COLOR_DANGER = (200, 60, 60)

SEED_DEFAULT = 12345


@dataclass(frozen=True)
class RunnerConfig:
    """Construction-time tunables for one runner session."""
    acceleration: float = ACCELERATION
    speed: float = SPEED
    max_speed: float = MAX_SPEED
    mobile_speed_coefficient: float = MOBILE_SPEED_COEFFICIENT
    gravity: float = GRAVITY
    initial_jump_velocity: float = INITIAL_JUMP_VELOCITY
    drop_velocity: float = DROP_VELOCITY
    min_jump_height: float = MIN_JUMP_HEIGHT
    max_jump_height: float = MAX_JUMP_HEIGHT
    speed_drop_coefficient: float = SPEED_DROP_COEFFICIENT
    gap_coefficient: float = GAP_COEFFICIENT
    max_obstacle_length: int = MAX_OBSTACLE_LENGTH
    max_obstacle_duplication: int = MAX_OBSTACLE_DUPLICATION
    max_clouds: int = MAX_CLOUDS
    cloud_frequency: float = CLOUD_FREQUENCY
    bg_cloud_speed: float = BG_CLOUD_SPEED
    clear_time: float = CLEAR_TIME_MS
    gameover_clear_time: float = GAMEOVER_CLEAR_TIME_MS
    max_blink_count: int = MAX_BLINK_COUNT
    invert_distance: int = INVERT_DISTANCE
    invert_fade_duration: float = INVERT_FADE_DURATION_MS
    fps: int = FPS
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    bottom_pad: int = BOTTOM_PAD
    constrained_viewport: bool = False  # skip the intro, pterodactyls fly lower

    def __post_init__(self):
        self.validate()

    @property
    def ms_per_frame(self) -> float:
        return 1000.0 / self.fps

    @property
    def ground_y(self) -> int:
        return self.height - PLAYER_HEIGHT - self.bottom_pad

    def validate(self) -> None:
        if self.fps <= 0:
            raise ConfigError(f"fps must be positive, got {self.fps}")
        if self.width <= 0 or self.height <= 0:
            raise ConfigError(f"invalid viewport {self.width}x{self.height}")
        if not 0 < self.speed <= self.max_speed:
            raise ConfigError(f"speed must lie in (0, max_speed], got {self.speed}")
        if self.acceleration < 0:
            raise ConfigError("acceleration must be >= 0")
        if self.gravity <= 0:
            raise ConfigError("gravity must be > 0")
        if self.initial_jump_velocity >= 0:
            raise ConfigError("initial_jump_velocity must be negative (y grows downwards)")
        if self.max_obstacle_duplication < 1:
            raise ConfigError("max_obstacle_duplication must be >= 1")
        if self.max_obstacle_length < 1:
            raise ConfigError("max_obstacle_length must be >= 1")
        if self.invert_distance <= 0:
            raise ConfigError("invert_distance must be > 0")

    def with_overrides(self, **overrides) -> "RunnerConfig":
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigError(f"unknown config settings: {', '.join(unknown)}")
        return replace(self, **overrides)
