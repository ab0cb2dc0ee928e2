# dino_runner/game/errors.py
from __future__ import annotations


class RunnerError(Exception):
    """Base class for simulation errors."""


class ConfigError(RunnerError, ValueError):
    """Invalid tunables or obstacle table."""


class PlayerStateError(RunnerError, RuntimeError):
    """A state-mutating player operation was attempted while crashed."""
