# dino_runner/game/storage.py
from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Protocol, Union

logger = logging.getLogger(__name__)


class HighScoreStore(Protocol):
    """Keyed store holding one integer: the best raw (pixel) distance."""
    def load(self) -> int: ...
    def save(self, value: int) -> None: ...


class MemoryHighScoreStore:
    def __init__(self, value: int = 0):
        self.value = int(value)

    def load(self) -> int:
        return self.value

    def save(self, value: int) -> None:
        self.value = int(value)


class JsonHighScoreStore:
    """{"high_score": <int>} in a small JSON file; a missing or unreadable file reads as 0."""
    KEY = "high_score"

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> int:
        if not self.path.exists():
            return 0
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return max(0, int(data.get(self.KEY, 0)))
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning("ignoring unreadable high score file %s: %s", self.path, e)
            return 0

    def save(self, value: int) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({self.KEY: int(value)}), encoding="utf-8")
