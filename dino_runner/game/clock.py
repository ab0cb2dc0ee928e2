# dino_runner/game/clock.py
from __future__ import annotations
from typing import Callable, Dict

FrameCallback = Callable[[float], None]


class FrameScheduler:
    """
    Host-side "next frame" source, in the spirit of requestAnimationFrame.

    Callbacks requested during a frame run on the following frame, each with
    that frame's timestamp (ms). Nothing runs until the host calls advance().
    """
    def __init__(self, start_ms: float = 0.0):
        self.now_ms = float(start_ms)
        self.frame_count = 0
        self._pending: Dict[int, FrameCallback] = {}
        self._next_handle = 1

    @property
    def pending(self) -> int:
        return len(self._pending)

    def request_frame(self, callback: FrameCallback) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._pending[handle] = callback
        return handle

    def cancel(self, handle: int) -> None:
        self._pending.pop(handle, None)

    def advance(self, elapsed_ms: float) -> int:
        """Move time forward and fire this frame's callbacks. Returns how many ran."""
        self.now_ms += elapsed_ms
        self.frame_count += 1
        due, self._pending = self._pending, {}
        for callback in due.values():
            callback(self.now_ms)
        return len(due)
