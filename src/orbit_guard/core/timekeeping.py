"""Tick cadences and wall-clock cooldowns for periodic analysis."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable


@dataclass
class Cadence:
    """Fires on every ``every``-th tick, counting from tick zero."""

    every: int

    def __post_init__(self) -> None:
        if self.every < 1:
            raise ValueError(f"cadence must be at least 1 tick, got {self.every}")

    def due(self, tick: int) -> bool:
        return tick % self.every == 0


@dataclass
class CooldownMap:
    """Per-key dismissal timestamps based on :func:`time.monotonic`."""

    window: float
    clock: Callable[[], float] = time.monotonic
    _stamps: dict[str, float] = field(default_factory=dict)

    def start(self, key: str) -> None:
        self._stamps[key] = self.clock()

    def active(self, key: str) -> bool:
        stamp = self._stamps.get(key)
        if stamp is None:
            return False
        if self.clock() - stamp < self.window:
            return True
        del self._stamps[key]
        return False

    def clear(self) -> None:
        self._stamps.clear()

    def __len__(self) -> int:
        return len(self._stamps)


__all__ = ["Cadence", "CooldownMap"]
