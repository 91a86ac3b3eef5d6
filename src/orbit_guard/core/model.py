"""Data models for the simulated bodies and the live registry."""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence

import numpy as np

from .config import PHYSICS_CFG


def _vector(value: Sequence[float]) -> np.ndarray:
    return np.array(value, dtype=float).reshape(2)


@dataclass(eq=False)
class Body:
    """A point mass with a finite collision radius.

    ``fixed`` bodies act as immovable attractors: the integrators never touch
    their position or velocity.
    """

    id: str
    position: np.ndarray
    velocity: np.ndarray
    mass: float
    radius: float
    fixed: bool = False
    trail: deque = field(
        default_factory=lambda: deque(maxlen=PHYSICS_CFG.trail_length)
    )

    def __post_init__(self) -> None:
        if self.mass <= 0.0:
            raise ValueError(f"body {self.id!r} must have positive mass, got {self.mass}")
        if self.radius <= 0.0:
            raise ValueError(f"body {self.id!r} must have positive radius, got {self.radius}")
        self.position = _vector(self.position)
        self.velocity = _vector(self.velocity)
        self.mass = float(self.mass)
        self.radius = float(self.radius)

    @property
    def speed(self) -> float:
        return float(np.hypot(self.velocity[0], self.velocity[1]))

    def distance_to(self, other: "Body") -> float:
        dx = other.position[0] - self.position[0]
        dy = other.position[1] - self.position[1]
        return float(np.hypot(dx, dy))

    def add_trail_point(self) -> None:
        self.trail.append((float(self.position[0]), float(self.position[1])))

    def clone(self) -> "Body":
        """Deep copy of the physical state with an empty trail."""

        return Body(
            id=self.id,
            position=self.position.copy(),
            velocity=self.velocity.copy(),
            mass=self.mass,
            radius=self.radius,
            fixed=self.fixed,
            trail=deque(maxlen=self.trail.maxlen),
        )

    def same_state(self, other: "Body") -> bool:
        return (
            self.id == other.id
            and self.mass == other.mass
            and self.radius == other.radius
            and self.fixed == other.fixed
            and np.array_equal(self.position, other.position)
            and np.array_equal(self.velocity, other.velocity)
        )


@dataclass
class Snapshot:
    """Ordered bodies at a simulation time."""

    bodies: list[Body] = field(default_factory=list)
    time: float = 0.0

    def clone(self) -> "Snapshot":
        return Snapshot(bodies=[body.clone() for body in self.bodies], time=self.time)

    def find(self, body_id: str) -> Optional[Body]:
        return find_body(self.bodies, body_id)

    def __iter__(self) -> Iterator[Body]:
        return iter(self.bodies)

    def __len__(self) -> int:
        return len(self.bodies)


def find_body(bodies: Sequence[Body], body_id: str) -> Optional[Body]:
    for body in bodies:
        if body.id == body_id:
            return body
    return None


def first_fixed(bodies: Sequence[Body]) -> Optional[Body]:
    for body in bodies:
        if body.fixed:
            return body
    return None


def clone_bodies(bodies: Sequence[Body]) -> list[Body]:
    return [body.clone() for body in bodies]


class BodyRegistry:
    """Live, mutable collection of bodies owned by the tick loop.

    Readers outside the tick loop go through :meth:`snapshot`, which hands out
    deep copies, so no analyser ever holds a reference into live state.
    """

    def __init__(self, bodies: Optional[Sequence[Body]] = None) -> None:
        self._bodies: list[Body] = []
        self._next_index = 1
        for body in bodies or ():
            self.add(body)

    @property
    def bodies(self) -> list[Body]:
        return self._bodies

    def __len__(self) -> int:
        return len(self._bodies)

    def __iter__(self) -> Iterator[Body]:
        return iter(self._bodies)

    def __contains__(self, body_id: object) -> bool:
        return any(body.id == body_id for body in self._bodies)

    def get(self, body_id: str) -> Optional[Body]:
        return find_body(self._bodies, body_id)

    def fixed_bodies(self) -> list[Body]:
        return [body for body in self._bodies if body.fixed]

    def satellites(self) -> list[Body]:
        return [body for body in self._bodies if not body.fixed]

    def next_id(self, prefix: str = "SAT") -> str:
        while True:
            candidate = f"{prefix}-{self._next_index}"
            self._next_index += 1
            if candidate not in self:
                return candidate

    def add(self, body: Body) -> Body:
        if body.id in self:
            raise ValueError(f"duplicate body id {body.id!r}")
        self._bodies.append(body)
        return body

    def remove(self, body_id: str) -> Optional[Body]:
        body = self.get(body_id)
        if body is not None:
            self._bodies.remove(body)
        return body

    def remove_last(self) -> Optional[Body]:
        """Drop the most recently added satellite; fixed bodies are kept."""

        if len(self._bodies) <= 1:
            return None
        for index in range(len(self._bodies) - 1, -1, -1):
            if not self._bodies[index].fixed:
                return self._bodies.pop(index)
        return None

    def replace(self, bodies: Sequence[Body]) -> None:
        self._bodies = list(bodies)

    def clear(self) -> None:
        self._bodies = []
        self._next_index = 1

    def snapshot(self, time: float = 0.0) -> Snapshot:
        return Snapshot(bodies=clone_bodies(self._bodies), time=time)


__all__ = [
    "Body",
    "BodyRegistry",
    "Snapshot",
    "clone_bodies",
    "find_body",
    "first_fixed",
]
