"""Collision detection for the live simulation.

Overlapping bodies are destroyed: a satellite touching a fixed body is
removed on impact, two satellites touching each other are both removed.
Removal is deferred until the pairwise scan is finished.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from .model import Body


class CollisionKind(str, Enum):
    IMPACT = "impact"
    MUTUAL = "mutual"


@dataclass(frozen=True)
class CollisionEvent:
    kind: CollisionKind
    body_ids: tuple[str, str]
    velocities: tuple[tuple[float, float], tuple[float, float]]
    removed_ids: tuple[str, ...]

    def describe(self) -> str:
        (a, b) = self.body_ids
        (va, vb) = self.velocities
        if self.kind is CollisionKind.IMPACT:
            victim = self.removed_ids[0]
            target, vel = (b, va) if victim == a else (a, vb)
            return f"collision: {victim} (vx={vel[0]:.2f}, vy={vel[1]:.2f}) -> {target}"
        return (
            f"collision: {a} (vx={va[0]:.2f}, vy={va[1]:.2f}) <-> "
            f"{b} (vx={vb[0]:.2f}, vy={vb[1]:.2f})"
        )


def _velocity(body: Body) -> tuple[float, float]:
    return (float(body.velocity[0]), float(body.velocity[1]))


def find_collisions(bodies: Sequence[Body]) -> tuple[set[int], list[CollisionEvent]]:
    """Scan all unordered pairs; return the marked indices and the events."""

    marked: set[int] = set()
    events: list[CollisionEvent] = []
    n = len(bodies)
    for i in range(n):
        if i in marked:
            continue
        bi = bodies[i]
        for j in range(i + 1, n):
            if i in marked:
                break
            if j in marked:
                continue
            bj = bodies[j]
            if bi.fixed and bj.fixed:
                continue
            if bi.distance_to(bj) >= bi.radius + bj.radius:
                continue

            if bi.fixed or bj.fixed:
                victim = j if bi.fixed else i
                marked.add(victim)
                kind = CollisionKind.IMPACT
                removed = (bodies[victim].id,)
            else:
                marked.update((i, j))
                kind = CollisionKind.MUTUAL
                removed = (bi.id, bj.id)
            events.append(
                CollisionEvent(
                    kind=kind,
                    body_ids=(bi.id, bj.id),
                    velocities=(_velocity(bi), _velocity(bj)),
                    removed_ids=removed,
                )
            )
    return marked, events


def resolve_collisions(bodies: Sequence[Body]) -> tuple[list[Body], list[CollisionEvent]]:
    """Return the surviving bodies (original order) and the collision events."""

    if len(bodies) < 2:
        return list(bodies), []
    marked, events = find_collisions(bodies)
    survivors = [body for index, body in enumerate(bodies) if index not in marked]
    return survivors, events


__all__ = ["CollisionEvent", "CollisionKind", "find_collisions", "resolve_collisions"]
