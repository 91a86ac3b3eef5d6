"""Physics helpers for the orbit simulation.

The force kernel works on stacked ``(n, 2)`` arrays so that a whole snapshot
is evaluated in one pass; the integrators unpack bodies into arrays, advance
them and write the result back for non-fixed bodies only.
"""
from __future__ import annotations

import math
from enum import Enum
from typing import Sequence

import numpy as np

from .config import PHYSICS_CFG, PhysicsCfg
from .model import Body


class Integrator(str, Enum):
    EULER = "EULER"
    VERLET = "VERLET"
    RK4 = "RK4"

    @classmethod
    def parse(cls, value: "Integrator | str") -> "Integrator":
        if isinstance(value, Integrator):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            choices = ", ".join(kind.value for kind in cls)
            raise ValueError(f"unknown integrator {value!r}, expected one of {choices}") from None


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp *value* between *lo* and *hi*."""

    return max(lo, min(hi, value))


def circular_speed(mu: float, radius: float) -> float:
    if radius <= 0.0:
        return 0.0
    return math.sqrt(mu / radius)


def escape_speed(mu: float, radius: float) -> float:
    if radius <= 0.0:
        return 0.0
    return math.sqrt(2.0 * mu / radius)


def unpack(bodies: Sequence[Body]) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """Return ``(positions, velocities, masses, fixed_mask)`` arrays."""

    n = len(bodies)
    positions = np.empty((n, 2), dtype=float)
    velocities = np.empty((n, 2), dtype=float)
    masses = np.empty(n, dtype=float)
    fixed = np.empty(n, dtype=bool)
    for i, body in enumerate(bodies):
        positions[i] = body.position
        velocities[i] = body.velocity
        masses[i] = body.mass
        fixed[i] = body.fixed
    return positions, velocities, masses, fixed


def pack(bodies: Sequence[Body], positions: np.ndarray, velocities: np.ndarray) -> None:
    for i, body in enumerate(bodies):
        if body.fixed:
            continue
        body.position = positions[i].copy()
        body.velocity = velocities[i].copy()


def accel_arrays(
    positions: np.ndarray,
    velocities: np.ndarray,
    masses: np.ndarray,
    fixed: np.ndarray,
    use_drag: bool = False,
    cfg: PhysicsCfg = PHYSICS_CFG,
) -> np.ndarray:
    """Softened pairwise gravity (plus optional drag) on stacked state arrays."""

    n = positions.shape[0]
    acc = np.zeros((n, 2), dtype=float)
    if n < 2:
        return acc

    # delta[i, j] points from body i to body j
    delta = positions[np.newaxis, :, :] - positions[:, np.newaxis, :]
    dist_sq = delta[..., 0] ** 2 + delta[..., 1] ** 2
    dist = np.sqrt(dist_sq + cfg.softening)

    # Self-pairs and exactly coincident pairs carry no direction.
    active = dist_sq > 0.0
    active[fixed, :] = False
    denom = np.where(active, dist_sq * dist, 1.0)
    factor = np.where(active, cfg.gravitational_constant * masses[np.newaxis, :] / denom, 0.0)
    acc = np.einsum("ij,ijk->ik", factor, delta)

    if use_drag:
        others = ~np.eye(n, dtype=bool)
        in_atmosphere = (
            others
            & fixed[np.newaxis, :]
            & ~fixed[:, np.newaxis]
            & (dist < cfg.atmosphere_radius)
        )
        hits = in_atmosphere.sum(axis=1)
        if hits.any():
            speed = np.hypot(velocities[:, 0], velocities[:, 1])
            drag = (cfg.drag_coefficient * speed * hits)[:, np.newaxis] * velocities
            acc = acc - drag

    acc[fixed] = 0.0
    return acc


def accelerations(
    bodies: Sequence[Body],
    use_drag: bool = False,
    cfg: PhysicsCfg = PHYSICS_CFG,
) -> np.ndarray:
    """Return one acceleration vector per body as an ``(n, 2)`` array."""

    positions, velocities, masses, fixed = unpack(bodies)
    return accel_arrays(positions, velocities, masses, fixed, use_drag, cfg)


def euler_step(
    bodies: Sequence[Body],
    dt: float,
    use_drag: bool = False,
    cfg: PhysicsCfg = PHYSICS_CFG,
) -> None:
    """Semi-implicit Euler: kick with the current acceleration, then drift."""

    r, v, m, fixed = unpack(bodies)
    moving = ~fixed
    a = accel_arrays(r, v, m, fixed, use_drag, cfg)
    v[moving] += a[moving] * dt
    r[moving] += v[moving] * dt
    pack(bodies, r, v)


def verlet_step(
    bodies: Sequence[Body],
    dt: float,
    use_drag: bool = False,
    cfg: PhysicsCfg = PHYSICS_CFG,
) -> None:
    """Velocity-Verlet (kick-drift-kick) step."""

    r, v, m, fixed = unpack(bodies)
    moving = ~fixed
    a1 = accel_arrays(r, v, m, fixed, use_drag, cfg)
    v[moving] += 0.5 * a1[moving] * dt
    r[moving] += v[moving] * dt
    a2 = accel_arrays(r, v, m, fixed, use_drag, cfg)
    v[moving] += 0.5 * a2[moving] * dt
    pack(bodies, r, v)


def rk4_step(
    bodies: Sequence[Body],
    dt: float,
    use_drag: bool = False,
    cfg: PhysicsCfg = PHYSICS_CFG,
) -> None:
    """Advance all non-fixed bodies with a classical RK4 step.

    Drag is evaluated with each stage's velocity estimate, not the velocity
    at the start of the step, so the drag term is integrated to fourth order
    along with gravity.
    """

    r, v, m, fixed = unpack(bodies)
    still = fixed[:, np.newaxis]
    v = np.where(still, 0.0, v)

    k1_r = v
    k1_v = accel_arrays(r, v, m, fixed, use_drag, cfg)

    k2_r = v + 0.5 * dt * k1_v
    k2_v = accel_arrays(r + 0.5 * dt * k1_r, k2_r, m, fixed, use_drag, cfg)

    k3_r = v + 0.5 * dt * k2_v
    k3_v = accel_arrays(r + 0.5 * dt * k2_r, k3_r, m, fixed, use_drag, cfg)

    k4_r = v + dt * k3_v
    k4_v = accel_arrays(r + dt * k3_r, k4_r, m, fixed, use_drag, cfg)

    r_next = r + (dt / 6.0) * (k1_r + 2 * k2_r + 2 * k3_r + k4_r)
    v_next = v + (dt / 6.0) * (k1_v + 2 * k2_v + 2 * k3_v + k4_v)
    pack(bodies, r_next, v_next)


STEPPERS = {
    Integrator.EULER: euler_step,
    Integrator.VERLET: verlet_step,
    Integrator.RK4: rk4_step,
}


def step(
    kind: Integrator | str,
    bodies: Sequence[Body],
    dt: float,
    use_drag: bool = False,
    cfg: PhysicsCfg = PHYSICS_CFG,
) -> None:
    STEPPERS[Integrator.parse(kind)](bodies, dt, use_drag, cfg)


def total_energy(bodies: Sequence[Body], cfg: PhysicsCfg = PHYSICS_CFG) -> float:
    """Kinetic plus pairwise potential energy, without softening."""

    if not bodies:
        return 0.0
    r, v, m, _ = unpack(bodies)
    kinetic = 0.5 * float(np.sum(m * (v[:, 0] ** 2 + v[:, 1] ** 2)))

    i, j = np.triu_indices(len(bodies), k=1)
    if i.size == 0:
        return kinetic
    sep = np.hypot(r[j, 0] - r[i, 0], r[j, 1] - r[i, 1])
    apart = sep > 0.0
    potential = -cfg.gravitational_constant * float(
        np.sum(m[i][apart] * m[j][apart] / sep[apart])
    )
    return kinetic + potential


__all__ = [
    "Integrator",
    "STEPPERS",
    "accel_arrays",
    "accelerations",
    "circular_speed",
    "clamp",
    "escape_speed",
    "euler_step",
    "pack",
    "rk4_step",
    "step",
    "total_energy",
    "unpack",
    "verlet_step",
]
