"""Keplerian orbit determination relative to the fixed central body."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from ..core.config import PHYSICS_CFG, PhysicsCfg
from ..core.model import Body, find_body, first_fixed


@dataclass(frozen=True)
class KeplerResult:
    body_id: str
    bound: bool
    mu: float
    specific_energy: float
    eccentricity: Optional[float] = None
    semi_major_axis: Optional[float] = None
    eccentric_anomaly: Optional[float] = None

    @property
    def classification(self) -> str:
        return "elliptic" if self.bound else "hyperbolic/parabolic"

    @property
    def eccentricity_label(self) -> str:
        if self.eccentricity is None:
            return ">=1"
        return f"{self.eccentricity:.4f}"

    @property
    def eccentric_anomaly_deg(self) -> Optional[float]:
        if self.eccentric_anomaly is None:
            return None
        return math.degrees(self.eccentric_anomaly)

    @property
    def period(self) -> Optional[float]:
        if self.semi_major_axis is None:
            return None
        return 2.0 * math.pi * math.sqrt(self.semi_major_axis**3 / self.mu)


def solve_kepler(mean_anomaly: float, e: float, tolerance: float = 1e-6, max_iter: int = 10) -> float:
    """Newton-Raphson solution of ``E - e sin E = M`` starting from ``E = M``.

    Stops early with the current estimate where the derivative vanishes
    (``e = 1`` at ``E = 0``, a radial orbit).
    """

    E = mean_anomaly
    for _ in range(max_iter):
        f = E - e * math.sin(E) - mean_anomaly
        if abs(f) < tolerance:
            break
        df = 1.0 - e * math.cos(E)
        if abs(df) < 1e-12:
            break
        dE = f / df
        E -= dE
        if abs(dE) < tolerance:
            break
    return E


def analyze_orbit(
    bodies: Sequence[Body],
    body_id: str,
    cfg: PhysicsCfg = PHYSICS_CFG,
) -> Optional[KeplerResult]:
    """Orbital elements of *body_id*, or ``None`` if they cannot be derived."""

    body = find_body(bodies, body_id)
    center = first_fixed(bodies)
    if body is None or center is None or body.fixed:
        return None

    dx = float(body.position[0] - center.position[0])
    dy = float(body.position[1] - center.position[1])
    vx = float(body.velocity[0] - center.velocity[0])
    vy = float(body.velocity[1] - center.velocity[1])
    r = math.hypot(dx, dy)
    if r == 0.0:
        return None

    mu = cfg.gravitational_constant * center.mass
    v2 = vx * vx + vy * vy
    epsilon = v2 / 2.0 - mu / r
    if epsilon >= 0.0:
        return KeplerResult(body_id=body.id, bound=False, mu=mu, specific_energy=epsilon)

    a = -mu / (2.0 * epsilon)
    h = dx * vy - dy * vx
    e = math.sqrt(max(0.0, 1.0 + 2.0 * epsilon * h * h / (mu * mu)))
    # Polar angle used directly as the mean anomaly (no true-anomaly conversion).
    mean_anomaly = math.atan2(dy, dx)
    E = solve_kepler(mean_anomaly, e)
    return KeplerResult(
        body_id=body.id,
        bound=True,
        mu=mu,
        specific_energy=epsilon,
        eccentricity=e,
        semi_major_axis=a,
        eccentric_anomaly=E,
    )


__all__ = ["KeplerResult", "analyze_orbit", "solve_kepler"]
