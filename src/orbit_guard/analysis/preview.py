"""Projected path of one body under a proposed velocity."""
from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from ..core.config import ANALYSIS_CFG, PHYSICS_CFG, AnalysisCfg, PhysicsCfg
from ..core.model import Body, clone_bodies, find_body
from ..core.physics import rk4_step


def preview_trajectory(
    bodies: Sequence[Body],
    body_id: str,
    velocity: Optional[Sequence[float]] = None,
    dt: float = PHYSICS_CFG.dt,
    use_drag: bool = False,
    cfg: PhysicsCfg = PHYSICS_CFG,
    analysis: AnalysisCfg = ANALYSIS_CFG,
    steps: Optional[int] = None,
) -> Optional[np.ndarray]:
    """Return the ``(steps + 1, 2)`` positions of *body_id*, starting where it is now."""

    steps = analysis.preview_steps if steps is None else steps
    ghosts = clone_bodies(bodies)
    target = find_body(ghosts, body_id)
    if target is None:
        return None
    if velocity is not None and not target.fixed:
        target.velocity = np.array(velocity, dtype=float).reshape(2)

    path = np.empty((steps + 1, 2), dtype=float)
    path[0] = target.position
    step_dt = dt * analysis.projection_dt_factor
    for i in range(1, steps + 1):
        rk4_step(ghosts, step_dt, use_drag, cfg)
        path[i] = target.position
    return path


__all__ = ["preview_trajectory"]
