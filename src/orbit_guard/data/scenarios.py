"""Scenario definitions for preset simulation starting conditions."""
from __future__ import annotations

import math
from collections import deque
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from ..core.config import PHYSICS_CFG, PhysicsCfg
from ..core.model import Body, BodyRegistry
from ..core.physics import circular_speed

CENTRAL_BODY_ID = "EARTH"


def make_central_body(
    center: tuple[float, float] = (0.0, 0.0),
    cfg: PhysicsCfg = PHYSICS_CFG,
) -> Body:
    return Body(
        id=CENTRAL_BODY_ID,
        position=np.array(center, dtype=float),
        velocity=np.zeros(2, dtype=float),
        mass=cfg.central_mass,
        radius=cfg.central_radius,
        fixed=True,
        trail=deque(maxlen=cfg.trail_length),
    )


def make_orbiting_satellite(
    body_id: str,
    anchor: Body,
    radius: float,
    angle: float,
    cfg: PhysicsCfg = PHYSICS_CFG,
    speed_factor: float = 1.0,
) -> Body:
    """Satellite on a counter-clockwise circular orbit around *anchor*."""

    mu = cfg.gravitational_constant * anchor.mass
    v = circular_speed(mu, radius) * speed_factor
    position = anchor.position + radius * np.array([math.cos(angle), math.sin(angle)])
    velocity = v * np.array([-math.sin(angle), math.cos(angle)])
    return Body(
        id=body_id,
        position=position,
        velocity=velocity,
        mass=cfg.satellite_mass,
        radius=cfg.satellite_radius,
        trail=deque(maxlen=cfg.trail_length),
    )


def random_satellite(
    registry: BodyRegistry,
    anchor: Body,
    rng: np.random.Generator,
    cfg: PhysicsCfg = PHYSICS_CFG,
) -> Body:
    radius = rng.uniform(cfg.orbit_radius_min, cfg.orbit_radius_max)
    angle = rng.uniform(0.0, 2.0 * math.pi)
    return make_orbiting_satellite(registry.next_id(), anchor, radius, angle, cfg)


def _reference(registry: BodyRegistry, rng: np.random.Generator, cfg: PhysicsCfg) -> None:
    earth = registry.add(make_central_body(cfg=cfg))
    for _ in range(3):
        registry.add(random_satellite(registry, earth, rng, cfg))


def _collision_course(registry: BodyRegistry, rng: np.random.Generator, cfg: PhysicsCfg) -> None:
    earth = registry.add(make_central_body(cfg=cfg))
    # Same radius, opposite directions: the pair meets head-on.
    registry.add(make_orbiting_satellite(registry.next_id(), earth, 200.0, 0.0, cfg))
    retrograde = make_orbiting_satellite(registry.next_id(), earth, 200.0, 0.6, cfg)
    retrograde.velocity = -retrograde.velocity
    registry.add(retrograde)


def _lone_orbit(registry: BodyRegistry, rng: np.random.Generator, cfg: PhysicsCfg) -> None:
    earth = registry.add(make_central_body(cfg=cfg))
    registry.add(make_orbiting_satellite(registry.next_id(), earth, 200.0, 0.0, cfg))


def _decaying(registry: BodyRegistry, rng: np.random.Generator, cfg: PhysicsCfg) -> None:
    earth = registry.add(make_central_body(cfg=cfg))
    registry.add(make_orbiting_satellite(registry.next_id(), earth, 150.0, 0.0, cfg))
    registry.add(
        make_orbiting_satellite(registry.next_id(), earth, 230.0, math.pi, cfg, speed_factor=0.9)
    )


@dataclass(frozen=True)
class Scenario:
    key: str
    name: str
    description: str
    build: Callable[[BodyRegistry, np.random.Generator, PhysicsCfg], None]

    def populate(
        self,
        registry: BodyRegistry,
        rng: Optional[np.random.Generator] = None,
        cfg: PhysicsCfg = PHYSICS_CFG,
    ) -> BodyRegistry:
        registry.clear()
        self.build(registry, rng if rng is not None else np.random.default_rng(), cfg)
        return registry


SCENARIO_DEFINITIONS: tuple[Scenario, ...] = (
    Scenario(
        key="reference",
        name="Reference",
        description="Fixed central mass with three satellites on random circular orbits.",
        build=_reference,
    ),
    Scenario(
        key="collision_course",
        name="Collision course",
        description="Two satellites sharing an orbit in opposite directions.",
        build=_collision_course,
    ),
    Scenario(
        key="lone_orbit",
        name="Lone orbit",
        description="A single satellite on a circular orbit, nothing else nearby.",
        build=_lone_orbit,
    ),
    Scenario(
        key="decaying",
        name="Decaying",
        description="Low satellite inside the atmosphere plus one on a sub-circular orbit.",
        build=_decaying,
    ),
)

SCENARIOS: dict[str, Scenario] = {scenario.key: scenario for scenario in SCENARIO_DEFINITIONS}
SCENARIO_DISPLAY_ORDER: list[str] = [scenario.key for scenario in SCENARIO_DEFINITIONS]
DEFAULT_SCENARIO_KEY = SCENARIO_DISPLAY_ORDER[0]


__all__ = [
    "CENTRAL_BODY_ID",
    "DEFAULT_SCENARIO_KEY",
    "SCENARIO_DEFINITIONS",
    "SCENARIO_DISPLAY_ORDER",
    "SCENARIOS",
    "Scenario",
    "make_central_body",
    "make_orbiting_satellite",
    "random_satellite",
]
