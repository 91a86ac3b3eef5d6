"""Configuration dataclasses for the orbit safety simulation."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PhysicsCfg:
    gravitational_constant: float = 0.5
    dt: float = 0.2
    softening: float = 2.0
    trail_length: int = 200
    central_mass: float = 10_000.0
    central_radius: float = 30.0
    satellite_mass: float = 5.0
    satellite_radius: float = 6.0
    max_satellites: int = 20
    orbit_radius_min: float = 120.0
    orbit_radius_max: float = 320.0
    atmosphere_radius: float = 250.0
    drag_coefficient: float = 0.02

    @property
    def mu(self) -> float:
        return self.gravitational_constant * self.central_mass


@dataclass(frozen=True)
class AnalysisCfg:
    energy_every_ticks: int = 5
    risk_every_ticks: int = 15
    energy_history: int = 100

    # Ghost simulations advance at a multiple of the live timestep.
    projection_dt_factor: float = 2.0

    prediction_steps: int = 400
    watch_ratio: float = 4.0
    critical_ratio: float = 1.2
    high_ratio: float = 2.5
    collider_ratio: float = 2.0
    collision_ratio: float = 1.0
    safe_ratio: float = 8.0
    max_reported_pairs: int = 3
    warning_score: float = 60.0
    warning_cooldown: float = 4.0

    escape_steps: int = 300
    escape_margin: float = 10.0
    escape_bound_fraction: float = 0.9
    escape_speed_factors: tuple[float, ...] = (0.85, 0.9, 0.95, 1.0, 1.05, 1.1, 1.15)
    escape_heading_offsets: tuple[float, ...] = (0.0, 0.1, -0.1, 0.2, -0.2, 0.3, -0.3)
    distance_weight: float = 2.0
    deviation_weight: float = 0.8

    comparison_steps: int = 300
    comparison_sample_every: int = 5
    preview_steps: int = 300

    stable_accuracy: float = 85.0
    unstable_accuracy: float = 50.0


PHYSICS_CFG = PhysicsCfg()
ANALYSIS_CFG = AnalysisCfg()


__all__ = ["ANALYSIS_CFG", "PHYSICS_CFG", "AnalysisCfg", "PhysicsCfg"]
