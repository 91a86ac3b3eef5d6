"""
orbit_guard - orbit safety simulation
=====================================

A fixed central mass with orbiting satellites, three interchangeable
integrators and a set of safety analysers: energy drift, collision
detection, Keplerian elements, collision-risk projection and automatic
escape planning.

    from orbit_guard import Simulation

    sim = Simulation(seed=7)
    result = sim.tick()
    report = sim.predict_risk()
"""

__version__ = "1.0.0"

from .core.config import ANALYSIS_CFG, PHYSICS_CFG, AnalysisCfg, PhysicsCfg
from .core.model import Body, BodyRegistry, Snapshot
from .core.physics import Integrator
from .engine import EarlyWarning, SelectionCleared, Simulation, TickResult
from .worker import AnalysisWorker

__all__ = [
    "ANALYSIS_CFG",
    "AnalysisCfg",
    "AnalysisWorker",
    "Body",
    "BodyRegistry",
    "EarlyWarning",
    "Integrator",
    "PHYSICS_CFG",
    "PhysicsCfg",
    "SelectionCleared",
    "Simulation",
    "Snapshot",
    "TickResult",
]
