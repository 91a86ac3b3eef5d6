"""Tick loop and public interface of the orbit safety simulation.

:class:`Simulation` owns the live :class:`BodyRegistry`. Only :meth:`Simulation.tick`
and the explicit mutators below touch live state; every analyser receives a
cloned snapshot. Heavy analysers can be pushed to an :class:`AnalysisWorker`,
whose results are drained and applied at the start of the next tick.
"""
from __future__ import annotations

import time
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence, Union

import numpy as np

from .analysis.comparison import DriftSeries, run_comparison
from .analysis.energy import EnergyMonitor
from .analysis.escape import EscapeManeuver, PlanResult, plan_escape
from .analysis.orbit import KeplerResult, analyze_orbit
from .analysis.preview import preview_trajectory
from .analysis.risk import RiskReport, predict_risk
from .core.collisions import CollisionEvent, resolve_collisions
from .core.config import ANALYSIS_CFG, PHYSICS_CFG, AnalysisCfg, PhysicsCfg
from .core.logging_utils import RunLogger
from .core.model import Body, BodyRegistry, Snapshot
from .core.physics import Integrator, step
from .core.timekeeping import Cadence, CooldownMap
from .data.scenarios import DEFAULT_SCENARIO_KEY, SCENARIOS, random_satellite
from .worker import ESCAPE_JOB, RISK_JOB, AnalysisWorker


@dataclass(frozen=True)
class EarlyWarning:
    body_id: str
    position: tuple[float, float]
    velocity: tuple[float, float]
    score: float
    time: float


@dataclass(frozen=True)
class SelectionCleared:
    body_id: str


@dataclass(frozen=True)
class EscapePlanned:
    result: PlanResult


Event = Union[CollisionEvent, EarlyWarning, SelectionCleared, EscapePlanned]


@dataclass
class TickResult:
    tick: int
    time: float
    snapshot: Snapshot
    advanced: bool = True
    collisions: list[CollisionEvent] = field(default_factory=list)
    warnings: list[EarlyWarning] = field(default_factory=list)


def _pair(vector: Sequence[float]) -> tuple[float, float]:
    return (float(vector[0]), float(vector[1]))


class Simulation:
    """Live simulation with periodic energy, orbit and risk analysis.

    Parameters
    ----------
    scenario:
        Key into :data:`orbit_guard.data.scenarios.SCENARIOS`.
    seed:
        Seed for the random satellite placement.
    worker:
        Optional background worker. Without one the periodic risk projection
        runs inline inside :meth:`tick`.
    logger:
        Optional :class:`RunLogger` receiving energy samples and events.
    hold_on_warning:
        Pause the simulation while an early warning is unresolved.
    """

    def __init__(
        self,
        scenario: str = DEFAULT_SCENARIO_KEY,
        seed: Optional[int] = None,
        *,
        cfg: PhysicsCfg = PHYSICS_CFG,
        analysis: AnalysisCfg = ANALYSIS_CFG,
        integrator: Integrator | str = Integrator.VERLET,
        use_drag: bool = False,
        worker: Optional[AnalysisWorker] = None,
        logger: Optional[RunLogger] = None,
        clock: Callable[[], float] = time.monotonic,
        hold_on_warning: bool = True,
    ) -> None:
        self.cfg = cfg
        self.analysis = analysis
        self.integrator = Integrator.parse(integrator)
        self.use_drag = bool(use_drag)
        self.worker = worker
        self.logger = logger
        self.hold_on_warning = hold_on_warning

        self.registry = BodyRegistry()
        self.energy = EnergyMonitor(capacity=analysis.energy_history)
        self.cooldowns = CooldownMap(window=analysis.warning_cooldown, clock=clock)
        self._energy_cadence = Cadence(analysis.energy_every_ticks)
        self._risk_cadence = Cadence(analysis.risk_every_ticks)
        self._listeners: list[Callable[[Event], Any]] = []
        self.scenario_key = scenario

        self.reset(scenario, seed)

    # ------------------------------------------------------------------
    def reset(self, scenario: Optional[str] = None, seed: Optional[int] = None) -> None:
        """Rebuild the registry from a scenario and clear all analysis state."""

        key = scenario or self.scenario_key
        if key not in SCENARIOS:
            raise ValueError(f"unknown scenario {key!r}")
        self.scenario_key = key
        self._rng = np.random.default_rng(seed)
        SCENARIOS[key].populate(self.registry, self._rng, self.cfg)

        self.time = 0.0
        self.dt = self.cfg.dt
        self.tick_count = 0
        self.paused = False
        self.selected_id: Optional[str] = None
        self.pending_warning: Optional[EarlyWarning] = None
        self.last_orbit: Optional[KeplerResult] = None
        self.last_risk = RiskReport()
        self.last_escape: Optional[PlanResult] = None
        self.last_error: Optional[BaseException] = None
        self.energy.reset()
        self.cooldowns.clear()

        if self.logger is not None:
            self.logger.write_meta(
                {
                    "scenario": key,
                    "seed": seed,
                    "integrator": self.integrator.value,
                    "drag": self.use_drag,
                    "G": self.cfg.gravitational_constant,
                    "dt": self.cfg.dt,
                    "softening": self.cfg.softening,
                    "bodies": [body.id for body in self.registry],
                }
            )

    # ------------------------------------------------------------------
    def subscribe(self, callback: Callable[[Event], Any]) -> Callable[[], None]:
        """Register *callback* for events; returns a function that unsubscribes."""

        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _publish(self, event: Event) -> None:
        for listener in list(self._listeners):
            listener(event)

    def _log_event(self, kind: str, body_ids: Sequence[str], details: dict) -> None:
        if self.logger is not None:
            self.logger.log_event(self.time, kind, body_ids, details)

    # ------------------------------------------------------------------
    def snapshot(self) -> Snapshot:
        return self.registry.snapshot(self.time)

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False

    def set_integrator(self, kind: Integrator | str) -> Integrator:
        self.integrator = Integrator.parse(kind)
        return self.integrator

    def set_drag(self, enabled: bool) -> None:
        self.use_drag = bool(enabled)

    # ------------------------------------------------------------------
    def tick(self, dt: Optional[float] = None) -> TickResult:
        """Advance the live simulation by one step of *dt* (default ``cfg.dt``)."""

        dt = self.cfg.dt if dt is None else float(dt)
        if dt <= 0.0:
            raise ValueError(f"timestep must be positive, got {dt}")
        # On-demand analysers project at the most recent live step.
        self.dt = dt

        warnings = self._drain_worker()
        if self.paused:
            return TickResult(
                tick=self.tick_count,
                time=self.time,
                snapshot=self.snapshot(),
                advanced=False,
                warnings=warnings,
            )

        step(self.integrator, self.registry.bodies, dt, self.use_drag, self.cfg)
        collisions = self._resolve_collisions()
        for body in self.registry:
            if not body.fixed:
                body.add_trail_point()
        self.time += dt

        if self._energy_cadence.due(self.tick_count):
            self._sample_energy()
        if self._risk_cadence.due(self.tick_count):
            warning = self._schedule_risk(dt)
            if warning is not None:
                warnings.append(warning)

        result = TickResult(
            tick=self.tick_count,
            time=self.time,
            snapshot=self.snapshot(),
            collisions=collisions,
            warnings=warnings,
        )
        self.tick_count += 1
        return result

    def run(self, ticks: int, dt: Optional[float] = None) -> list[TickResult]:
        return [self.tick(dt) for _ in range(ticks)]

    def _resolve_collisions(self) -> list[CollisionEvent]:
        survivors, collisions = resolve_collisions(self.registry.bodies)
        if not collisions:
            return collisions
        self.registry.replace(survivors)
        for event in collisions:
            self._log_event(
                "collision",
                event.body_ids,
                {"kind": event.kind.value, "velocities": event.velocities, "removed": event.removed_ids},
            )
            self._publish(event)
            if self.selected_id is not None and self.selected_id in event.removed_ids:
                cleared = self.selected_id
                self.selected_id = None
                self.last_orbit = None
                self._publish(SelectionCleared(cleared))
        return collisions

    def _sample_energy(self) -> None:
        energy = self.energy.sample(self.registry.bodies, self.cfg)
        if self.selected_id is not None:
            self.last_orbit = analyze_orbit(self.registry.bodies, self.selected_id, self.cfg)
        if self.logger is not None:
            self.logger.log_ts(
                [
                    self.time,
                    self.tick_count,
                    len(self.registry),
                    energy,
                    self.energy.drift,
                    self.last_risk.score,
                ]
            )

    # ------------------------------------------------------------------
    def _schedule_risk(self, dt: float) -> Optional[EarlyWarning]:
        bodies = self.snapshot().bodies
        if self.worker is not None:
            self.worker.submit(RISK_JOB, predict_risk, bodies, dt, self.use_drag, self.cfg, self.analysis)
            return None
        return self._apply_risk(predict_risk(bodies, dt, self.use_drag, self.cfg, self.analysis))

    def _drain_worker(self) -> list[EarlyWarning]:
        warnings: list[EarlyWarning] = []
        if self.worker is None:
            return warnings
        for key, future in self.worker.drain():
            error = future.exception()
            if error is not None:
                self.last_error = error
                self._log_event("analysis_error", [], {"job": key, "error": repr(error)})
                continue
            if key == RISK_JOB:
                warning = self._apply_risk(future.result())
                if warning is not None:
                    warnings.append(warning)
            elif key == ESCAPE_JOB:
                self._record_escape(future.result())
        return warnings

    def _apply_risk(self, report: RiskReport) -> Optional[EarlyWarning]:
        self.last_risk = report
        collider = report.first_collider
        if (
            report.score < self.analysis.warning_score
            or self.paused
            or collider is None
            or self.pending_warning is not None
            or self.cooldowns.active(collider)
        ):
            return None
        body = self.registry.get(collider)
        if body is None:
            return None

        warning = EarlyWarning(
            body_id=body.id,
            position=_pair(body.position),
            velocity=_pair(body.velocity),
            score=report.score,
            time=self.time,
        )
        self.pending_warning = warning
        if self.hold_on_warning:
            self.paused = True
        self._log_event("warning", [body.id], {"score": report.score, "min_ratio": report.min_ratio})
        self._publish(warning)
        return warning

    def acknowledge_warning(self, velocity: Optional[Sequence[float]] = None) -> bool:
        """Close the open warning, optionally applying a manual velocity fix."""

        warning = self.pending_warning
        if warning is None:
            return False
        if velocity is not None:
            self.set_velocity(warning.body_id, velocity[0], velocity[1])
            self._log_event("manual_fix", [warning.body_id], {"velocity": _pair(velocity)})
        self.pending_warning = None
        self.paused = False
        return True

    def dismiss_warning(self) -> bool:
        """Ignore the open warning; the same body is not warned again for a while."""

        warning = self.pending_warning
        if warning is None:
            return False
        self.cooldowns.start(warning.body_id)
        self._log_event("dismissed", [warning.body_id], {"cooldown": self.analysis.warning_cooldown})
        self.pending_warning = None
        self.paused = False
        return True

    def auto_escape(self, body_id: Optional[str] = None) -> Optional[PlanResult]:
        """Plan and apply an escape maneuver, by default for the warned body."""

        if body_id is None:
            if self.pending_warning is None:
                return None
            body_id = self.pending_warning.body_id
        result = self.plan_escape(body_id)
        if isinstance(result, EscapeManeuver):
            self.apply_maneuver(result)
            if self.pending_warning is not None and self.pending_warning.body_id == body_id:
                self.pending_warning = None
                self.paused = False
        return result

    # ------------------------------------------------------------------
    def add_body(self, near_fixed_id: Optional[str] = None) -> Optional[str]:
        """Launch a satellite on a random circular orbit; returns its id."""

        if near_fixed_id is not None:
            anchor = self.registry.get(near_fixed_id)
            if anchor is None or not anchor.fixed:
                return None
        else:
            fixed = self.registry.fixed_bodies()
            if not fixed:
                return None
            anchor = fixed[0]
        if len(self.registry.satellites()) >= self.cfg.max_satellites:
            return None
        body = self.registry.add(random_satellite(self.registry, anchor, self._rng, self.cfg))
        return body.id

    def remove_last_body(self) -> Optional[str]:
        body = self.registry.remove_last()
        if body is None:
            return None
        if body.id == self.selected_id:
            self.selected_id = None
            self.last_orbit = None
            self._publish(SelectionCleared(body.id))
        return body.id

    def select(self, body_id: Optional[str]) -> bool:
        if body_id is None:
            self.selected_id = None
            self.last_orbit = None
            return True
        body = self.registry.get(body_id)
        if body is None or body.fixed:
            return False
        self.selected_id = body.id
        self.last_orbit = analyze_orbit(self.registry.bodies, body.id, self.cfg)
        return True

    def set_velocity(self, body_id: str, vx: float, vy: float) -> bool:
        body = self.registry.get(body_id)
        if body is None or body.fixed:
            return False
        body.velocity = np.array([vx, vy], dtype=float)
        body.trail.clear()
        return True

    def apply_maneuver(self, maneuver: EscapeManeuver) -> bool:
        applied = self.set_velocity(maneuver.body_id, *maneuver.velocity)
        if applied:
            self._log_event(
                "maneuver",
                [maneuver.body_id],
                {"velocity": maneuver.velocity, "score": maneuver.score, "delta_v": maneuver.delta_v},
            )
        return applied

    # ------------------------------------------------------------------
    def analyze_orbit(self, body_id: str) -> Optional[KeplerResult]:
        return analyze_orbit(self.snapshot().bodies, body_id, self.cfg)

    def predict_risk(self) -> RiskReport:
        """Run the risk projection now and apply it like a scheduled one."""

        report = predict_risk(self.snapshot().bodies, self.dt, self.use_drag, self.cfg, self.analysis)
        self._apply_risk(report)
        return report

    def plan_escape(self, body_id: str) -> Optional[PlanResult]:
        result = plan_escape(self.snapshot().bodies, body_id, self.dt, self.use_drag, self.cfg, self.analysis)
        if result is not None:
            self._record_escape(result)
        return result

    def request_escape(self, body_id: str) -> Optional[Future]:
        """Queue an escape search on the worker; the result arrives on a later tick."""

        if self.worker is None:
            self.plan_escape(body_id)
            return None
        return self.worker.submit(
            ESCAPE_JOB,
            plan_escape,
            self.snapshot().bodies,
            body_id,
            self.dt,
            self.use_drag,
            self.cfg,
            self.analysis,
        )

    def _record_escape(self, result: Optional[PlanResult]) -> None:
        if result is None:
            return
        self.last_escape = result
        if not isinstance(result, EscapeManeuver):
            self._log_event("no_safe_maneuver", [result.body_id], {"evaluated": result.evaluated})
        self._publish(EscapePlanned(result))

    def run_comparison(self) -> DriftSeries:
        """Integrator drift comparison; the live loop is held while it runs."""

        was_paused = self.paused
        self.paused = True
        try:
            return run_comparison(self.snapshot().bodies, self.dt, self.cfg, self.analysis)
        finally:
            self.paused = was_paused

    def preview(self, body_id: str, velocity: Optional[Sequence[float]] = None) -> Optional[np.ndarray]:
        return preview_trajectory(
            self.snapshot().bodies, body_id, velocity, self.dt, self.use_drag, self.cfg, self.analysis
        )

    @property
    def bodies(self) -> list[Body]:
        return self.snapshot().bodies


__all__ = [
    "EarlyWarning",
    "EscapePlanned",
    "Event",
    "SelectionCleared",
    "Simulation",
    "TickResult",
]
