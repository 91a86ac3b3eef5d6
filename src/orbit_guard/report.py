"""Run a headless session, log it and plot the integrator drift comparison."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional, Sequence

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

from .analysis.comparison import DriftSeries
from .analysis.escape import EscapeManeuver
from .core.logging_utils import RunLogger
from .core.physics import Integrator
from .data.scenarios import DEFAULT_SCENARIO_KEY, SCENARIO_DISPLAY_ORDER
from .engine import Simulation

FIGS_SUBDIR = "figs"
SERIES_COLORS = {
    Integrator.EULER: "#f87171",
    Integrator.RK4: "#60a5fa",
    Integrator.VERLET: "#4ade80",
}


def plot_drift(fig_dir: Path, series: DriftSeries) -> Path:
    fig, ax = plt.subplots(figsize=(7, 4))
    for kind, color in SERIES_COLORS.items():
        ax.plot(series.steps, series.series(kind), color=color, lw=1.5, label=kind.value)
    ax.set_xlabel("step")
    ax.set_ylabel("|ΔE/E0| [%]")
    ax.set_title("Energy drift per integrator")
    ax.grid(True, alpha=0.3)
    ax.legend()
    fig.tight_layout()
    path = fig_dir / "drift.png"
    fig.savefig(path, dpi=150)
    plt.close(fig)
    return path


def run_session(sim: Simulation, ticks: int, auto_escape: bool) -> dict[str, int]:
    counts = {"collisions": 0, "warnings": 0, "maneuvers": 0}
    for _ in range(ticks):
        result = sim.tick()
        counts["collisions"] += len(result.collisions)
        for warning in result.warnings:
            counts["warnings"] += 1
            print(f"  t={sim.time:8.2f} warning: {warning.body_id} (risk {warning.score:.0f})")
            if auto_escape:
                plan = sim.auto_escape()
                if isinstance(plan, EscapeManeuver):
                    counts["maneuvers"] += 1
                    print(f"    escape applied, delta-v {plan.delta_v:.3f}")
                else:
                    print("    no safe maneuver, warning dismissed")
                    sim.dismiss_warning()
            else:
                sim.dismiss_warning()
        for event in result.collisions:
            print(f"  t={sim.time:8.2f} {event.describe()}")
    return counts


def print_summary(sim: Simulation, counts: dict[str, int], series: DriftSeries) -> None:
    print(f"Scenario: {sim.scenario_key}, integrator {sim.integrator.value}, drag {'on' if sim.use_drag else 'off'}")
    print(f" Time simulated: {sim.time:.2f} ({sim.tick_count} ticks)")
    print(f" Bodies left: {len(sim.registry)}")
    print(
        f" Live energy drift: {sim.energy.drift:.4f} % "
        f"(accuracy {sim.energy.accuracy:.1f}, {sim.energy.status().value})"
    )
    print(f" Last risk score: {sim.last_risk.score:.0f}")
    print(" Events: " + ", ".join(f"{name}: {count}" for name, count in counts.items()))
    if len(series):
        print(" Final comparison drift:")
        for kind in Integrator:
            print(f"   {kind.value:<6} {series.final(kind):.4f} %")


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Run a headless orbit safety session and plot integrator drift.")
    parser.add_argument("--scenario", choices=SCENARIO_DISPLAY_ORDER, default=DEFAULT_SCENARIO_KEY)
    parser.add_argument("--ticks", type=int, default=600, help="Number of live ticks to run")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--integrator", choices=[kind.value for kind in Integrator], default=Integrator.VERLET.value)
    parser.add_argument("--drag", action="store_true", help="Enable atmospheric drag")
    parser.add_argument("--auto-escape", action="store_true", help="Answer warnings with the escape planner")
    parser.add_argument("--runs-dir", default=str(Path("data") / "runs"))
    args = parser.parse_args(argv)

    if args.ticks < 0:
        parser.error("--ticks must not be negative")

    with RunLogger(args.runs_dir) as logger:
        sim = Simulation(
            args.scenario,
            seed=args.seed,
            integrator=args.integrator,
            use_drag=args.drag,
            logger=logger,
        )
        counts = run_session(sim, args.ticks, args.auto_escape)
        series = sim.run_comparison()

        fig_dir = logger.run_dir / FIGS_SUBDIR
        fig_dir.mkdir(parents=True, exist_ok=True)
        if len(series):
            figure = plot_drift(fig_dir, series)
        else:
            figure = None

    print(f"Run: {logger.run_id}")
    print_summary(sim, counts, series)
    if figure is not None:
        print(f" Figure: {figure}")


if __name__ == "__main__":
    main()
