"""Read-only analysers that work on cloned snapshots."""

from .comparison import DriftSeries, run_comparison
from .energy import (
    AccuracyStatus,
    EnergyMonitor,
    accuracy_score,
    accuracy_status,
    drift_percent,
)
from .escape import (
    EscapeManeuver,
    ManeuverCandidate,
    NoSafeManeuver,
    candidate_grid,
    plan_escape,
)
from .orbit import KeplerResult, analyze_orbit, solve_kepler
from .preview import preview_trajectory
from .risk import RiskLevel, RiskPair, RiskReport, predict_risk, risk_score

__all__ = [
    "AccuracyStatus",
    "DriftSeries",
    "EnergyMonitor",
    "EscapeManeuver",
    "KeplerResult",
    "ManeuverCandidate",
    "NoSafeManeuver",
    "RiskLevel",
    "RiskPair",
    "RiskReport",
    "accuracy_score",
    "accuracy_status",
    "analyze_orbit",
    "candidate_grid",
    "drift_percent",
    "plan_escape",
    "predict_risk",
    "preview_trajectory",
    "risk_score",
    "run_comparison",
    "solve_kepler",
]
