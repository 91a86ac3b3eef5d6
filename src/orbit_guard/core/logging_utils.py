"""Logging helpers scoped to the orbit safety package."""
from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence


def unique_run_id(root_dir: Path, run_id: Optional[str] = None) -> str:
    """First free run directory name under *root_dir*.

    Custom ids get a plain ``_N`` suffix on clashes, timestamp ids a
    zero-padded one.
    """

    base = run_id or datetime.now().strftime("%Y%m%d_%H%M%S") + "_run"
    candidate = base
    suffix = 1
    while (root_dir / candidate).exists():
        candidate = f"{base}_{suffix}" if run_id else f"{base}_{suffix:02d}"
        suffix += 1
    return candidate


class _CsvSink:
    """One CSV file whose rows are written in batches of ``threshold``."""

    def __init__(self, path: Path, header: Sequence[str], threshold: int) -> None:
        self.path = path
        self._fh = path.open("w", newline="")
        self._fh.write(",".join(header) + "\n")
        self._rows: list[str] = []
        self._threshold = max(1, threshold)

    def append(self, row: str) -> None:
        self._rows.append(row)
        if len(self._rows) >= self._threshold:
            self.flush()

    def flush(self) -> None:
        if not self._rows:
            return
        self._fh.write("\n".join(self._rows) + "\n")
        self._fh.flush()
        self._rows.clear()

    def close(self) -> None:
        self.flush()
        self._fh.close()


class RunLogger:
    """Buffered logger that stores simulation data to CSV files.

    Every run gets its own folder with ``timeseries.csv`` (periodic energy
    and risk samples), ``events.csv`` (collisions, warnings, maneuvers) and
    ``meta.json``. The id of the newest run is written to ``last_run.txt``
    in the root directory.

    Parameters
    ----------
    root_dir:
        Root directory where run folders should be created.
    run_id:
        Optional custom run identifier. If omitted a timestamp based
        identifier in the form ``YYYYmmdd_HHMMSS_run`` is used.
    timeseries_flush_threshold:
        Number of buffered time series rows before an automatic flush.
    events_flush_threshold:
        Number of buffered event rows before an automatic flush.
    """

    TIMESERIES_HEADER = ["t", "tick", "bodies", "energy", "drift_pct", "risk"]
    EVENTS_HEADER = ["t", "type", "bodies", "details"]

    def __init__(
        self,
        root_dir: str | Path = "data/runs",
        run_id: Optional[str] = None,
        *,
        timeseries_flush_threshold: int = 200,
        events_flush_threshold: int = 50,
    ) -> None:
        self.root_dir = Path(root_dir)
        self.root_dir.mkdir(parents=True, exist_ok=True)
        self.run_id = unique_run_id(self.root_dir, run_id)
        self.run_dir = self.root_dir / self.run_id
        self.run_dir.mkdir(parents=True, exist_ok=False)

        self.timeseries_path = self.run_dir / "timeseries.csv"
        self.events_path = self.run_dir / "events.csv"
        self.meta_path = self.run_dir / "meta.json"
        self._timeseries = _CsvSink(self.timeseries_path, self.TIMESERIES_HEADER, timeseries_flush_threshold)
        self._events = _CsvSink(self.events_path, self.EVENTS_HEADER, events_flush_threshold)
        self.closed = False

        (self.root_dir / "last_run.txt").write_text(self.run_id, encoding="utf-8")

    def write_meta(self, meta: dict) -> None:
        with self.meta_path.open("w", encoding="utf-8") as fh:
            json.dump(meta, fh, indent=2, sort_keys=True)

    def log_ts(self, values: Sequence[float]) -> None:
        self._timeseries.append(",".join(self._format_value(v) for v in values))

    def log_event(self, t: float, kind: str, body_ids: Sequence[str], details: dict) -> None:
        # JSON details are quoted CSV-style
        details_json = json.dumps(details, sort_keys=True)
        row = [
            self._format_value(t),
            kind,
            "|".join(body_ids),
            '"' + details_json.replace('"', '""') + '"',
        ]
        self._events.append(",".join(row))

    def flush(self) -> None:
        self._timeseries.flush()
        self._events.flush()

    def close(self) -> None:
        if self.closed:
            return
        self._timeseries.close()
        self._events.close()
        self.closed = True

    @staticmethod
    def _format_value(value: float) -> str:
        return f"{value:.10g}"

    def __enter__(self) -> "RunLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        self.close()
        return None


__all__ = ["RunLogger", "unique_run_id"]
