"""Tests for the buffered CSV run logger."""

import csv
import json

from orbit_guard.core.logging_utils import RunLogger, unique_run_id


def test_creates_run_files(tmp_path):
    with RunLogger(tmp_path, run_id="demo") as logger:
        logger.write_meta({"scenario": "lone_orbit", "seed": 3})
        logger.log_ts([0.2, 1, 2, -12.5, 0.0, 0.0])

    run_dir = tmp_path / "demo"
    assert (tmp_path / "last_run.txt").read_text(encoding="utf-8") == "demo"
    assert json.loads((run_dir / "meta.json").read_text(encoding="utf-8"))["seed"] == 3

    with (run_dir / "timeseries.csv").open(newline="") as fh:
        rows = list(csv.reader(fh))
    assert rows[0] == RunLogger.TIMESERIES_HEADER
    assert rows[1] == ["0.2", "1", "2", "-12.5", "0", "0"]


def test_event_details_are_quoted(tmp_path):
    logger = RunLogger(tmp_path, run_id="events")
    logger.log_event(1.5, "collision", ["SAT-1", "SAT-2"], {"kind": "mutual", "note": 'a "b", c'})
    logger.close()
    logger.close()

    with (tmp_path / "events" / "events.csv").open(newline="") as fh:
        rows = list(csv.reader(fh))
    assert rows[0] == RunLogger.EVENTS_HEADER
    t, kind, bodies, details = rows[1]
    assert (t, kind, bodies) == ("1.5", "collision", "SAT-1|SAT-2")
    assert json.loads(details) == {"kind": "mutual", "note": 'a "b", c'}
    assert logger.closed


def test_existing_run_id_gets_suffix(tmp_path):
    RunLogger(tmp_path, run_id="same").close()
    second = RunLogger(tmp_path, run_id="same")
    second.close()
    assert second.run_id == "same_1"
    assert (tmp_path / "last_run.txt").read_text(encoding="utf-8") == "same_1"


def test_rows_buffer_until_threshold(tmp_path):
    logger = RunLogger(tmp_path, run_id="buffered", timeseries_flush_threshold=3)
    logger.log_ts([0.0, 0, 1, 0.0, 0.0, 0.0])
    logger.log_ts([0.2, 1, 1, 0.0, 0.0, 0.0])
    assert "0.2," not in logger.timeseries_path.read_text()
    logger.log_ts([0.4, 2, 1, 0.0, 0.0, 0.0])
    assert len(logger.timeseries_path.read_text().splitlines()) == 4
    logger.close()


def test_unique_run_id_skips_taken_names(tmp_path):
    (tmp_path / "sweep").mkdir()
    (tmp_path / "sweep_1").mkdir()
    assert unique_run_id(tmp_path, "sweep") == "sweep_2"
    assert unique_run_id(tmp_path, "fresh") == "fresh"
