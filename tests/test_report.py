"""Tests for the headless report command."""

import pytest

from orbit_guard.report import main


def test_report_writes_run_and_figure(tmp_path, capsys):
    main(["--scenario", "lone_orbit", "--ticks", "20", "--runs-dir", str(tmp_path)])

    run_id = (tmp_path / "last_run.txt").read_text(encoding="utf-8")
    run_dir = tmp_path / run_id
    assert (run_dir / "figs" / "drift.png").exists()
    assert (run_dir / "timeseries.csv").exists()
    assert (run_dir / "meta.json").exists()

    out = capsys.readouterr().out
    assert f"Run: {run_id}" in out
    assert "Scenario: lone_orbit" in out
    assert "Final comparison drift" in out


def test_report_counts_warnings(tmp_path, capsys):
    main(["--scenario", "collision_course", "--ticks", "30", "--runs-dir", str(tmp_path)])
    out = capsys.readouterr().out
    assert "warning: SAT-1" in out
    assert "warnings: " in out


def test_rejects_negative_ticks(tmp_path):
    with pytest.raises(SystemExit):
        main(["--ticks", "-1", "--runs-dir", str(tmp_path)])
