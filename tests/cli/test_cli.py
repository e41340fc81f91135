"""Tests for the Typer CLI."""

import json

from typer.testing import CliRunner

from alerto_triage.cli.main import app

runner = CliRunner()


def test_analyze_prints_verdict(tmp_path, flood_snapshot):
    path = tmp_path / "report.json"
    path.write_text(json.dumps(flood_snapshot))

    result = runner.invoke(app, ["analyze", str(path), "--trace"])

    assert result.exit_code == 0
    assert "rep-flood" in result.output
    assert "approve" in result.output
    assert "location_specificity" in result.output


def test_analyze_rejects_unreadable_snapshot(tmp_path):
    path = tmp_path / "report.json"
    path.write_text(json.dumps(["not-a-report"]))

    result = runner.invoke(app, ["analyze", str(path)])

    assert result.exit_code == 1
    assert "invalid-argument" in result.output


def test_triage_runs_pipeline(tmp_path, flood_snapshot, bare_snapshot):
    reports = tmp_path / "reports.json"
    reports.write_text(json.dumps([flood_snapshot, bare_snapshot]))
    admins = tmp_path / "admins.json"
    admins.write_text(json.dumps([{"user_id": "admin-1", "role": "admin"}]))

    result = runner.invoke(app, ["triage", str(reports), "--admins", str(admins)])

    assert result.exit_code == 0
    assert "verified" in result.output
    assert "false_report" in result.output


def test_triage_rejects_malformed_report(tmp_path):
    reports = tmp_path / "reports.json"
    reports.write_text(json.dumps([{"report_id": "r1", "images": 42}]))

    result = runner.invoke(app, ["triage", str(reports)])

    assert result.exit_code == 1
    assert "invalid-argument" in result.output


def test_triage_rejects_malformed_operator(tmp_path, flood_snapshot):
    reports = tmp_path / "reports.json"
    reports.write_text(json.dumps([flood_snapshot]))
    admins = tmp_path / "admins.json"
    admins.write_text(json.dumps([{"role": "admin"}]))

    result = runner.invoke(app, ["triage", str(reports), "--admins", str(admins)])

    assert result.exit_code == 1
    assert "invalid-argument" in result.output


def test_missing_file(tmp_path):
    result = runner.invoke(app, ["analyze", str(tmp_path / "missing.json")])
    assert result.exit_code == 1
