"""Tests for the capability-tracker CLI."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from capability_tracker.cli import main
from capability_tracker.seed import default_seed


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch):
	"""Point config at a temp dir and keep logging handlers off the real logger."""
	monkeypatch.setenv("CAPABILITY_TRACKER_CONFIG_DIR", str(tmp_path / "config"))
	monkeypatch.setenv("CAPABILITY_TRACKER_DATA_DIR", str(tmp_path / "data"))
	monkeypatch.delenv("CAPABILITY_TRACKER_SEED_FILE", raising=False)
	monkeypatch.setenv("COLUMNS", "200")
	monkeypatch.setattr("capability_tracker.cli.setup_logging", lambda *args, **kwargs: None)


def _run(*argv: str) -> None:
	with patch("sys.argv", ["capability-tracker", *argv]):
		main()


def _seed_with_plan(tmp_path: Path) -> Path:
	data = default_seed()
	data["plans"] = [{
		"id": "p1",
		"capabilityId": "1",
		"type": "implementation",
		"version": 2,
		"createdAt": "2025-01-05T10:00:00",
		"updatedAt": "2025-01-05T10:00:00",
		"status": "active",
		"phases": {
			"development": {"startDate": "2025-01-10", "endDate": "2025-02-10"},
			"uat": {"startDate": "2025-03-01", "endDate": "2025-03-20"},
		},
	}]
	path = tmp_path / "seed.json"
	path.write_text(json.dumps(data))
	return path


# -- parser --

@pytest.mark.parametrize("argv", [
	["--help"],
	["viz", "--help"],
	["viz", "capabilities", "--help"],
	["viz", "milestones", "--help"],
	["viz", "plans", "--help"],
	["viz", "plan", "--help"],
	["viz", "dashboard", "--help"],
	["viz", "history", "--help"],
	["viz", "compare", "--help"],
	["export", "--help"],
	["import", "--help"],
	["serve", "--help"],
	["setup", "--help"],
	["doctor", "--help"],
])
def test_subcommands_registered(argv):
	with pytest.raises(SystemExit) as exc_info:
		_run(*argv)
	assert exc_info.value.code == 0


def test_no_command_exits_1():
	with pytest.raises(SystemExit) as exc_info:
		_run()
	assert exc_info.value.code == 1


def test_viz_without_target_exits_1(capsys):
	with pytest.raises(SystemExit) as exc_info:
		_run("viz")
	assert exc_info.value.code == 1
	assert "Usage: capability-tracker viz" in capsys.readouterr().out


def test_invalid_timeline_view_rejected():
	with pytest.raises(SystemExit) as exc_info:
		_run("viz", "plans", "--view", "days")
	assert exc_info.value.code == 2


# -- export --

def test_export_capabilities_from_sample_data(capsys):
	_run("export", "capabilities")
	out = capsys.readouterr().out
	assert out.startswith('"Name","Workstream","Lead"')
	assert '"Customer Portal Enhancement"' in out


def test_export_milestones(capsys):
	_run("export", "milestones")
	out = capsys.readouterr().out.splitlines()
	assert out[0] == "Milestone Name,Target Date,Type,Description,Status,Usage Count"
	assert out[1].startswith("API Development Complete,2025-02-15,technical")


def test_export_plans_json_from_seed(tmp_path: Path, capsys):
	_run("--seed", str(_seed_with_plan(tmp_path)), "export", "plans")
	data = json.loads(capsys.readouterr().out)
	assert data[0]["capability"] == "Customer Portal Enhancement"
	assert data[0]["implementationPlan"]["version"] == 2
	assert data[0]["aspirationalPlan"] is None


def test_export_plans_csv_to_file(tmp_path: Path, capsys):
	output = tmp_path / "plans.csv"
	_run("--seed", str(_seed_with_plan(tmp_path)), "export", "plans", "--format", "csv", "--output", str(output))
	lines = output.read_text().splitlines()
	assert lines[0].startswith("Capability,Workstream,Status")
	assert lines[1] == '"Customer Portal Enhancement","Frontend Development","In Progress","","","2025-01-10","2025-03-20"'
	assert f"Wrote {output}" in capsys.readouterr().out


def test_bad_seed_file_exits_1(tmp_path: Path, capsys):
	bad = tmp_path / "bad.json"
	bad.write_text("{not json")
	with pytest.raises(SystemExit) as exc_info:
		_run("--seed", str(bad), "export", "capabilities")
	assert exc_info.value.code == 1
	assert "could not load seed data" in capsys.readouterr().out


# -- import --

def test_import_capabilities(tmp_path: Path, capsys):
	csv_file = tmp_path / "caps.csv"
	csv_file.write_text("Name,Workstream,Lead,SME,BA,Status,RAG\nBilling API,Backend Services,Mike,,,,\n")
	output = tmp_path / "caps.json"

	_run("import", "capabilities", str(csv_file), "--output", str(output))

	assert "Successfully imported 1 capabilities" in capsys.readouterr().out
	data = json.loads(output.read_text())
	names = [c["name"] for c in data["capabilities"]]
	assert names == ["Customer Portal Enhancement", "Billing API"]
	assert data["capabilities"][1]["rag"] == "Blue"


def test_import_bad_header(tmp_path: Path, capsys):
	csv_file = tmp_path / "caps.csv"
	csv_file.write_text("Name,Workstream\nBilling API,Backend Services\n")
	with pytest.raises(SystemExit) as exc_info:
		_run("import", "capabilities", str(csv_file))
	assert exc_info.value.code == 1
	assert "Import Error: CSV file must have headers" in capsys.readouterr().out


def test_import_missing_file(tmp_path: Path):
	with pytest.raises(SystemExit) as exc_info:
		_run("import", "capabilities", str(tmp_path / "nope.csv"))
	assert exc_info.value.code == 1


# -- viz --

def test_viz_capabilities(capsys):
	_run("viz", "capabilities", "--rag", "Amber")
	assert "Showing 1 to 1 of 1 capabilities" in capsys.readouterr().out


def test_viz_capabilities_bad_filter(capsys):
	with pytest.raises(SystemExit) as exc_info:
		_run("viz", "capabilities", "--status", "Someday")
	assert exc_info.value.code == 1
	assert "Error:" in capsys.readouterr().out


def test_viz_plans(tmp_path: Path, capsys):
	_run("--seed", str(_seed_with_plan(tmp_path)), "viz", "plans", "--view", "quarters")
	out = capsys.readouterr().out
	assert "Impl. v2" in out


def test_viz_plan_missing(capsys):
	with pytest.raises(SystemExit) as exc_info:
		_run("viz", "plan", "nope")
	assert exc_info.value.code == 1
	assert "No plan 'nope' found." in capsys.readouterr().out


def test_viz_history_without_entries(tmp_path: Path, capsys):
	_run("--seed", str(_seed_with_plan(tmp_path)), "viz", "history", "p1")
	assert "No history recorded for plan 'p1'" in capsys.readouterr().out


def test_viz_dashboard(capsys):
	_run("viz", "dashboard")
	assert "Capability Dashboard" in capsys.readouterr().out


# -- setup --

def test_setup_creates_config_toml(tmp_path: Path, capsys):
	_run("setup")
	assert (tmp_path / "config" / "config.toml").exists()
	assert "Config file created" in capsys.readouterr().out


def test_setup_check(capsys):
	_run("setup", "--check")
	assert "capability-tracker config check" in capsys.readouterr().out
