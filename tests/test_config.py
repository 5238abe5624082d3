"""Tests for the configuration system."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from capability_tracker.config import Config, _apply_env_overrides, load_config


def test_config_defaults():
	"""Config should have sensible defaults."""
	config = Config()
	assert config.config_dir.is_absolute()
	assert config.data_dir.is_absolute()
	assert config.export_dir == config.data_dir / "exports"
	assert config.log_dir == config.data_dir / "logs"
	assert config.current_user == "1"
	assert config.timeline_view == "months"
	assert config.seed_file is None


def test_config_rejects_unknown_timeline_view():
	with pytest.raises(ValueError, match="timeline_view"):
		Config(timeline_view="days")


def test_config_env_overrides():
	"""Environment variables should override defaults."""
	config = Config()
	with patch.dict(os.environ, {
		"CAPABILITY_TRACKER_DATA_DIR": "/tmp/test-data",
		"CAPABILITY_TRACKER_CONFIG_DIR": "/tmp/test-config",
		"CAPABILITY_TRACKER_CURRENT_USER": "2",
		"CAPABILITY_TRACKER_TIMELINE_VIEW": "quarters",
		"CAPABILITY_TRACKER_SEED_FILE": "/tmp/seed.json",
	}):
		config = _apply_env_overrides(config)
		assert config.data_dir == Path("/tmp/test-data")
		assert config.config_dir == Path("/tmp/test-config")
		assert config.current_user == "2"
		assert config.timeline_view == "quarters"
		assert config.seed_file == Path("/tmp/seed.json")
		# Derived paths should be recomputed
		assert config.log_dir == Path("/tmp/test-data/logs")
		assert config.export_dir == Path("/tmp/test-data/exports")


def test_config_ensure_dirs(tmp_path: Path):
	"""ensure_dirs should create all required directories."""
	config = Config(
		config_dir=tmp_path / "config",
		data_dir=tmp_path / "data",
	)
	assert not config.config_dir.exists()
	assert not config.data_dir.exists()

	config.ensure_dirs()

	assert config.config_dir.exists()
	assert config.data_dir.exists()
	assert config.export_dir.exists()
	assert config.log_dir.exists()


def test_load_config_creates_dirs(tmp_path: Path):
	"""load_config should create directories."""
	with patch.dict(os.environ, {
		"CAPABILITY_TRACKER_DATA_DIR": str(tmp_path / "data"),
		"CAPABILITY_TRACKER_CONFIG_DIR": str(tmp_path / "config"),
	}):
		config = load_config()
		assert config.data_dir.exists()
		assert config.config_dir.exists()


def test_load_config_reads_toml(tmp_path: Path):
	"""config.toml values apply over defaults."""
	config_dir = tmp_path / "config"
	config_dir.mkdir()
	(config_dir / "config.toml").write_text('timeline_view = "weeks"\ncurrent_user = "2"\n')
	with patch.dict(os.environ, {
		"CAPABILITY_TRACKER_DATA_DIR": str(tmp_path / "data"),
		"CAPABILITY_TRACKER_CONFIG_DIR": str(config_dir),
	}):
		config = load_config()
	assert config.timeline_view == "weeks"
	assert config.current_user == "2"


def test_env_wins_over_toml(tmp_path: Path):
	config_dir = tmp_path / "config"
	config_dir.mkdir()
	(config_dir / "config.toml").write_text('timeline_view = "weeks"\n')
	with patch.dict(os.environ, {
		"CAPABILITY_TRACKER_DATA_DIR": str(tmp_path / "data"),
		"CAPABILITY_TRACKER_CONFIG_DIR": str(config_dir),
		"CAPABILITY_TRACKER_TIMELINE_VIEW": "quarters",
	}):
		config = load_config()
	assert config.timeline_view == "quarters"
