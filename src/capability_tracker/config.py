"""Configuration system using platformdirs for cross-platform paths."""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import platformdirs

APP_NAME = "capability-tracker"
APP_AUTHOR = "capability-tracker"

TIMELINE_VIEWS = ("weeks", "months", "quarters")


@dataclass
class Config:
	"""Central configuration with XDG/platform conventions."""

	config_dir: Path = field(default_factory=lambda: Path(platformdirs.user_config_dir(APP_NAME)))
	data_dir: Path = field(default_factory=lambda: Path(platformdirs.user_data_dir(APP_NAME)))

	# Derived paths
	export_dir: Path = field(init=False)
	log_dir: Path = field(init=False)

	# User-configurable
	current_user: str = "1"
	timeline_view: str = "months"
	seed_file: Optional[Path] = None
	log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

	def __post_init__(self) -> None:
		self.export_dir = self.data_dir / "exports"
		self.log_dir = self.data_dir / "logs"
		if self.timeline_view not in TIMELINE_VIEWS:
			raise ValueError(
				f"timeline_view must be one of {', '.join(TIMELINE_VIEWS)}, got {self.timeline_view!r}"
			)

	def ensure_dirs(self) -> None:
		"""Create all required directories."""
		self.config_dir.mkdir(parents=True, exist_ok=True)
		self.data_dir.mkdir(parents=True, exist_ok=True)
		self.export_dir.mkdir(parents=True, exist_ok=True)
		self.log_dir.mkdir(parents=True, exist_ok=True)


def _apply_env_overrides(config: Config) -> Config:
	"""Apply CAPABILITY_TRACKER_* environment variable overrides."""
	path_map = {
		"CAPABILITY_TRACKER_CONFIG_DIR": "config_dir",
		"CAPABILITY_TRACKER_DATA_DIR": "data_dir",
		"CAPABILITY_TRACKER_SEED_FILE": "seed_file",
	}
	value_map = {
		"CAPABILITY_TRACKER_CURRENT_USER": "current_user",
		"CAPABILITY_TRACKER_TIMELINE_VIEW": "timeline_view",
		"CAPABILITY_TRACKER_LOG_LEVEL": "log_level",
	}
	for env_key, attr in path_map.items():
		val = os.getenv(env_key)
		if val:
			setattr(config, attr, Path(val))
	for env_key, attr in value_map.items():
		val = os.getenv(env_key)
		if val:
			setattr(config, attr, val)
	# Recompute derived paths after overrides
	config.__post_init__()
	return config


def _apply_toml(config: Config) -> Config:
	"""Apply config.toml overrides if file exists."""
	toml_path = config.config_dir / "config.toml"
	if not toml_path.exists():
		return config

	with open(toml_path, "rb") as f:
		data = tomllib.load(f)

	path_fields = {"config_dir", "data_dir", "seed_file"}
	for key, val in data.items():
		if hasattr(config, key):
			if key in path_fields:
				setattr(config, key, Path(os.path.expanduser(val)))
			else:
				setattr(config, key, val)

	# Recompute derived paths after toml overrides
	config.__post_init__()
	return config


def load_config() -> Config:
	"""Load config with precedence: env vars > config.toml > defaults."""
	config = Config()
	# env first so CAPABILITY_TRACKER_CONFIG_DIR decides where config.toml is read from
	config = _apply_env_overrides(config)
	config = _apply_toml(config)
	config = _apply_env_overrides(config)
	config.ensure_dirs()
	return config


# Singleton
_config: Config | None = None


def get_config() -> Config:
	"""Get or create the global config instance."""
	global _config
	if _config is None:
		_config = load_config()
	return _config
