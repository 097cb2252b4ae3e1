"""Configuration loading utilities for the water-quality forecast pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Optional

import yaml


@dataclass
class DataConfig:
	"""Paths used by the ingestion and forecast pipeline."""

	history_path: Path
	reference_file: Path
	output_dir: Path


@dataclass
class ForecastConfig:
	"""Constants driving the forecasting heuristic."""

	horizon_days: int = 31
	start_date: date = date(2026, 1, 1)
	neutral_index: float = 0.5
	window_size: int = 60
	recent_size: int = 7
	damping_days: float = 30.0
	trend_noise: float = 0.08
	parameter_noise: float = 0.15
	weak_fit_r_squared: float = 0.5
	max_index: float = 10.0
	base_confidence: float = 0.85
	confidence_decay: float = 0.012
	default_confidence: float = 0.60
	random_seed: Optional[int] = None


@dataclass
class PipelineConfig:
	"""Top-level configuration for the forecast pipeline."""

	data: DataConfig
	forecast: ForecastConfig = field(default_factory=ForecastConfig)


DEFAULT_CONFIG_PATH = Path("config/config.yaml")


def _resolve_path(path_value: str, base_dir: Optional[Path] = None) -> Path:
	"""Resolve a path string to an absolute :class:`Path`.

	The function keeps paths relative to the project root to stay cross-platform.
	"""

	path = Path(path_value)
	if not path.is_absolute() and base_dir is not None:
		path = base_dir / path
	return path


def _parse_date(value: object) -> date:
	"""Accept a YAML date or an ISO ``YYYY-MM-DD`` string."""

	if isinstance(value, date):
		return value
	return date.fromisoformat(str(value))


def load_config(config_path: Optional[Path] = None) -> PipelineConfig:
	"""Load pipeline configuration from YAML."""

	config_path = config_path or DEFAULT_CONFIG_PATH

	# Absolute config: project root is the parent of config/; otherwise search from cwd
	if config_path.is_absolute():
		base_dir = config_path.parent.parent
	else:
		current = Path.cwd()
		if (current / "config" / "config.yaml").exists():
			base_dir = current
		elif (current.parent / "config" / "config.yaml").exists():
			base_dir = current.parent
		else:
			base_dir = current
		config_path = base_dir / config_path

	if not config_path.exists():
		raise FileNotFoundError(f"Configuration file not found at {config_path}")

	with open(config_path, "r", encoding="utf-8") as fp:
		payload = yaml.safe_load(fp) or {}

	data_section = payload.get("data", {})
	forecast_section = payload.get("forecast", {})
	defaults = ForecastConfig()

	data_cfg = DataConfig(
		history_path=_resolve_path(data_section.get("history_path", "data/raw/history.xlsx"), base_dir),
		reference_file=_resolve_path(
			data_section.get("reference_file", "data/reference/training_data.json"),
			base_dir,
		),
		output_dir=_resolve_path(data_section.get("output_dir", "data/forecasts"), base_dir),
	)

	seed = forecast_section.get("random_seed", defaults.random_seed)
	forecast_cfg = ForecastConfig(
		horizon_days=int(forecast_section.get("horizon_days", defaults.horizon_days)),
		start_date=_parse_date(forecast_section.get("start_date", defaults.start_date)),
		neutral_index=float(forecast_section.get("neutral_index", defaults.neutral_index)),
		window_size=int(forecast_section.get("window_size", defaults.window_size)),
		recent_size=int(forecast_section.get("recent_size", defaults.recent_size)),
		damping_days=float(forecast_section.get("damping_days", defaults.damping_days)),
		trend_noise=float(forecast_section.get("trend_noise", defaults.trend_noise)),
		parameter_noise=float(forecast_section.get("parameter_noise", defaults.parameter_noise)),
		weak_fit_r_squared=float(forecast_section.get("weak_fit_r_squared", defaults.weak_fit_r_squared)),
		max_index=float(forecast_section.get("max_index", defaults.max_index)),
		base_confidence=float(forecast_section.get("base_confidence", defaults.base_confidence)),
		confidence_decay=float(forecast_section.get("confidence_decay", defaults.confidence_decay)),
		default_confidence=float(forecast_section.get("default_confidence", defaults.default_confidence)),
		random_seed=int(seed) if seed is not None else None,
	)

	return PipelineConfig(data=data_cfg, forecast=forecast_cfg)
