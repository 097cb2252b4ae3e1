"""Forecast pipeline covering every location of a history workbook."""

from __future__ import annotations

import logging
from functools import partial
from pathlib import Path

import numpy as np
import pandas as pd

from .config import PipelineConfig, load_config
from .data_processing import load_historical_workbook, load_reference_dataset
from .forecast import ForecastSeries, forecast

logger = logging.getLogger(__name__)


def run_forecast_pipeline(
    config_path: Path | None = None,
    config: PipelineConfig | None = None,
) -> dict[str, ForecastSeries]:
    """Run the complete forecast pipeline.

    This function:
    1. Loads configuration
    2. Parses the historical workbook into per-location series
    3. Forecasts each location, re-reading the reference dataset per location
    4. Writes one CSV of all forecasts to the output directory

    Args:
        config_path: Optional path to config file
        config: Already-loaded configuration, takes precedence over ``config_path``

    Returns:
        Mapping of location name to its forecast series
    """
    config = config or load_config(config_path)
    rng = np.random.default_rng(config.forecast.random_seed)

    logger.info("Step 1: Loading history from %s", config.data.history_path)
    history = load_historical_workbook(config.data.history_path)

    logger.info("Step 2: Forecasting %d locations", len(history))
    reference_loader = partial(load_reference_dataset, config.data.reference_file)
    results = {
        location: forecast(history, location, reference_loader, rng=rng, config=config.forecast)
        for location in history
    }

    save_forecasts(results, config.data.output_dir)
    logger.info("Pipeline completed for %d locations", len(results))
    return results


def save_forecasts(results: dict[str, ForecastSeries], output_dir: Path) -> Path:
    """Persist all forecasts to ``output_dir/forecast.csv``."""

    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / "forecast.csv"
    frames = [series.to_frame() for series in results.values()]
    combined = pd.concat(frames, ignore_index=True) if frames else pd.DataFrame()
    combined.to_csv(output_path, index=False)
    logger.info("Saved forecasts to %s", output_path)
    return output_path
