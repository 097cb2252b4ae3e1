"""Water-quality forecast core package.

This package exposes high-level utilities to parse historical water-quality
workbooks, fit per-category reference models, and generate 31-day forecasts
of the pollution index and its eight underlying parameters.
"""

from .config import DataConfig, ForecastConfig, PipelineConfig, load_config
from .forecast import ForecastSeries, default_forecast, forecast
from .pipeline import run_forecast_pipeline
from .pollution_index import calculate_pollution_index, classify_category
from .records import ParameterVector, PollutionRecord

__all__ = [
	"DataConfig",
	"ForecastConfig",
	"PipelineConfig",
	"load_config",
	"ForecastSeries",
	"default_forecast",
	"forecast",
	"run_forecast_pipeline",
	"calculate_pollution_index",
	"classify_category",
	"ParameterVector",
	"PollutionRecord",
]
