"""Damped-trend projection of a location's pollution index history."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np

from .config import ForecastConfig
from .reference_model import ols_fit

logger = logging.getLogger(__name__)


@dataclass
class TrendStatistics:
    """Statistics of the working window that every forecast day shares."""

    count: int
    mean: float
    median: float
    slope: float
    std_dev: float
    recent_mean: float

    @property
    def is_constant(self) -> bool:
        return self.count > 0 and self.std_dev == 0


def positive_indices(values: Iterable[float | None]) -> list[float]:
    """Drop missing, zero and negative readings; they are not measurements."""

    return [float(v) for v in values if v is not None and not np.isnan(v) and v > 0]


def summarise_index_series(
    history: Sequence[float],
    config: ForecastConfig | None = None,
) -> TrendStatistics | None:
    """Compute window statistics, or ``None`` if no positive value exists."""

    config = config or ForecastConfig()
    valid = positive_indices(history)
    if not valid:
        return None

    window = np.asarray(valid[-config.window_size:], dtype=float)
    slope, _ = ols_fit(np.arange(len(window)), window)
    recent = window[-config.recent_size:]

    return TrendStatistics(
        count=int(len(window)),
        mean=float(window.mean()),
        median=float(np.median(window)),
        slope=slope,
        std_dev=float(window.std(ddof=0)),
        recent_mean=float(recent.mean()) if len(recent) else float(window.mean()),
    )


def project_index(
    stats: TrendStatistics | None,
    days_ahead: int,
    rng: np.random.Generator,
    config: ForecastConfig | None = None,
) -> float:
    """Project the index ``days_ahead`` days past the end of the window.

    The trend contribution is damped by ``exp(-days_ahead / damping_days)`` and
    a small uniform noise proportional to the window's spread is added before
    clamping to ``[0, max_index]``.
    """

    config = config or ForecastConfig()
    if stats is None:
        return config.neutral_index

    trend_component = stats.slope * days_ahead
    damping_factor = math.exp(-days_ahead / config.damping_days)
    noise = (rng.random() - 0.5) * stats.std_dev * config.trend_noise

    forecast_index = stats.recent_mean + trend_component * damping_factor + noise
    return min(config.max_index, max(0.0, forecast_index))


def forecast_index(
    history: Sequence[float],
    days_ahead: int,
    rng: np.random.Generator,
    config: ForecastConfig | None = None,
) -> float:
    """Forecast one day's index straight from the raw history.

    Each call recomputes the window statistics; days are never chained on
    earlier forecasts.
    """

    return project_index(summarise_index_series(history, config), days_ahead, rng, config)
