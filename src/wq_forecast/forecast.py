"""Forecast utilities for water-quality prediction."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Callable, Optional, Sequence, Union

import numpy as np
import pandas as pd

from .config import ForecastConfig
from .pollution_index import classify_category
from .records import BAIK, PARAMETER_FIELDS, HistoricalSeries, ParameterVector, PollutionRecord
from .reference_model import ReferenceSample, build_reference_models
from .synthesis import synthesize_parameters
from .trend import positive_indices, project_index, summarise_index_series
from .validation import validate_record

logger = logging.getLogger(__name__)

ReferenceSource = Union[Sequence[ReferenceSample], Callable[[], Optional[Sequence[ReferenceSample]]], None]

DEFAULT_PARAMETERS = {
    "Ammonia": 0.3,
    "BOD": 1.5,
    "COD": 5.0,
    "DO": 7.0,
    "Nitrat": 5.0,
    "pH": 7.5,
    "TDS": 300.0,
    "TSS": 15.0,
}
DEFAULT_INDEX = 0.5


@dataclass
class ForecastSeries:
    """Container for one location's daily forecast."""

    location: str
    records: list[PollutionRecord] = field(default_factory=list)
    used_default: bool = False

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)

    def __getitem__(self, item):
        return self.records[item]

    @property
    def dates(self) -> list[date]:
        return [r.date for r in self.records]

    def to_frame(self) -> pd.DataFrame:
        """One row per forecast day using the external column names."""

        frame = pd.DataFrame([r.to_dict() for r in self.records])
        if not frame.empty:
            frame.insert(0, "location", self.location)
        return frame


def _forecast_dates(config: ForecastConfig) -> list[date]:
    return [config.start_date + timedelta(days=day) for day in range(config.horizon_days)]


def default_forecast(
    location: str = "",
    rng: np.random.Generator | None = None,
    config: ForecastConfig | None = None,
) -> ForecastSeries:
    """Baseline profile used when no reference data or usable history exists.

    Each parameter wanders within ±7.5% of its baseline and the index within
    ±0.1 of 0.5; every day is Baik with a flat confidence.
    """

    config = config or ForecastConfig()
    rng = rng or np.random.default_rng()
    logger.info("Generating default forecast", extra={"location": location})

    records = []
    for forecast_date in _forecast_dates(config):
        values = {}
        for name, base in DEFAULT_PARAMETERS.items():
            variation = (rng.random() - 0.5) * base * 0.15
            values[PARAMETER_FIELDS[name]] = max(0.0, round(base + variation, 2))

        index = max(0.0, DEFAULT_INDEX + (rng.random() - 0.5) * 0.2)
        records.append(
            PollutionRecord(
                date=forecast_date,
                parameters=ParameterVector(**values),
                index=round(index, 2),
                category=BAIK,
                confidence=config.default_confidence,
            )
        )

    return ForecastSeries(location=location, records=records, used_default=True)


def _resolve_reference(reference: ReferenceSource) -> Optional[Sequence[ReferenceSample]]:
    if reference is None:
        return None
    if callable(reference):
        try:
            return reference()
        except Exception as exc:
            logger.error("Failed to load reference data: %s", exc, exc_info=True)
            return None
    return reference


def forecast(
    historical_series: HistoricalSeries,
    location: str,
    reference: ReferenceSource = None,
    rng: np.random.Generator | None = None,
    config: ForecastConfig | None = None,
) -> ForecastSeries:
    """Generate the daily forecast for ``location``.

    Args:
        historical_series: Mapping of location name to its ascending records
        location: Key of the location to forecast
        reference: Reference samples, or a zero-argument loader returning them
        rng: Random generator for the injected noise (unseeded if omitted)
        config: Forecast constants; defaults reproduce the standard horizon

    Returns:
        ForecastSeries with exactly ``config.horizon_days`` records
    """
    config = config or ForecastConfig()
    rng = rng or np.random.default_rng()
    logger.info("Starting forecast", extra={"location": location})

    samples = _resolve_reference(reference)
    if not samples:
        logger.error("No reference data available; falling back to default profile")
        return default_forecast(location, rng, config)

    # Models are rebuilt on every call
    models = build_reference_models(samples)

    location_records = historical_series.get(location) or []
    history = positive_indices(r.index for r in location_records)
    if not history:
        logger.warning(
            "No valid pollution indices for %s; falling back to default profile",
            location,
            extra={"location": location, "records": len(location_records)},
        )
        return default_forecast(location, rng, config)

    stats = summarise_index_series(history, config)
    logger.info(
        "Historical index summary for %s: min=%.2f max=%.2f mean=%.2f unique=%d",
        location,
        min(history),
        max(history),
        float(np.mean(history)),
        len(set(history)),
    )
    if stats.is_constant:
        logger.warning(
            "All windowed indices for %s equal %.2f; forecast carries no trend",
            location,
            stats.mean,
        )

    records = []
    for day, forecast_date in enumerate(_forecast_dates(config)):
        index = project_index(stats, day, rng, config)
        record = PollutionRecord(
            date=forecast_date,
            parameters=synthesize_parameters(index, models, rng, config),
            index=round(index, 2),
            category=classify_category(index),
            confidence=config.base_confidence - day * config.confidence_decay,
        )

        warnings = validate_record(record)
        if warnings:
            logger.warning(
                "Validation warnings for %s %s: %s",
                location,
                record.date_string,
                "; ".join(warnings),
            )
        records.append(record)

    logger.info(
        "Generated %d forecast records for %s",
        len(records),
        location,
        extra={"categories": dict(Counter(r.category for r in records))},
    )
    return ForecastSeries(location=location, records=records)
