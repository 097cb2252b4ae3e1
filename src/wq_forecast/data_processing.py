"""Data loading and cleansing utilities for the water-quality forecast."""

from __future__ import annotations

import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence

import numpy as np
import pandas as pd

from .pollution_index import calculate_pollution_index, classify_category
from .records import (
	BAIK,
	CATEGORIES,
	DATE_FORMAT,
	PARAMETERS,
	HistoricalSeries,
	ParameterVector,
	PollutionRecord,
	coerce_value,
)

logger = logging.getLogger(__name__)

EXCEL_EPOCH = "1899-12-30"
EXCEL_SUFFIXES = {".xlsx", ".xlsm", ".xls"}


def _header_matchers() -> dict[str, Callable[[str], bool]]:
	"""Case-insensitive header predicates, one per logical column."""

	return {
		"date": lambda h: "tanggal" in h,
		"Ammonia": lambda h: "ammonia" in h,
		"BOD": lambda h: "bod" in h and "cod" not in h,
		"COD": lambda h: "cod" in h,
		"DO": lambda h: h == "do" or "dissolved" in h,
		"Nitrat": lambda h: "nitrat" in h,
		"pH": lambda h: "ph" in h,
		"TDS": lambda h: "tds" in h,
		"TSS": lambda h: "tss" in h,
		"index": lambda h: "indeks" in h or "pencemar" in h,
	}


def find_columns(headers: Sequence[object]) -> dict[str, Optional[int]]:
	"""Locate each logical column by the first header that matches it."""

	normalised = ["" if pd.isna(h) else str(h).strip().lower() for h in headers]
	positions: dict[str, Optional[int]] = {}
	for key, matches in _header_matchers().items():
		positions[key] = next((i for i, h in enumerate(normalised) if h and matches(h)), None)
	return positions


def _is_blank(value) -> bool:
	if value is None:
		return True
	if isinstance(value, str):
		return not value.strip()
	return bool(pd.isna(value))


def parse_date_cell(value) -> Optional[date]:
	"""Interpret a date cell: Excel serial numbers, datetimes or strings."""

	if value is None or isinstance(value, bool):
		return None
	if isinstance(value, str) and not value.strip():
		return None
	if isinstance(value, (int, float, np.integer, np.floating)):
		if np.isnan(value):
			return None
		return (pd.Timestamp(EXCEL_EPOCH) + pd.Timedelta(days=int(value))).date()
	if isinstance(value, datetime):
		return value.date()
	if isinstance(value, date):
		return value
	parsed = pd.to_datetime(value, errors="coerce")
	if pd.isna(parsed):
		return None
	return parsed.date()


def build_record(day: date, values: dict[str, object], index_value: object = None) -> PollutionRecord:
	"""Create a historical record, backfilling a missing index from the parameters."""

	parameters = ParameterVector.from_mapping(values)
	index = coerce_value(index_value)
	if index == 0:
		index = calculate_pollution_index(parameters)
	return PollutionRecord(date=day, parameters=parameters, index=index, category=classify_category(index))


def parse_location_sheet(frame: pd.DataFrame, sheet_name: str) -> list[PollutionRecord]:
	"""Parse one sheet (header row first, no implicit header) into records."""

	if len(frame) < 2:
		logger.warning("Sheet %s has fewer than 2 rows; skipping", sheet_name)
		return []

	headers = list(frame.iloc[0])
	columns = find_columns(headers)
	logger.debug("Sheet %s column positions: %s", sheet_name, columns)

	if columns["date"] is None:
		logger.error("Sheet %s has no Tanggal column; skipping", sheet_name)
		return []

	def cell(row: Sequence[object], position: Optional[int]):
		if position is None or position >= len(row):
			return None
		return row[position]

	records: list[PollutionRecord] = []
	for row_number, row in enumerate(frame.iloc[1:].itertuples(index=False), start=2):
		raw_date = cell(row, columns["date"])
		if _is_blank(raw_date):
			continue

		day = parse_date_cell(raw_date)
		if day is None:
			logger.warning("Sheet %s, row %d: invalid date %r", sheet_name, row_number, raw_date)
			continue

		values = {name: cell(row, columns[name]) for name in PARAMETERS}
		records.append(build_record(day, values, cell(row, columns["index"])))

	records.sort(key=lambda r: r.date)
	logger.info("Sheet %s: parsed %d data points", sheet_name, len(records))
	return records


def _read_sheets(path: Path) -> dict[str, pd.DataFrame]:
	if path.is_dir():
		csv_files = sorted(p for p in path.glob("*.csv") if p.is_file())
		return {p.stem: pd.read_csv(p, header=None, dtype=object) for p in csv_files}
	if path.suffix.lower() in EXCEL_SUFFIXES:
		return pd.read_excel(path, sheet_name=None, header=None)
	if path.suffix.lower() == ".csv":
		return {path.stem: pd.read_csv(path, header=None, dtype=object)}
	raise ValueError(f"Unsupported history file type: '{path}'")


def load_historical_workbook(path: Path) -> HistoricalSeries:
	"""Load every location sheet of a workbook (``.xlsx``/``.xls``) or CSV directory."""

	path = Path(path)
	if not path.exists():
		raise FileNotFoundError(f"History source not found at '{path}'.")

	sheets = _read_sheets(path)
	logger.info("Found sheets: %s", list(sheets))

	series: dict[str, list[PollutionRecord]] = {}
	for sheet_name, frame in sheets.items():
		if not sheet_name or sheet_name.startswith("_"):
			continue
		records = parse_location_sheet(frame, sheet_name)
		if records:
			series[sheet_name] = records

	if not series:
		raise ValueError(f"No valid location data found in '{path}'.")

	logger.info(
		"Parsed data for %d locations",
		len(series),
		extra={"points": {name: len(records) for name, records in series.items()}},
	)
	return series


def load_reference_dataset(path: Path) -> Optional[list[dict]]:
	"""Read the labeled reference samples; ``None`` if they cannot be loaded."""

	path = Path(path)
	try:
		with open(path, "r", encoding="utf-8") as fp:
			payload = json.load(fp)
	except (OSError, json.JSONDecodeError) as exc:
		logger.error("Error loading reference data from %s: %s", path, exc)
		return None

	if not isinstance(payload, list):
		logger.error("Reference data at %s is not a list of samples", path)
		return None

	samples = [sample for sample in payload if isinstance(sample, dict)]
	logger.info("Loaded %d reference samples", len(samples))
	return samples


def get_all_dates(series: HistoricalSeries) -> list[str]:
	"""Every distinct ``MM/DD/YYYY`` date across all locations, ascending."""

	dates = {record.date for records in series.values() for record in records}
	return [d.strftime(DATE_FORMAT) for d in sorted(dates)]


def get_records_by_date(series: HistoricalSeries, date_string: str) -> dict[str, PollutionRecord]:
	"""Snapshot of each location on one day; absent days become zero records."""

	day = datetime.strptime(date_string, DATE_FORMAT).date()
	snapshot: dict[str, PollutionRecord] = {}
	for location, records in series.items():
		match = next((r for r in records if r.date == day), None)
		snapshot[location] = match or PollutionRecord(date=day, index=0.0, category=BAIK)
	return snapshot


def calculate_statistics(records: Iterable[PollutionRecord], parameter: str) -> dict[str, float]:
	"""Min, max, average and median of the non-zero readings of ``parameter``."""

	if parameter == "IndeksPencemaran":
		values = [r.index for r in records]
	else:
		values = [r.parameters.get(parameter) for r in records]
	values = np.asarray([v for v in values if v], dtype=float)

	if values.size == 0:
		return {"min": 0.0, "max": 0.0, "avg": 0.0, "median": 0.0}

	return {
		"min": float(values.min()),
		"max": float(values.max()),
		"avg": float(values.mean()),
		"median": float(np.median(values)),
	}


def category_distribution(records: Iterable[PollutionRecord]) -> dict[str, int]:
	distribution = {category: 0 for category in CATEGORIES}
	for record in records:
		category = record.category or BAIK
		if category in distribution:
			distribution[category] += 1
	return distribution


def calculate_trend(values: Sequence[float]) -> str:
	"""Label a series increasing, decreasing or stable.

	Compares the means of the two halves against a 10% band around the first
	half's mean.
	"""

	if len(values) < 2:
		return "stable"

	middle = len(values) // 2
	first_avg = float(np.mean(values[:middle]))
	second_avg = float(np.mean(values[middle:]))
	difference = second_avg - first_avg
	threshold = first_avg * 0.1

	if difference > threshold:
		return "increasing"
	if difference < -threshold:
		return "decreasing"
	return "stable"


def data_completeness(snapshot: dict[str, PollutionRecord]) -> dict[str, dict[str, object]]:
	"""Share of non-zero parameters per location, with the missing names."""

	completeness = {}
	for location, record in snapshot.items():
		missing = [name for name in PARAMETERS if not record.parameters.get(name)]
		completeness[location] = {
			"percentage": (len(PARAMETERS) - len(missing)) / len(PARAMETERS) * 100,
			"missing_params": missing,
		}
	return completeness
