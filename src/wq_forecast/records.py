"""Record types shared by the ingestion and forecasting layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Mapping, Optional, Sequence


# Display name -> attribute name, in the column order used by every output.
PARAMETER_FIELDS = {
	"Ammonia": "ammonia",
	"BOD": "bod",
	"COD": "cod",
	"DO": "do",
	"Nitrat": "nitrat",
	"pH": "ph",
	"TDS": "tds",
	"TSS": "tss",
}
PARAMETERS = tuple(PARAMETER_FIELDS)

BAIK = "Baik"
SEDANG = "Sedang"
BURUK = "Buruk"
CATEGORIES = (BAIK, SEDANG, BURUK)

DATE_FORMAT = "%m/%d/%Y"



def coerce_value(value) -> float:
	"""Normalise a raw cell to a float; blanks and junk become ``0.0``."""

	if value is None or isinstance(value, bool):
		return 0.0
	if isinstance(value, str):
		value = value.strip()
		if value in ("", "-"):
			return 0.0
	try:
		number = float(value)
	except (TypeError, ValueError):
		return 0.0
	if number != number:  # NaN
		return 0.0
	return number


@dataclass
class ParameterVector:
	"""The eight measured water-quality parameters."""

	ammonia: float = 0.0
	bod: float = 0.0
	cod: float = 0.0
	do: float = 0.0
	nitrat: float = 0.0
	ph: float = 0.0
	tds: float = 0.0
	tss: float = 0.0

	@classmethod
	def from_mapping(cls, values: Mapping[str, object]) -> "ParameterVector":
		"""Build a vector from a ``{"Ammonia": ..., "BOD": ...}`` style mapping."""

		return cls(**{attr: coerce_value(values.get(name)) for name, attr in PARAMETER_FIELDS.items()})

	def get(self, name: str) -> float:
		return getattr(self, PARAMETER_FIELDS[name])

	def to_dict(self) -> dict[str, float]:
		return {name: getattr(self, attr) for name, attr in PARAMETER_FIELDS.items()}


@dataclass
class PollutionRecord:
	"""One day of measurements (historical) or predictions (forecast)."""

	date: date
	parameters: ParameterVector = field(default_factory=ParameterVector)
	index: float = 0.0
	category: str = BAIK
	confidence: Optional[float] = None

	@property
	def date_string(self) -> str:
		return self.date.strftime(DATE_FORMAT)

	def to_dict(self) -> dict[str, object]:
		"""Flatten the record using the external column names."""

		payload: dict[str, object] = {"date": self.date_string}
		payload.update(self.parameters.to_dict())
		payload["IndeksPencemaran"] = self.index
		payload["Kategori"] = self.category
		if self.confidence is not None:
			payload["confidence"] = self.confidence
		return payload


# Location name -> records ascending by date, as produced by the ingestion layer.
HistoricalSeries = Mapping[str, Sequence[PollutionRecord]]
