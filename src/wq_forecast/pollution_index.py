"""Composite pollution index and category thresholds."""

from __future__ import annotations

from .records import BAIK, BURUK, SEDANG, ParameterVector


# Upper bounds of the Baik and Sedang bands; anything above is Buruk.
BAIK_MAX_INDEX = 1.0
SEDANG_MAX_INDEX = 5.0


def _banded_score(value: float, high: float, moderate: float, below: float) -> float:
	if value > high:
		return 3.0
	if value > moderate:
		return 1.5
	return below


def calculate_pollution_index(params: ParameterVector) -> float:
	"""Average the eight per-parameter risk scores into a single index.

	Each parameter scores 3 above its high threshold, 1.5 above its moderate
	threshold and a proportional value below that, so the result lies in
	``[0, 3]`` for any physically meaningful input.
	"""

	scores = [
		_banded_score(params.ammonia, 1.5, 0.5, params.ammonia),
		_banded_score(params.bod, 6.0, 2.0, params.bod / 2),
		_banded_score(params.cod, 25.0, 10.0, params.cod / 10),
		_banded_score(params.nitrat, 20.0, 10.0, params.nitrat / 10),
		_banded_score(params.tds, 1000.0, 500.0, params.tds / 500),
		_banded_score(params.tss, 50.0, 25.0, params.tss / 25),
	]

	# Dissolved oxygen is inverse: low readings are the risky ones.
	if params.do < 4:
		scores.append(3.0)
	elif params.do < 6:
		scores.append(1.5)
	else:
		scores.append(max(0.0, (8 - params.do) / 2))

	if params.ph < 6.0 or params.ph > 9.0:
		scores.append(3.0)
	elif params.ph < 6.5 or params.ph > 8.5:
		scores.append(1.5)
	else:
		scores.append(abs(7.5 - params.ph) / 2)

	return sum(scores) / 8


def classify_category(index: float) -> str:
	"""Map a pollution index to Baik, Sedang or Buruk."""

	if index <= BAIK_MAX_INDEX:
		return BAIK
	if index <= SEDANG_MAX_INDEX:
		return SEDANG
	return BURUK
