"""Shared fixtures for the forecast test-suite."""

from datetime import date, timedelta
from itertools import cycle

import pytest

from wq_forecast.pollution_index import classify_category
from wq_forecast.records import ParameterVector, PollutionRecord


class FixedRandom:
    """Stand-in for ``numpy.random.Generator`` returning scripted draws."""

    def __init__(self, *values):
        self._values = cycle(values or (0.5,))

    def random(self):
        return next(self._values)


REFERENCE_INDICES = {
    "Baik": [0.2, 0.4, 0.6, 0.8, 1.0],
    "Sedang": [1.5, 2.0, 3.0, 4.0, 5.0],
    "Buruk": [5.5, 6.0, 7.0, 8.0, 9.0],
}


def make_reference_samples():
    samples = []
    for category, indices in REFERENCE_INDICES.items():
        for position, idx in enumerate(indices):
            samples.append(
                {
                    "Ammonia": 0.1 + 0.3 * idx,
                    "BOD": 1.0 + 0.8 * idx,
                    "COD": 4.0 + 2.0 * idx,
                    "DO": max(1.0, 8.0 - 0.6 * idx),
                    "Nitrat": 3.0 + idx,
                    "pH": 7.0 + 0.05 * (position % 3),
                    "TDS": 200.0 + 50.0 * idx,
                    "TSS": 10.0 + 4.0 * idx,
                    "Indeks_Pencemaran": idx,
                    "Kategori": category,
                }
            )
    return samples


def make_history(indices, start=date(2025, 1, 1)):
    return [
        PollutionRecord(
            date=start + timedelta(days=offset),
            parameters=ParameterVector(),
            index=value,
            category=classify_category(value),
        )
        for offset, value in enumerate(indices)
    ]


@pytest.fixture
def reference_samples():
    return make_reference_samples()


@pytest.fixture
def fixed_random():
    return FixedRandom(0.5)
