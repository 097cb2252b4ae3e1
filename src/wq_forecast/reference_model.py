"""Per-category linear models fitted on the labeled reference dataset."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

import numpy as np

from .records import BAIK, CATEGORIES, PARAMETERS

logger = logging.getLogger(__name__)

ReferenceSample = Mapping[str, object]
ModelTable = dict[str, dict[str, "CategoryModel"]]


@dataclass
class CategoryModel:
    """Linear fit of one parameter against the index within one category."""

    mean: float
    median: float
    min: float
    max: float
    std_dev: float
    slope: float
    intercept: float
    r_squared: float
    sample_count: int

    def predict(self, index: float) -> float:
        return self.slope * index + self.intercept


def ols_fit(x: Sequence[float], y: Sequence[float]) -> tuple[float, float]:
    """Ordinary least squares of ``y`` on ``x`` using the closed-form sums.

    Identical ``x`` values (zero spread) yield a slope of 0, which makes
    the intercept the mean of ``y``.
    """

    x_arr = np.asarray(x, dtype=float)
    y_arr = np.asarray(y, dtype=float)
    n = len(x_arr)
    sum_x = x_arr.sum()
    sum_y = y_arr.sum()
    sum_xy = float(np.dot(x_arr, y_arr))
    sum_xx = float(np.dot(x_arr, x_arr))

    denominator = n * sum_xx - sum_x * sum_x
    # the closed-form denominator leaves rounding residue when every x is equal
    if np.ptp(x_arr) == 0:
        slope = 0.0
    else:
        slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n
    return float(slope), float(intercept)


def r_squared(x: Sequence[float], y: Sequence[float], slope: float, intercept: float) -> float:
    x_arr = np.asarray(x, dtype=float)
    y_arr = np.asarray(y, dtype=float)
    ss_total = float(np.sum((y_arr - y_arr.mean()) ** 2))
    if ss_total == 0:
        return 0.0
    ss_residual = float(np.sum((y_arr - (slope * x_arr + intercept)) ** 2))
    return 1.0 - ss_residual / ss_total


def fit_category_model(indices: Sequence[float], values: Sequence[float]) -> CategoryModel:
    """Describe and fit one non-empty (parameter, category) partition."""

    values_arr = np.asarray(values, dtype=float)
    slope, intercept = ols_fit(indices, values_arr)
    return CategoryModel(
        mean=float(values_arr.mean()),
        median=float(np.median(values_arr)),
        min=float(values_arr.min()),
        max=float(values_arr.max()),
        std_dev=float(values_arr.std(ddof=0)),
        slope=slope,
        intercept=intercept,
        r_squared=r_squared(indices, values_arr, slope, intercept),
        sample_count=int(len(values_arr)),
    )


def _as_number(value) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if np.isnan(number):
        return None
    return number


def build_reference_models(samples: Iterable[ReferenceSample]) -> ModelTable:
    """Fit a :class:`CategoryModel` for every parameter and populated category.

    Samples are partitioned by their ``Kategori`` label (unlabeled rows count as
    Baik). A missing parameter value is treated as absent rather than zero, so
    it never enters that parameter's partition. Categories with no usable
    samples are simply left out of the result.
    """

    samples = list(samples)
    models: ModelTable = {}

    for parameter in PARAMETERS:
        partitions: dict[str, tuple[list[float], list[float]]] = {c: ([], []) for c in CATEGORIES}

        for sample in samples:
            category = sample.get("Kategori") or BAIK
            if category not in partitions:
                continue
            value = _as_number(sample.get(parameter))
            index = _as_number(sample.get("Indeks_Pencemaran"))
            if value is None or index is None:
                continue
            partitions[category][0].append(index)
            partitions[category][1].append(value)

        models[parameter] = {}
        for category, (indices, values) in partitions.items():
            if not values:
                continue
            models[parameter][category] = fit_category_model(indices, values)

        logger.debug(
            "Reference model fitted",
            extra={
                "parameter": parameter,
                "r_squared": {c: round(m.r_squared, 3) for c, m in models[parameter].items()},
            },
        )

    logger.info("Built reference models from %d samples", len(samples))
    return models
