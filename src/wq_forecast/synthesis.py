"""Recover parameter values from a forecast index via the reference models."""

from __future__ import annotations

import logging

import numpy as np

from .config import ForecastConfig
from .pollution_index import classify_category
from .records import PARAMETERS, ParameterVector, PARAMETER_FIELDS
from .reference_model import ModelTable

logger = logging.getLogger(__name__)


def synthesize_parameter(
    index: float,
    parameter: str,
    models: ModelTable,
    rng: np.random.Generator,
    config: ForecastConfig | None = None,
) -> float:
    """Predict ``parameter`` for a day whose pollution index is ``index``.

    Weak fits (R² below ``weak_fit_r_squared``) are pulled toward the
    category median in proportion to how little variance they explain. The
    result is kept inside the observed range of the category, padded by 10%
    on each side, and never drops below zero.
    """

    config = config or ForecastConfig()
    category = classify_category(index)
    model = models.get(parameter, {}).get(category)

    if model is None:
        logger.warning(
            "No reference model for %s in category %s; using 0",
            parameter,
            category,
            extra={"parameter": parameter, "category": category},
        )
        return 0.0

    predicted = model.predict(index)
    if model.r_squared < config.weak_fit_r_squared:
        weight = model.r_squared
        predicted = weight * predicted + (1 - weight) * model.median

    predicted += (rng.random() - 0.5) * model.std_dev * config.parameter_noise

    predicted = max(model.min * 0.9, min(model.max * 1.1, predicted))
    predicted = max(0.0, predicted)
    return round(predicted, 2)


def synthesize_parameters(
    index: float,
    models: ModelTable,
    rng: np.random.Generator,
    config: ForecastConfig | None = None,
) -> ParameterVector:
    values = {
        PARAMETER_FIELDS[name]: synthesize_parameter(index, name, models, rng, config)
        for name in PARAMETERS
    }
    return ParameterVector(**values)
