"""Tests for parameter synthesis from a forecast index."""

import numpy as np
import pytest

from tests.conftest import FixedRandom
from wq_forecast.pollution_index import classify_category
from wq_forecast.reference_model import build_reference_models
from wq_forecast.synthesis import synthesize_parameter, synthesize_parameters


@pytest.fixture
def bod_models():
    return build_reference_models(
        [
            {"BOD": 1.0, "Indeks_Pencemaran": 0.2, "Kategori": "Baik"},
            {"BOD": 1.4, "Indeks_Pencemaran": 0.8, "Kategori": "Baik"},
            {"BOD": 3.0, "Indeks_Pencemaran": 2.0, "Kategori": "Sedang"},
            {"BOD": 5.0, "Indeks_Pencemaran": 3.0, "Kategori": "Sedang"},
            {"BOD": 4.0, "Indeks_Pencemaran": 4.0, "Kategori": "Sedang"},
        ]
    )


class TestSynthesizeParameter:
    """Test single-parameter recovery."""

    def test_strong_fit_follows_regression(self, bod_models, fixed_random):
        assert synthesize_parameter(0.5, "BOD", bod_models, fixed_random) == pytest.approx(1.2)

    def test_weak_fit_blends_toward_median(self, bod_models, fixed_random):
        # R² = 0.25, regression gives 5.0 at index 5, median is 4.0
        assert synthesize_parameter(5.0, "BOD", bod_models, fixed_random) == pytest.approx(4.25)

    def test_clamped_to_padded_minimum(self, bod_models, fixed_random):
        assert synthesize_parameter(0.0, "BOD", bod_models, fixed_random) == pytest.approx(0.9)

    def test_missing_category_model_returns_zero(self, bod_models, fixed_random):
        assert synthesize_parameter(7.0, "BOD", bod_models, fixed_random) == 0.0

    def test_missing_parameter_returns_zero(self, bod_models, fixed_random):
        assert synthesize_parameter(0.5, "TSS", bod_models, fixed_random) == 0.0

    def test_rounded_to_two_decimals(self, reference_samples):
        models = build_reference_models(reference_samples)
        value = synthesize_parameter(2.345, "TDS", models, np.random.default_rng(1))
        assert value == round(value, 2)

    def test_within_model_range_for_every_draw(self, reference_samples):
        models = build_reference_models(reference_samples)
        rng = np.random.default_rng(11)
        for index in np.linspace(0.0, 10.0, 41):
            for parameter, categories in models.items():
                for draw in (0.0, 0.999999, rng.random()):
                    value = synthesize_parameter(index, parameter, models, FixedRandom(draw))
                    model = categories[classify_category(index)]
                    assert value >= 0
                    # rounding to cents is monotone, so the rounded bounds still hold
                    assert round(model.min * 0.9, 2) <= value <= round(model.max * 1.1, 2)


def test_synthesize_parameters_fills_every_field(reference_samples, fixed_random):
    models = build_reference_models(reference_samples)
    vector = synthesize_parameters(2.0, models, fixed_random)
    assert all(value > 0 for value in vector.to_dict().values())
