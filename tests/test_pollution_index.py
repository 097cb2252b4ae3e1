"""Tests for the composite index and category thresholds."""

import numpy as np
import pytest

from wq_forecast.pollution_index import calculate_pollution_index, classify_category
from wq_forecast.records import ParameterVector


class TestCalculatePollutionIndex:
    """Test the eight-parameter scoring."""

    def test_clean_water(self):
        params = ParameterVector(
            ammonia=0.2, bod=1.0, cod=5.0, do=7.0, nitrat=5.0, ph=7.5, tds=250.0, tss=12.5
        )
        assert calculate_pollution_index(params) == pytest.approx(0.4)

    def test_zero_vector_penalises_do_and_ph(self):
        """Missing DO and pH read as 0, which both score the maximum."""
        assert calculate_pollution_index(ParameterVector()) == pytest.approx(0.75)

    def test_all_parameters_at_worst(self):
        params = ParameterVector(
            ammonia=2.0, bod=10.0, cod=40.0, do=2.0, nitrat=30.0, ph=10.0, tds=2000.0, tss=80.0
        )
        assert calculate_pollution_index(params) == pytest.approx(3.0)

    def test_moderate_bands(self):
        params = ParameterVector(
            ammonia=1.0, bod=4.0, cod=20.0, do=5.0, nitrat=15.0, ph=8.7, tds=700.0, tss=30.0
        )
        assert calculate_pollution_index(params) == pytest.approx(1.5)

    def test_do_above_eight_scores_zero(self):
        base = dict(ammonia=0.0, bod=0.0, cod=0.0, nitrat=0.0, ph=7.5, tds=0.0, tss=0.0)
        assert calculate_pollution_index(ParameterVector(do=12.0, **base)) == 0.0

    def test_output_within_bounds(self):
        rng = np.random.default_rng(7)
        for _ in range(500):
            params = ParameterVector(
                ammonia=rng.uniform(0, 3),
                bod=rng.uniform(0, 12),
                cod=rng.uniform(0, 50),
                do=rng.uniform(0, 14),
                nitrat=rng.uniform(0, 40),
                ph=rng.uniform(0, 14),
                tds=rng.uniform(0, 2000),
                tss=rng.uniform(0, 100),
            )
            assert 0.0 <= calculate_pollution_index(params) <= 3.0


class TestClassifyCategory:
    """Test the fixed category boundaries."""

    @pytest.mark.parametrize(
        "index, expected",
        [
            (0.0, "Baik"),
            (1.0, "Baik"),
            (1.0001, "Sedang"),
            (5.0, "Sedang"),
            (5.0001, "Buruk"),
            (10.0, "Buruk"),
        ],
    )
    def test_boundaries(self, index, expected):
        assert classify_category(index) == expected

    def test_idempotent(self):
        for index in np.linspace(0, 10, 101):
            assert classify_category(index) == classify_category(index)
