"""Tests for the contribution score."""

import pytest

from shapleyad.attribution.scorer import CTR_WEIGHT, CVR_WEIGHT, score


class TestScore:

    @pytest.mark.parametrize("clicks,conversions", [(0, 0), (5, 3), (100, 1000)])
    def test_zero_impressions_scores_zero(self, clicks, conversions):
        assert score(0, clicks, conversions) == 0.0

    def test_negative_impressions_scores_zero(self):
        assert score(-10, 5, 5) == 0.0

    def test_weighted_blend(self):
        # (50/100)*0.4 + (50/50)*0.6
        assert score(100, 50, 50) == pytest.approx(0.8)

    def test_unclamped_when_conversions_exceed_clicks(self):
        # (5/10)*0.4 + (20/5)*0.6 = 0.2 + 2.4
        result = score(10, 5, 20)
        assert result == pytest.approx(2.6)
        assert result > 1.0

    def test_zero_clicks_uses_unit_denominator(self):
        # conversions / max(0, 1)
        assert score(100, 0, 3) == pytest.approx(3 * CVR_WEIGHT)

    def test_ctr_only(self):
        assert score(200, 50, 0) == pytest.approx(0.25 * CTR_WEIGHT)

    def test_deterministic(self):
        assert score(1234, 56, 7) == score(1234, 56, 7)
