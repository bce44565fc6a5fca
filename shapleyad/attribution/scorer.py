"""Contribution score for an attribution batch.

A weighted blend of click-through rate and conversion rate. The result is
deliberately not clamped: conversions may exceed clicks, which pushes the
conversion term above its weight.
"""

from __future__ import annotations

CTR_WEIGHT = 0.4
CVR_WEIGHT = 0.6


def score(impressions: int, clicks: int, conversions: int) -> float:
    """Compute the contribution score from raw counters.

    Returns 0.0 when there were no impressions.
    """
    if impressions <= 0:
        return 0.0
    ctr_term = (clicks / impressions) * CTR_WEIGHT
    cvr_term = (conversions / max(clicks, 1)) * CVR_WEIGHT
    return ctr_term + cvr_term


__all__ = ["CTR_WEIGHT", "CVR_WEIGHT", "score"]
