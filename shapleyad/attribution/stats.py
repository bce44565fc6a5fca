"""Aggregate views over a listing of records."""

from __future__ import annotations

from pydantic import BaseModel

from .models import Record


class AttributionSummary(BaseModel):
    """Totals across a set of records."""

    records: int = 0
    impressions: int = 0
    clicks: int = 0
    conversions: int = 0
    avg_contribution: float = 0.0


def summarize(records: list[Record]) -> AttributionSummary:
    if not records:
        return AttributionSummary()
    return AttributionSummary(
        records=len(records),
        impressions=sum(r.impressions for r in records),
        clicks=sum(r.clicks for r in records),
        conversions=sum(r.conversions for r in records),
        avg_contribution=sum(r.contribution_score for r in records) / len(records),
    )


def top_by_score(records: list[Record], limit: int = 5) -> list[Record]:
    """Highest contribution scores first; ties keep listing order."""
    if limit <= 0:
        return []
    return sorted(records, key=lambda r: r.contribution_score, reverse=True)[:limit]


__all__ = ["AttributionSummary", "summarize", "top_by_score"]
