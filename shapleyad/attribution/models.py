"""Pydantic models for attribution records.

Two shapes:
- RecordInput: what a caller submits (campaign + raw counters)
- Record: what lives in the ledger, immutable once created
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def coerce_count(value: Any) -> int:
    """Parse a counter leniently. Unparseable values become 0.

    Accepts ints, integral floats and integer strings. Booleans, fractions,
    non-finite numbers and anything else are treated as unparseable.
    Negative values pass through; callers decide whether they are allowed.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return int(value)
        return 0
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return 0
    return 0


class RecordInput(BaseModel):
    """A submission as entered by the advertiser.

    Counters are parsed with coerce_count, which is stricter than a
    prefix parser: "3.7" and "12abc" become 0 rather than 3 and 12.
    """

    campaign: str = ""
    impressions: int = 0
    clicks: int = 0
    conversions: int = 0

    @field_validator("impressions", "clicks", "conversions", mode="before")
    @classmethod
    def _lenient_count(cls, value: Any) -> int:
        return coerce_count(value)


class Record(BaseModel):
    """One attribution batch stored in the ledger.

    ``id`` is not part of the stored document; it is the suffix of the
    ledger key the document lives under.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    payload: str = Field(default="", alias="data")
    timestamp: int
    advertiser: str
    campaign: str
    impressions: int = Field(default=0, ge=0)
    clicks: int = Field(default=0, ge=0)
    conversions: int = Field(default=0, ge=0)
    contribution_score: float = Field(default=0.0, alias="contributionScore")

    def document(self) -> dict[str, Any]:
        """Wire document, keyed by the ledger field names."""
        return self.model_dump(by_alias=True, exclude={"id"})


__all__ = ["Record", "RecordInput", "coerce_count"]
