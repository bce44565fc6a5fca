"""Record <-> ledger bytes.

Records are stored as compact, key-sorted UTF-8 JSON:

    {"advertiser": ..., "campaign": ..., "clicks": ..., "contributionScore": ...,
     "conversions": ..., "data": ..., "impressions": ..., "timestamp": ...}

Decoding is tolerant. Bytes written by older or foreign clients may lack
counters or carry them as strings; those normalise to numbers (0 when
unusable). Only a missing advertiser, campaign or timestamp makes a record
malformed. decode() never raises: failures come back inside a DecodeResult
so the caller can skip one bad record without losing the rest.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from .errors import DecodeError
from .models import Record, coerce_count

REQUIRED_STR_FIELDS = ("advertiser", "campaign")
COUNTER_FIELDS = ("impressions", "clicks", "conversions")


@dataclass(frozen=True)
class DecodeResult:
    """Outcome of decoding one stored record."""

    record_id: str
    record: Record | None = None
    error: DecodeError | None = None

    @property
    def ok(self) -> bool:
        return self.record is not None


def encode(record: Record) -> bytes:
    """Serialize a record to its ledger representation."""
    return json.dumps(
        record.document(), sort_keys=True, separators=(",", ":"), ensure_ascii=False,
    ).encode("utf-8")


def _count(value: Any) -> int:
    count = coerce_count(value)
    return count if count >= 0 else 0


def _score(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return 0.0
    try:
        parsed = float(value)
    except (ValueError, OverflowError):
        return 0.0
    return parsed if math.isfinite(parsed) else 0.0


def _timestamp(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return int(value)


def _malformed(record_id: str, detail: str) -> DecodeResult:
    return DecodeResult(record_id=record_id, error=DecodeError(detail))


def decode(raw: bytes, record_id: str) -> DecodeResult:
    """Parse ledger bytes stored for record_id."""
    try:
        doc = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, ValueError, RecursionError) as e:
        # RecursionError: nesting deeper than the json decoder can follow
        return _malformed(record_id, f"not valid JSON: {e}")

    if not isinstance(doc, dict):
        return _malformed(record_id, f"expected object, got {type(doc).__name__}")

    for name in REQUIRED_STR_FIELDS:
        if not isinstance(doc.get(name), str):
            return _malformed(record_id, f"missing or non-string {name!r}")

    timestamp = _timestamp(doc.get("timestamp"))
    if timestamp is None:
        return _malformed(record_id, "missing or non-numeric 'timestamp'")

    payload = doc.get("data")
    try:
        record = Record(
            id=record_id,
            payload=payload if isinstance(payload, str) else "",
            timestamp=timestamp,
            advertiser=doc["advertiser"],
            campaign=doc["campaign"],
            contribution_score=_score(doc.get("contributionScore")),
            **{name: _count(doc.get(name)) for name in COUNTER_FIELDS},
        )
    except PydanticValidationError as e:
        return _malformed(record_id, f"invalid record: {e.error_count()} error(s)")

    return DecodeResult(record_id=record_id, record=record)


__all__ = ["COUNTER_FIELDS", "DecodeResult", "REQUIRED_STR_FIELDS", "decode", "encode"]
