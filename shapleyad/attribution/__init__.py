"""Attribution record store.

Advertising-attribution batches are kept in an opaque key-value ledger:
- each record lives under its own key ("attribution_<id>")
- a client-maintained key index ("attribution_keys") makes them listable
- each record carries a contribution score computed once at submission
"""

from .codec import DecodeResult, decode, encode
from .errors import (
    AttributionError,
    BackendUnavailable,
    DecodeError,
    DecodeErrorKind,
    ValidationError,
    WriteFailure,
)
from .key_index import DEFAULT_INDEX_KEY, KeyIndex, ReadModifyWriteIndex
from .models import Record, RecordInput
from .payload import Base64PayloadEncoder, PassthroughPayloadEncoder, PayloadEncoder
from .scorer import score
from .stats import AttributionSummary, summarize, top_by_score
from .store import DEFAULT_RECORD_PREFIX, RecordStore, generate_record_id

__all__ = [
    "AttributionError",
    "AttributionSummary",
    "BackendUnavailable",
    "Base64PayloadEncoder",
    "DEFAULT_INDEX_KEY",
    "DEFAULT_RECORD_PREFIX",
    "DecodeError",
    "DecodeErrorKind",
    "DecodeResult",
    "KeyIndex",
    "PassthroughPayloadEncoder",
    "PayloadEncoder",
    "ReadModifyWriteIndex",
    "Record",
    "RecordInput",
    "RecordStore",
    "ValidationError",
    "WriteFailure",
    "decode",
    "encode",
    "generate_record_id",
    "score",
    "summarize",
    "top_by_score",
]
