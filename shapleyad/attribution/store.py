"""RecordStore: listable attribution records on top of a key-value ledger.

Composes the gateway, key index, codec, scorer and payload encoder:

  list_all()  index.read() -> get_data(record_key(id)) -> decode -> sort newest-first
  submit()    validate -> score -> encode -> set_data(record_key(id)) -> index.append(id)

Failure policy:
- Listing degrades instead of failing: an unreadable, missing or corrupt
  record is logged and skipped. Only an unreachable index aborts a listing.
- A submission fails only if the record write fails. Once the record is
  in the ledger, a failed index append leaves an orphan (logged) and the
  record is still returned.
- Nothing is retried here; retry policy belongs to the caller.
"""

from __future__ import annotations

import secrets
import string
import time
from typing import Callable

import bittensor as bt

from shapleyad.gateway.interface import GatewayError, GatewayRejected, LedgerGateway

from . import codec
from .errors import BackendUnavailable, ValidationError, WriteFailure
from .key_index import DEFAULT_INDEX_KEY, KeyIndex, ReadModifyWriteIndex
from .models import Record, RecordInput
from .payload import Base64PayloadEncoder, PayloadEncoder
from .scorer import score

DEFAULT_RECORD_PREFIX = "attribution_"

# largest counter whose ratios still fit a float exactly
MAX_COUNT = 2**53 - 1

_ID_ALPHABET = string.digits + string.ascii_lowercase


def generate_record_id(now: float | None = None) -> str:
    """Build a fresh record id: '<unix millis>-<7 random base36 chars>'."""
    millis = int((time.time() if now is None else now) * 1000)
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(7))
    return f"{millis}-{suffix}"


class RecordStore:
    """Owns the record collection for one ledger."""

    def __init__(
        self,
        gateway: LedgerGateway,
        index: KeyIndex | None = None,
        payload_encoder: PayloadEncoder | None = None,
        record_prefix: str = DEFAULT_RECORD_PREFIX,
        clock: Callable[[], float] = time.time,
        id_factory: Callable[[float], str] = generate_record_id,
    ):
        self.gateway = gateway
        self.index = index if index is not None else ReadModifyWriteIndex(gateway, DEFAULT_INDEX_KEY)
        self.payload_encoder = payload_encoder if payload_encoder is not None else Base64PayloadEncoder()
        self.record_prefix = record_prefix
        self._clock = clock
        self._id_factory = id_factory

    def record_key(self, record_id: str) -> str:
        return f"{self.record_prefix}{record_id}"

    # -- Availability --

    async def check_availability(self) -> bool:
        try:
            available = await self.gateway.is_available()
        except GatewayError as e:
            raise BackendUnavailable(f"ledger unreachable: {e}") from e
        bt.logging.debug({"record_store": {"event": "availability", "available": available}})
        return bool(available)

    # -- Listing --

    async def _load(self, record_id: str) -> codec.DecodeResult | None:
        """Fetch and decode one record. None when the read itself failed or found nothing."""
        try:
            raw = await self.gateway.get_data(self.record_key(record_id))
        except GatewayError as e:
            bt.logging.warning({"record_store": {"event": "read_failed", "record_id": record_id, "error": str(e)}})
            return None
        if not raw:
            bt.logging.warning({"record_store": {"event": "record_missing", "record_id": record_id}})
            return None
        return codec.decode(raw, record_id)

    async def list_all(self) -> list[Record]:
        """Every decodable indexed record, newest first."""
        try:
            ids = await self.index.read()
        except GatewayError as e:
            raise BackendUnavailable(f"could not read key index: {e}") from e

        records: list[Record] = []
        skipped = 0
        for record_id in ids:
            result = await self._load(record_id)
            if result is None:
                skipped += 1
                continue
            if not result.ok:
                bt.logging.warning({"record_store": {"event": "decode_failed", "record_id": record_id, "error": str(result.error)}})
                skipped += 1
                continue
            records.append(result.record)

        # sorted() is stable, and stays stable with reverse=True
        records = sorted(records, key=lambda r: r.timestamp, reverse=True)
        bt.logging.debug({"record_store": {"event": "listed", "indexed": len(ids), "returned": len(records), "skipped": skipped}})
        return records

    # -- Submission --

    @staticmethod
    def _validate(record_input: RecordInput, advertiser: str) -> None:
        if not record_input.campaign.strip():
            raise ValidationError("campaign must not be empty")
        if not advertiser:
            raise ValidationError("advertiser must not be empty")
        for name in ("impressions", "clicks", "conversions"):
            value = getattr(record_input, name)
            if value < 0:
                raise ValidationError(f"{name} must not be negative")
            if value > MAX_COUNT:
                raise ValidationError(f"{name} must not exceed {MAX_COUNT}")

    async def submit(self, record_input: RecordInput, advertiser: str) -> Record:
        """Score, store and index a new record."""
        self._validate(record_input, advertiser)

        now = self._clock()
        record = Record(
            id=self._id_factory(now),
            payload=self.payload_encoder.obscure(record_input.model_dump_json()),
            timestamp=int(now),
            advertiser=advertiser,
            campaign=record_input.campaign,
            impressions=record_input.impressions,
            clicks=record_input.clicks,
            conversions=record_input.conversions,
            contribution_score=score(
                record_input.impressions, record_input.clicks, record_input.conversions,
            ),
        )

        try:
            await self.gateway.set_data(self.record_key(record.id), codec.encode(record))
        except GatewayRejected as e:
            raise WriteFailure(f"record write rejected: {e}", rejected=True) from e
        except GatewayError as e:
            raise WriteFailure(f"record write failed: {e}") from e

        try:
            await self.index.append(record.id)
        except GatewayError as e:
            bt.logging.warning({"record_store": {"event": "orphaned_record", "record_id": record.id, "error": str(e)}})
        else:
            bt.logging.info({"record_store": {"event": "submitted", "record_id": record.id, "campaign": record.campaign, "score": record.contribution_score}})

        return record


__all__ = ["DEFAULT_RECORD_PREFIX", "MAX_COUNT", "RecordStore", "generate_record_id"]
