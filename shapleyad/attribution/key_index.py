"""Client-maintained key index.

The ledger cannot list its keys, so the ids of all records are kept as a
JSON array of strings in one well-known ledger entry. The entry goes from
absent to populated on the first append and never shrinks.

Appending is a read-modify-write with no compare-and-swap underneath: two
clients appending at the same time can each read the same list, and the
later write drops the earlier writer's id. That record stays in the ledger
as an orphan, invisible to listing. The hazard is contained behind the
KeyIndex protocol so a merging or CAS-based policy can replace
ReadModifyWriteIndex without touching RecordStore.
"""

from __future__ import annotations

import json
from typing import Protocol, runtime_checkable

import bittensor as bt

from shapleyad.gateway.interface import LedgerGateway

DEFAULT_INDEX_KEY = "attribution_keys"


@runtime_checkable
class KeyIndex(Protocol):
    """Ordered collection of record ids, in insertion order."""

    async def read(self) -> list[str]:
        ...

    async def append(self, record_id: str) -> None:
        ...


def decode_index(raw: bytes) -> list[str]:
    """Parse an index entry.

    Raises ValueError when it is not a list of strings, RecursionError when
    it is nested too deeply to parse.
    """
    doc = json.loads(raw.decode("utf-8"))
    if not isinstance(doc, list) or not all(isinstance(item, str) for item in doc):
        raise ValueError("index entry is not an array of strings")
    return doc


def encode_index(ids: list[str]) -> bytes:
    return json.dumps(ids, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


class ReadModifyWriteIndex:
    """Index stored as a single ledger entry, appended by read-modify-write.

    Gateway errors propagate from both read() and append(); only a corrupt
    entry is absorbed (logged, treated as empty).
    """

    def __init__(self, gateway: LedgerGateway, key: str = DEFAULT_INDEX_KEY):
        self.gateway = gateway
        self.key = key

    async def read(self) -> list[str]:
        raw = await self.gateway.get_data(self.key)
        if not raw:
            return []
        try:
            return decode_index(raw)
        except (ValueError, RecursionError) as e:
            # UnicodeDecodeError and JSONDecodeError are both ValueErrors
            bt.logging.warning({"key_index": {"event": "corrupt_index", "key": self.key, "error": str(e)}})
            return []

    async def append(self, record_id: str) -> None:
        ids = await self.read()
        ids.append(record_id)
        await self.gateway.set_data(self.key, encode_index(ids))
        bt.logging.debug({"key_index": {"event": "appended", "record_id": record_id, "size": len(ids)}})


__all__ = [
    "DEFAULT_INDEX_KEY",
    "KeyIndex",
    "ReadModifyWriteIndex",
    "decode_index",
    "encode_index",
]
