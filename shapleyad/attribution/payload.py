"""Opaque payload encoding.

The store hands the submitted input to a PayloadEncoder and stores whatever
blob comes back without ever looking inside it. Real encryption can replace
the reference encoders here without changing the store.
"""

from __future__ import annotations

import base64
from typing import Protocol, runtime_checkable

DEFAULT_PREFIX = "FHE-"


@runtime_checkable
class PayloadEncoder(Protocol):
    """Turns plaintext into the opaque blob kept in a record."""

    def obscure(self, plaintext: str) -> str:
        ...


class Base64PayloadEncoder:
    """Reversible reference encoder: prefix + base64(plaintext)."""

    def __init__(self, prefix: str = DEFAULT_PREFIX):
        self.prefix = prefix

    def obscure(self, plaintext: str) -> str:
        encoded = base64.b64encode(plaintext.encode("utf-8")).decode("ascii")
        return f"{self.prefix}{encoded}"

    def reveal(self, blob: str) -> str:
        """Inverse of obscure(). Raises ValueError for foreign blobs."""
        if not blob.startswith(self.prefix):
            raise ValueError(f"payload does not start with {self.prefix!r}")
        return base64.b64decode(blob[len(self.prefix):], validate=True).decode("utf-8")


class PassthroughPayloadEncoder:
    def obscure(self, plaintext: str) -> str:
        return plaintext


__all__ = [
    "Base64PayloadEncoder",
    "DEFAULT_PREFIX",
    "PassthroughPayloadEncoder",
    "PayloadEncoder",
]
