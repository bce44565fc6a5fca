"""Error taxonomy for the attribution store."""

from __future__ import annotations

from enum import Enum


class AttributionError(Exception):
    """Base class for attribution store errors."""


class BackendUnavailable(AttributionError):
    """The ledger could not be reached."""


class ValidationError(AttributionError):
    """Caller input was rejected before touching the ledger."""


class WriteFailure(AttributionError):
    """The ledger failed or declined a record write.

    ``rejected`` is True when the ledger refused the write (authorization
    declined) rather than failing to answer.
    """

    def __init__(self, message: str, rejected: bool = False):
        super().__init__(message)
        self.rejected = rejected


class DecodeErrorKind(str, Enum):
    MALFORMED = "malformed"


class DecodeError(AttributionError):
    """Stored bytes could not be turned into a record.

    Returned inside a DecodeResult by the codec rather than raised.
    """

    def __init__(self, detail: str, kind: DecodeErrorKind = DecodeErrorKind.MALFORMED):
        super().__init__(f"{kind.value}: {detail}")
        self.kind = kind
        self.detail = detail


__all__ = [
    "AttributionError",
    "BackendUnavailable",
    "DecodeError",
    "DecodeErrorKind",
    "ValidationError",
    "WriteFailure",
]
