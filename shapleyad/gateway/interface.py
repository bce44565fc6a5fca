"""LedgerGateway protocol - pluggable key-value backend interface.

Implementations: InMemoryLedgerGateway (tests/dev), FilesystemLedgerGateway
(local ledger), HTTPLedgerGateway (remote ledger client).

The backend is opaque: it can read, write and report availability, but it
cannot enumerate keys, compare-and-swap, or run transactions.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


class GatewayError(Exception):
    """Base class for backend failures."""


class GatewayUnavailable(GatewayError):
    """The backend could not be reached or failed to answer."""


class GatewayRejected(GatewayError):
    """The backend declined a write (authorization, user rejection)."""


@runtime_checkable
class LedgerGateway(Protocol):
    """Abstract interface for the key-value ledger."""

    async def is_available(self) -> bool:
        """Report whether the ledger accepts requests."""
        ...

    async def get_data(self, key: str) -> bytes:
        """Read the value stored under key. Empty bytes mean absent."""
        ...

    async def set_data(self, key: str, value: bytes) -> None:
        """Write value under key, replacing whatever was there."""
        ...


__all__ = [
    "GatewayError",
    "GatewayRejected",
    "GatewayUnavailable",
    "LedgerGateway",
]
