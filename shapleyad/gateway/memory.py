"""Dict-backed LedgerGateway for tests and local experiments."""

from __future__ import annotations

from .interface import GatewayUnavailable


class InMemoryLedgerGateway:
    """In-process ledger. Not shared between processes."""

    def __init__(self, initial: dict[str, bytes] | None = None, available: bool = True):
        self._data: dict[str, bytes] = dict(initial or {})
        self.available = available

    def _ensure_reachable(self) -> None:
        if not self.available:
            raise GatewayUnavailable("in-memory ledger is offline")

    async def is_available(self) -> bool:
        return self.available

    async def get_data(self, key: str) -> bytes:
        self._ensure_reachable()
        return self._data.get(key, b"")

    async def set_data(self, key: str, value: bytes) -> None:
        self._ensure_reachable()
        self._data[key] = bytes(value)

    def keys(self) -> list[str]:
        """Every stored key, including orphaned records. Test helper."""
        return sorted(self._data)


__all__ = ["InMemoryLedgerGateway"]
