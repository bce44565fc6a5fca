"""HTTP-based LedgerGateway client.

Talks to a LedgerHTTPServer (or any service exposing the same routes):
  GET /ledger/available     -> {"available": bool}
  GET /ledger/data/{key}    -> raw bytes (404 or empty body = absent)
  PUT /ledger/data/{key}    <- raw bytes, bearer token when configured

Every call is attempted exactly once; retry policy belongs to the caller.
"""

from __future__ import annotations

from urllib.parse import quote

import bittensor as bt
import httpx

from .interface import GatewayRejected, GatewayUnavailable


class HTTPLedgerGateway:
    """Remote ledger client."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._token = token
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def close(self) -> None:
        await self._client.aclose()

    def _url(self, key: str) -> str:
        return f"{self.base_url}/ledger/data/{quote(key, safe='')}"

    def _auth_headers(self) -> dict[str, str]:
        if not self._token:
            return {}
        return {"Authorization": f"Bearer {self._token}"}

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            return await self._client.request(method, url, **kwargs)
        except httpx.TransportError as e:
            bt.logging.debug({"ledger_http_client": {"method": method, "url": url, "error": str(e)}})
            raise GatewayUnavailable(f"{method} {url} failed: {e}") from e

    async def is_available(self) -> bool:
        resp = await self._request("GET", f"{self.base_url}/ledger/available")
        if resp.status_code != 200:
            raise GatewayUnavailable(f"availability check failed: {resp.status_code}")
        try:
            body = resp.json()
        except ValueError as e:
            raise GatewayUnavailable(f"availability check returned invalid body: {e}") from e
        if not isinstance(body, dict):
            raise GatewayUnavailable(f"availability check returned {type(body).__name__}, expected object")
        return bool(body.get("available", False))

    async def get_data(self, key: str) -> bytes:
        resp = await self._request("GET", self._url(key), headers=self._auth_headers())
        if resp.status_code == 404:
            return b""
        if resp.status_code != 200:
            raise GatewayUnavailable(f"read {key!r} failed: {resp.status_code} {resp.text}")
        return resp.content

    async def set_data(self, key: str, value: bytes) -> None:
        resp = await self._request(
            "PUT",
            self._url(key),
            content=value,
            headers={**self._auth_headers(), "Content-Type": "application/octet-stream"},
        )
        if resp.status_code in (401, 403):
            raise GatewayRejected(f"write {key!r} rejected: {resp.status_code} {resp.text}")
        if resp.status_code not in (200, 204):
            raise GatewayUnavailable(f"write {key!r} failed: {resp.status_code} {resp.text}")


__all__ = ["HTTPLedgerGateway"]
