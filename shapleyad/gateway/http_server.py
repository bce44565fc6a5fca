"""HTTP endpoint exposing a LedgerGateway to remote clients.

Routes:
  GET /ledger/available   - {"available": bool}
  GET /ledger/data/{key}  - raw bytes, 404 when absent
  PUT /ledger/data/{key}  - store raw body (bearer token required if configured)

Used as a development stand-in for the ledger contract.
"""

from __future__ import annotations

import hmac

import bittensor as bt
from aiohttp import web

from .interface import GatewayError, GatewayRejected, LedgerGateway


def _short(key: str) -> str:
    """Truncate key for log readability."""
    return key if len(key) <= 48 else key[:48] + "..."


class LedgerHTTPServer:
    """Lightweight async HTTP server in front of a backing gateway."""

    def __init__(
        self,
        backend: LedgerGateway,
        write_token: str | None = None,
        host: str = "127.0.0.1",
        port: int = 8300,
        max_body_bytes: int = 1024 * 1024,
    ):
        self.backend = backend
        self.write_token = write_token
        self.host = host
        self.port = port
        self.max_body_bytes = max_body_bytes
        self._app: web.Application | None = None
        self._runner: web.AppRunner | None = None

    def build_app(self) -> web.Application:
        app = web.Application(client_max_size=self.max_body_bytes)
        app.router.add_get("/ledger/available", self._handle_available)
        app.router.add_get("/ledger/data/{key}", self._handle_get)
        app.router.add_put("/ledger/data/{key}", self._handle_put)
        return app

    async def start(self) -> None:
        """Start the HTTP server."""
        self._app = self.build_app()
        self._runner = web.AppRunner(self._app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.host, self.port)
        await site.start()
        bt.logging.info({"ledger_http": {"status": "started", "host": self.host, "port": self.port}})

    async def stop(self) -> None:
        """Stop the HTTP server."""
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
            bt.logging.info({"ledger_http": "stopped"})

    def _authorized(self, request: web.Request) -> bool:
        if not self.write_token:
            return True
        auth = request.headers.get("Authorization", "")
        if not auth.startswith("Bearer "):
            return False
        return hmac.compare_digest(auth[7:], self.write_token)

    async def _handle_available(self, request: web.Request) -> web.Response:
        try:
            available = await self.backend.is_available()
        except GatewayError as e:
            bt.logging.warning({"ledger_request": {"endpoint": "available", "status": 503, "error": str(e)}})
            return web.json_response({"error": "unavailable"}, status=503)
        return web.json_response({"available": bool(available)})

    async def _handle_get(self, request: web.Request) -> web.Response:
        key = request.match_info["key"]
        try:
            value = await self.backend.get_data(key)
        except GatewayError as e:
            bt.logging.warning({"ledger_request": {"endpoint": "get", "key": _short(key), "status": 503, "error": str(e)}})
            return web.json_response({"error": "unavailable"}, status=503)
        if not value:
            bt.logging.debug({"ledger_request": {"endpoint": "get", "key": _short(key), "status": 404}})
            return web.json_response({"error": "not_found"}, status=404)
        bt.logging.debug({"ledger_request": {"endpoint": "get", "key": _short(key), "status": 200, "bytes": len(value)}})
        return web.Response(body=value, content_type="application/octet-stream")

    async def _handle_put(self, request: web.Request) -> web.Response:
        key = request.match_info["key"]
        if not self._authorized(request):
            bt.logging.warning({"ledger_request": {"endpoint": "put", "key": _short(key), "status": 403}})
            return web.json_response({"error": "forbidden"}, status=403)

        body = await request.read()
        try:
            await self.backend.set_data(key, body)
        except GatewayRejected as e:
            bt.logging.warning({"ledger_request": {"endpoint": "put", "key": _short(key), "status": 403, "error": str(e)}})
            return web.json_response({"error": "rejected"}, status=403)
        except GatewayError as e:
            bt.logging.warning({"ledger_request": {"endpoint": "put", "key": _short(key), "status": 503, "error": str(e)}})
            return web.json_response({"error": "unavailable"}, status=503)

        bt.logging.info({"ledger_request": {"endpoint": "put", "key": _short(key), "status": 204, "bytes": len(body)}})
        return web.Response(status=204)


__all__ = ["LedgerHTTPServer"]
