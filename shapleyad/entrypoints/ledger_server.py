"""Development ledger entrypoint.

Serves a filesystem ledger over HTTP so several clients can share one
backend, the way independent sessions share the ledger contract.
"""

import argparse
import asyncio
import os
import signal

import bittensor as bt
from dotenv import load_dotenv

from shapleyad.gateway.filesystem import FilesystemLedgerGateway
from shapleyad.gateway.http_server import LedgerHTTPServer


def main() -> None:
    if os.environ.get("SHAPLEYAD_TEST_MODE") != "true":
        load_dotenv()

    parser = argparse.ArgumentParser(description="ShapleyAd development ledger")
    bt.logging.add_args(parser)
    parser.add_argument("--ledger.data_dir", type=str, default="~/.shapleyad")
    parser.add_argument("--ledger.host", type=str, default="127.0.0.1")
    parser.add_argument("--ledger.port", type=int, default=8300)
    parser.add_argument("--ledger.token", type=str, default=None)
    args = parser.parse_args()

    # Env takes precedence over CLI
    data_dir = os.environ.get("SHAPLEYAD_LEDGER__DATA_DIR", getattr(args, "ledger.data_dir"))
    host = os.environ.get("SHAPLEYAD_LEDGER__HOST", getattr(args, "ledger.host"))
    port = int(os.environ.get("SHAPLEYAD_LEDGER__PORT", getattr(args, "ledger.port")))
    token = os.environ.get("SHAPLEYAD_LEDGER__TOKEN", getattr(args, "ledger.token"))

    if getattr(args, "logging.debug", False):
        bt.logging.set_debug(True)

    server = LedgerHTTPServer(
        backend=FilesystemLedgerGateway(data_dir=os.path.expanduser(data_dir)),
        write_token=token,
        host=host,
        port=port,
    )

    bt.logging.info({"ledger_server": {"data_dir": data_dir, "host": host, "port": port, "auth": bool(token)}})

    loop = asyncio.new_event_loop()
    stop = asyncio.Event()

    def _signal_handler(sig, frame):
        bt.logging.info({"ledger_server": "shutdown_signal_received"})
        loop.call_soon_threadsafe(stop.set)

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    async def _serve() -> None:
        await server.start()
        await stop.wait()

    try:
        loop.run_until_complete(_serve())
    except KeyboardInterrupt:
        bt.logging.info({"ledger_server": "keyboard_interrupt"})
    finally:
        loop.run_until_complete(server.stop())
        loop.close()
        bt.logging.info({"ledger_server": "stopped"})


if __name__ == "__main__":
    main()
