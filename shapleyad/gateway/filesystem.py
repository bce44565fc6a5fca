"""Filesystem-based LedgerGateway implementation.

Each key is one file under the ledger directory:
  {data_dir}/ledger/{percent-encoded key}

Writes go to a temp file in the same directory and are renamed into place,
so a reader never observes a half-written value.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from urllib.parse import quote

import bittensor as bt

from .interface import GatewayUnavailable


def _key_filename(key: str) -> str:
    """Map an arbitrary key to a single safe path component."""
    return quote(key, safe="")


class FilesystemLedgerGateway:
    """Local directory LedgerGateway implementation."""

    def __init__(self, data_dir: str):
        self.base = Path(data_dir) / "ledger"
        self.base.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.base / _key_filename(key)

    async def is_available(self) -> bool:
        return self.base.is_dir() and os.access(self.base, os.W_OK)

    async def get_data(self, key: str) -> bytes:
        path = self._path(key)
        try:
            with open(path, "rb") as f:
                return f.read()
        except FileNotFoundError:
            return b""
        except OSError as e:
            raise GatewayUnavailable(f"read failed for {key!r}: {e}") from e

    async def set_data(self, key: str, value: bytes) -> None:
        path = self._path(key)
        try:
            tmp_fd, tmp_path = tempfile.mkstemp(dir=str(self.base), suffix=".tmp")
        except OSError as e:
            raise GatewayUnavailable(f"write failed for {key!r}: {e}") from e
        try:
            with os.fdopen(tmp_fd, "wb") as f:
                f.write(value)
            os.replace(tmp_path, str(path))
        except OSError as e:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise GatewayUnavailable(f"write failed for {key!r}: {e}") from e
        bt.logging.debug({"ledger_fs": {"event": "write", "key": key, "bytes": len(value)}})


__all__ = ["FilesystemLedgerGateway"]
