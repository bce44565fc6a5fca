# The MIT License (MIT)
# Copyright © 2023 Yuma Rao
# Copyright © 2023 Opentensor Foundation

# Permission is hereby granted, free of charge, to any person obtaining a copy of this software and associated
# documentation files (the “Software”), to deal in the Software without restriction, including without limitation
# the rights to use, copy, modify, merge, publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so, subject to the following conditions:

# The above copyright notice and this permission notice shall be included in all copies or substantial portions of
# the Software.

# THE SOFTWARE IS PROVIDED “AS IS”, WITHOUT WARRANTY OF ANY KIND, EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO
# THE WARRANTIES OF MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL
# THE AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN ACTION
# OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER
# DEALINGS IN THE SOFTWARE.

from __future__ import annotations

import argparse
import os
from typing import Any, Mapping

import bittensor as bt
from pydantic import BaseModel, Field

from shapleyad.attribution.key_index import DEFAULT_INDEX_KEY, ReadModifyWriteIndex
from shapleyad.attribution.payload import DEFAULT_PREFIX, Base64PayloadEncoder
from shapleyad.attribution.store import DEFAULT_RECORD_PREFIX, RecordStore
from shapleyad.gateway.interface import LedgerGateway

# dotted CLI option -> environment variable that overrides it
ENV_OVERRIDES: dict[str, str] = {
    "ledger.backend": "SHAPLEYAD_LEDGER__BACKEND",
    "ledger.data_dir": "SHAPLEYAD_LEDGER__DATA_DIR",
    "ledger.url": "SHAPLEYAD_LEDGER__URL",
    "ledger.token": "SHAPLEYAD_LEDGER__TOKEN",
    "ledger.timeout": "SHAPLEYAD_LEDGER__TIMEOUT",
    "store.index_key": "SHAPLEYAD_STORE__INDEX_KEY",
    "store.record_prefix": "SHAPLEYAD_STORE__RECORD_PREFIX",
    "store.payload_prefix": "SHAPLEYAD_STORE__PAYLOAD_PREFIX",
    "advertiser": "SHAPLEYAD_ADVERTISER",
}


class StoreConfig(BaseModel):
    """Resolved settings for building a gateway and record store."""

    backend: str = Field(default="filesystem", pattern=r"^(memory|filesystem|http)$")
    data_dir: str = "~/.shapleyad"
    url: str = ""
    token: str | None = None
    timeout: float = Field(default=30.0, gt=0)
    index_key: str = Field(default=DEFAULT_INDEX_KEY, min_length=1)
    record_prefix: str = Field(default=DEFAULT_RECORD_PREFIX, min_length=1)
    payload_prefix: str = DEFAULT_PREFIX
    advertiser: str | None = None


def add_args(parser: argparse.ArgumentParser) -> None:
    """
    Adds ledger and store arguments to the parser.
    """

    parser.add_argument(
        "--ledger.backend",
        type=str,
        choices=["memory", "filesystem", "http"],
        help="Ledger gateway to use.",
        default="filesystem",
    )

    parser.add_argument(
        "--ledger.data_dir",
        type=str,
        help="Directory holding the filesystem ledger.",
        default="~/.shapleyad",
    )

    parser.add_argument(
        "--ledger.url",
        type=str,
        help="Base URL of the HTTP ledger.",
        default="",
    )

    parser.add_argument(
        "--ledger.token",
        type=str,
        help="Bearer token sent with ledger writes.",
        default=None,
    )

    parser.add_argument(
        "--ledger.timeout",
        type=float,
        help="HTTP ledger request timeout in seconds.",
        default=30.0,
    )

    parser.add_argument(
        "--store.index_key",
        type=str,
        help="Ledger key holding the record index.",
        default=DEFAULT_INDEX_KEY,
    )

    parser.add_argument(
        "--store.record_prefix",
        type=str,
        help="Prefix prepended to record ids to form ledger keys.",
        default=DEFAULT_RECORD_PREFIX,
    )

    parser.add_argument(
        "--store.payload_prefix",
        type=str,
        help="Marker prepended to opaque payload blobs.",
        default=DEFAULT_PREFIX,
    )

    parser.add_argument(
        "--advertiser",
        type=str,
        help="Advertiser address recorded on submissions. Defaults to the wallet hotkey address.",
        default=None,
    )


def resolve_config(args: Any, environ: Mapping[str, str] | None = None) -> StoreConfig:
    """Merge parsed CLI args with environment overrides (env wins)."""
    env = os.environ if environ is None else environ
    values: dict[str, Any] = {}
    for option, env_name in ENV_OVERRIDES.items():
        value = env.get(env_name)
        if value is None:
            value = getattr(args, option, None)
        if value is not None:
            values[option.split(".")[-1]] = value
    config = StoreConfig(**values)
    bt.logging.debug({"config": config.model_dump(exclude={"token"})})
    return config


def build_gateway(config: StoreConfig) -> LedgerGateway:
    """Construct the gateway selected by config.backend."""
    if config.backend == "memory":
        from shapleyad.gateway.memory import InMemoryLedgerGateway
        return InMemoryLedgerGateway()
    if config.backend == "http":
        if not config.url:
            raise ValueError("ledger.url is required for the http backend")
        from shapleyad.gateway.http_client import HTTPLedgerGateway
        return HTTPLedgerGateway(base_url=config.url, token=config.token, timeout=config.timeout)

    from shapleyad.gateway.filesystem import FilesystemLedgerGateway
    return FilesystemLedgerGateway(data_dir=os.path.expanduser(config.data_dir))


def build_store(config: StoreConfig, gateway: LedgerGateway | None = None) -> RecordStore:
    """Construct a RecordStore wired according to config."""
    gateway = gateway if gateway is not None else build_gateway(config)
    return RecordStore(
        gateway=gateway,
        index=ReadModifyWriteIndex(gateway, key=config.index_key),
        payload_encoder=Base64PayloadEncoder(prefix=config.payload_prefix),
        record_prefix=config.record_prefix,
    )


__all__ = [
    "ENV_OVERRIDES",
    "StoreConfig",
    "add_args",
    "build_gateway",
    "build_store",
    "resolve_config",
]
