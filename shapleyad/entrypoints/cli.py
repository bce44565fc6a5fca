"""Attribution store command line.

  shapleyad status
  shapleyad list [--limit N]
  shapleyad submit --campaign C --impressions I --clicks K --conversions V
  shapleyad summary [--top N]

Records are printed as JSON lines using the ledger field names.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys
from typing import Any

import bittensor as bt
from dotenv import load_dotenv

from shapleyad.attribution import (
    BackendUnavailable,
    RecordInput,
    RecordStore,
    ValidationError,
    WriteFailure,
    summarize,
    top_by_score,
)
from shapleyad.base.config import StoreConfig, add_args, build_gateway, build_store, resolve_config

EXIT_OK = 0
EXIT_BACKEND = 1
EXIT_INVALID = 2


def _record_json(record) -> str:
    return json.dumps({"id": record.id, **record.document()}, sort_keys=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="shapleyad", description="Attribution record store")
    add_args(parser)
    bt.Wallet.add_args(parser)
    bt.logging.add_args(parser)

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("status", help="Report ledger availability.")

    list_p = sub.add_parser("list", help="List records, newest first.")
    list_p.add_argument("--limit", type=int, default=None)

    submit_p = sub.add_parser("submit", help="Submit an attribution batch.")
    submit_p.add_argument("--campaign", type=str, required=True)
    submit_p.add_argument("--impressions", type=str, default="0")
    submit_p.add_argument("--clicks", type=str, default="0")
    submit_p.add_argument("--conversions", type=str, default="0")

    summary_p = sub.add_parser("summary", help="Totals and top campaigns.")
    summary_p.add_argument("--top", type=int, default=5)
    return parser


def resolve_advertiser(config: StoreConfig, args: Any) -> str:
    """Advertiser from config, else the wallet hotkey address."""
    if config.advertiser:
        return config.advertiser
    wallet = bt.Wallet(
        name=getattr(args, "wallet.name", None) or "default",
        hotkey=getattr(args, "wallet.hotkey", None) or "default",
    )
    return wallet.hotkey.ss58_address


async def run_command(store: RecordStore, args: Any, config: StoreConfig) -> int:
    if args.command == "status":
        available = await store.check_availability()
        print(json.dumps({"available": available}))
        return EXIT_OK

    if args.command == "list":
        records = await store.list_all()
        if args.limit is not None:
            records = records[: max(args.limit, 0)]
        for record in records:
            print(_record_json(record))
        return EXIT_OK

    if args.command == "submit":
        record_input = RecordInput(
            campaign=args.campaign,
            impressions=args.impressions,
            clicks=args.clicks,
            conversions=args.conversions,
        )
        record = await store.submit(record_input, advertiser=resolve_advertiser(config, args))
        print(_record_json(record))
        return EXIT_OK

    if args.command == "summary":
        records = await store.list_all()
        print(json.dumps({
            "summary": summarize(records).model_dump(),
            "top": [
                {"id": r.id, "campaign": r.campaign, "contributionScore": r.contribution_score}
                for r in top_by_score(records, limit=args.top)
            ],
        }, sort_keys=True))
        return EXIT_OK

    raise ValueError(f"unknown command: {args.command}")


async def _main_async(args: Any, config: StoreConfig) -> int:
    gateway = build_gateway(config)
    store = build_store(config, gateway=gateway)
    try:
        return await run_command(store, args, config)
    finally:
        close = getattr(gateway, "close", None)
        if close is not None:
            await close()


def main(argv: list[str] | None = None) -> int:
    if os.environ.get("SHAPLEYAD_TEST_MODE") != "true":
        load_dotenv()

    args = build_parser().parse_args(argv)
    if getattr(args, "logging.debug", False):
        bt.logging.set_debug(True)

    try:
        config = resolve_config(args)
        return asyncio.run(_main_async(args, config))
    except ValidationError as e:
        bt.logging.error({"cli": {"command": args.command, "error": "invalid_input", "detail": str(e)}})
        return EXIT_INVALID
    except WriteFailure as e:
        bt.logging.error({"cli": {"command": args.command, "error": "write_failed", "rejected": e.rejected, "detail": str(e)}})
        return EXIT_BACKEND
    except BackendUnavailable as e:
        bt.logging.error({"cli": {"command": args.command, "error": "backend_unavailable", "detail": str(e)}})
        return EXIT_BACKEND
    except ValueError as e:
        bt.logging.error({"cli": {"command": args.command, "error": "invalid_config", "detail": str(e)}})
        return EXIT_INVALID


if __name__ == "__main__":
    sys.exit(main())
