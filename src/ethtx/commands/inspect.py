"""
Inspect - look up transactions and receipts, explain failed transactions.
"""

from __future__ import annotations

import asyncio
import json
import sys

import click

from ..rpc.client import DEFAULT_RPC_URL, JsonRpcClient, RPCError
from ..rpc.gateway import get_transaction, get_transaction_receipt
from ..rpc.revert import (
    MalformedRevertPayloadError,
    TransactionNotFoundError,
    get_revert_reason,
)

rpc_url_option = click.option(
    "--rpc-url",
    envvar="ETH_RPC_URL",
    default=DEFAULT_RPC_URL,
    help="JSON-RPC endpoint",
)


def _fail(message: str) -> None:
    click.secho(f"ERROR: {message}", fg="red")
    sys.exit(1)


@click.command("tx")
@click.argument("tx_hash")
@rpc_url_option
def tx(tx_hash: str, rpc_url: str) -> None:
    """Show a transaction by hash."""

    async def _lookup():
        async with JsonRpcClient(rpc_url) as client:
            return await get_transaction(client, tx_hash)

    try:
        view = asyncio.run(_lookup())
    except (RPCError, ValueError) as exc:
        _fail(str(exc))

    if view is None:
        _fail(f"Transaction {tx_hash} not found")
    click.echo(json.dumps(view.to_dict(), indent=2))


@click.command("receipt")
@click.argument("tx_hash")
@rpc_url_option
def receipt(tx_hash: str, rpc_url: str) -> None:
    """Show a transaction receipt by hash."""

    async def _lookup():
        async with JsonRpcClient(rpc_url) as client:
            return await get_transaction_receipt(client, tx_hash)

    try:
        view = asyncio.run(_lookup())
    except (RPCError, ValueError) as exc:
        _fail(str(exc))

    if view is None:
        _fail(f"No receipt for {tx_hash} (pending or unknown)")
    click.echo(json.dumps(view.to_dict(), indent=2))


@click.command("revert-reason")
@click.argument("tx_hash")
@rpc_url_option
def revert_reason(tx_hash: str, rpc_url: str) -> None:
    """
    Explain why a transaction failed.

    Replays the transaction at its block and decodes the revert message.
    """

    async def _explain():
        async with JsonRpcClient(rpc_url) as client:
            rcpt = await get_transaction_receipt(client, tx_hash)
            if rcpt is None:
                raise TransactionNotFoundError(f"No receipt for {tx_hash} (pending or unknown)")
            return await get_revert_reason(client, rcpt)

    try:
        reason = asyncio.run(_explain())
    except (RPCError, TransactionNotFoundError, MalformedRevertPayloadError, ValueError) as exc:
        _fail(str(exc))

    click.echo(reason)
