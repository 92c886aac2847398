"""
Send - sign and broadcast legacy transactions.

`sign` works offline from explicit fields; `send` looks up the gas price
(unless given) and nonce, signs and broadcasts.
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

import click

from ..rpc.abi import encode_call, encode_function_call, load_abi
from ..rpc.client import DEFAULT_CHAIN_ID, DEFAULT_RPC_URL, JsonRpcClient, RPCError
from ..rpc.gateway import send_transaction, wait_for_receipt
from ..signing.keys import InvalidKeyError, get_address, load_private_key
from ..signing.tx import DEFAULT_GAS_LIMIT, UnsignedTransaction, sign_transaction
from ..utils import MalformedHexError, from_hex


def _build_calldata(
    data: Optional[str],
    function: Optional[str],
    args_json: str,
    abi_path: Optional[Path],
) -> bytes:
    if function is None:
        return from_hex(data) if data else b""
    if data:
        raise click.UsageError("--data and --function are mutually exclusive")

    args = json.loads(args_json)
    if not isinstance(args, list):
        raise ValueError("Args must be a JSON array")
    if abi_path is not None:
        return encode_function_call(load_abi(abi_path), function, args)
    return encode_call(function, args)


@click.command()
@click.option("--nonce", required=True, type=int, help="Sender nonce")
@click.option("--to", "to_address", default=None, help="Recipient address (omit for contract creation)")
@click.option("--value", default=0, type=int, help="Value in wei")
@click.option("--gas-price", required=True, type=int, help="Gas price in wei")
@click.option("--gas-limit", default=DEFAULT_GAS_LIMIT, type=int, help="Gas limit")
@click.option("--data", default=None, help="Calldata as 0x-prefixed hex")
@click.option("--chain-id", envvar="CHAIN_ID", default=DEFAULT_CHAIN_ID, type=int, help="EIP-155 chain id")
def sign(
    nonce: int,
    to_address: Optional[str],
    value: int,
    gas_price: int,
    gas_limit: int,
    data: Optional[str],
    chain_id: int,
) -> None:
    """
    Sign a legacy transaction offline.

    Prints the raw signed transaction and its hash; nothing is broadcast.
    """
    try:
        private_key = load_private_key()
        unsigned = UnsignedTransaction(
            nonce=nonce,
            gas_price=gas_price,
            gas_limit=gas_limit,
            to=to_address,
            value=value,
            data=from_hex(data) if data else b"",
        )
        signed = sign_transaction(chain_id, unsigned, private_key)
    except (InvalidKeyError, MalformedHexError, ValueError) as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(1)

    click.echo(f"  Raw:  {signed.to_hex()}")
    click.echo(f"  Hash: 0x{signed.hash.hex()}")
    click.echo(f"  v:    {signed.v}")


@click.command()
@click.option("--to", "to_address", required=True, help="Recipient address")
@click.option("--value", default=0, type=int, help="Value in wei")
@click.option("--gas-price", default=None, type=int, help="Gas price in wei (default: eth_gasPrice)")
@click.option("--gas-limit", default=DEFAULT_GAS_LIMIT, type=int, help="Gas limit")
@click.option("--data", default=None, help="Calldata as 0x-prefixed hex")
@click.option("--function", default=None, help='Function signature, e.g. "transfer(address,uint256)"')
@click.option("--args", "args_json", default="[]", help="Function args as JSON array")
@click.option("--abi", "abi_path", default=None, type=click.Path(exists=True, path_type=Path), help="ABI JSON file")
@click.option("--chain-id", envvar="CHAIN_ID", default=DEFAULT_CHAIN_ID, type=int, help="EIP-155 chain id")
@click.option("--rpc-url", envvar="ETH_RPC_URL", default=DEFAULT_RPC_URL, help="JSON-RPC endpoint")
@click.option("--wait/--no-wait", default=False, help="Wait for the receipt")
@click.option("--timeout", default=120, type=int, help="Receipt wait timeout (seconds)")
def send(
    to_address: str,
    value: int,
    gas_price: Optional[int],
    gas_limit: int,
    data: Optional[str],
    function: Optional[str],
    args_json: str,
    abi_path: Optional[Path],
    chain_id: int,
    rpc_url: str,
    wait: bool,
    timeout: int,
) -> None:
    """
    Sign and broadcast a transaction from your key.

    Client pays gas.
    """
    try:
        calldata = _build_calldata(data, function, args_json, abi_path)
    except (json.JSONDecodeError, ValueError) as exc:
        click.secho(f"ERROR: Invalid calldata: {exc}", fg="red")
        sys.exit(1)

    try:
        private_key = load_private_key()
        address = get_address(private_key)
    except ValueError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(1)

    click.echo(f"  Sender: {address}")
    click.echo(f"  Target: {to_address}")
    if value > 0:
        click.echo(f"  Value: {value} wei")
    click.echo("")

    async def _send() -> tuple[str, Optional[bool]]:
        async with JsonRpcClient(rpc_url) as client:
            tx_hash = await send_transaction(
                client,
                private_key,
                to_address,
                value,
                chain_id=chain_id,
                gas_price=gas_price,
                gas_limit=gas_limit,
                data=calldata,
            )
            if not wait:
                return tx_hash, None
            receipt = await wait_for_receipt(client, tx_hash, timeout=timeout)
            return tx_hash, receipt.status

    try:
        tx_hash, status = asyncio.run(_send())
    except (RPCError, TimeoutError, ValueError) as exc:
        click.secho(f"Transaction failed: {exc}", fg="red")
        sys.exit(1)

    if status is None:
        click.secho("SENT: Transaction broadcast", fg="green")
    elif status:
        click.secho("SUCCESS: Transaction confirmed!", fg="green")
    else:
        click.secho("FAILED: Transaction reverted", fg="red")
        click.echo(f"  TX: {tx_hash}")
        click.echo(f"  Run 'ethtx revert-reason {tx_hash}' for details.")
        sys.exit(1)
    click.echo(f"  TX: {tx_hash}")
