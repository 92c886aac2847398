"""
Transaction Gateway - typed operations over JSON-RPC.

Every function is one round trip on the given client. Nothing here retries;
a failed call raises RPCError and the caller decides what to do.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Optional, Union

from ..signing.keys import get_address
from ..signing.tx import (
    DEFAULT_GAS_LIMIT,
    SignedTransaction,
    UnsignedTransaction,
    sign_transaction,
)
from ..utils import from_hex, hex_to_int, to_quantity
from .client import JsonRpcClient, RPCError
from .views import ReceiptView, TransactionView

logger = logging.getLogger(__name__)


def _require_result(method: str, result: Any) -> Any:
    if result is None:
        raise RPCError(f"{method} returned no result")
    return result


async def get_gas_price(client: JsonRpcClient) -> int:
    """Get the node's current gas price in wei."""
    result = await client.request("eth_gasPrice")
    return hex_to_int(_require_result("eth_gasPrice", result))


async def get_transaction_count(client: JsonRpcClient, address: str, block: str = "latest") -> int:
    """Get the transaction count (next nonce) for an address."""
    result = await client.request("eth_getTransactionCount", [address, block])
    return hex_to_int(_require_result("eth_getTransactionCount", result))


async def send_raw_transaction(
    client: JsonRpcClient,
    raw_tx: Union[str, bytes, SignedTransaction],
) -> str:
    """
    Broadcast a signed transaction.

    Args:
        raw_tx: Signed bytes, their 0x-prefixed hex, or a SignedTransaction

    Returns:
        Transaction hash (0x-prefixed hex)
    """
    if isinstance(raw_tx, SignedTransaction):
        raw_tx = raw_tx.raw_transaction
    if isinstance(raw_tx, (bytes, bytearray)):
        raw_tx = "0x" + bytes(raw_tx).hex()

    result = await client.request("eth_sendRawTransaction", [raw_tx])
    tx_hash = _require_result("eth_sendRawTransaction", result)
    logger.info("broadcast transaction %s", tx_hash)
    return tx_hash


async def get_transaction(client: JsonRpcClient, tx_hash: str) -> Optional[TransactionView]:
    """Fetch a transaction by hash. None if the node does not know it."""
    result = await client.request("eth_getTransactionByHash", [tx_hash])
    if result is None:
        return None
    return TransactionView.from_dict(result)


async def get_transaction_receipt(client: JsonRpcClient, tx_hash: str) -> Optional[ReceiptView]:
    """Fetch a receipt by transaction hash. None while pending or unknown."""
    result = await client.request("eth_getTransactionReceipt", [tx_hash])
    if result is None:
        return None
    return ReceiptView.from_dict(result)


async def call_raw(client: JsonRpcClient, params: dict[str, Any], block_number: Union[int, str] = "latest") -> str:
    """
    Execute a read-only call (eth_call) against a block.

    Args:
        params: Call object (to, data, from, value, gas, gasPrice)
        block_number: Block number or tag ("latest")

    Returns:
        The raw 0x-prefixed result hex
    """
    block = to_quantity(block_number) if isinstance(block_number, int) else block_number
    result = await client.request("eth_call", [params, block])
    return _require_result("eth_call", result)


async def call(client: JsonRpcClient, params: dict[str, Any], block_number: Union[int, str] = "latest") -> bytes:
    """Same as call_raw, decoded to bytes."""
    return from_hex(await call_raw(client, params, block_number))


async def send_transaction(
    client: JsonRpcClient,
    private_key: str,
    to: Optional[str],
    value: int,
    *,
    chain_id: int,
    gas_price: Optional[int] = None,
    gas_limit: int = DEFAULT_GAS_LIMIT,
    data: bytes = b"",
) -> str:
    """
    Build, sign and broadcast a legacy transaction.

    Steps run strictly in order and the first failure aborts the rest:
    gas price (only when not supplied) -> sender nonce -> sign -> broadcast.

    Args:
        private_key: 0x-prefixed hex private key of the sender
        to: Recipient address (None for contract creation)
        value: Amount in wei
        chain_id: EIP-155 chain id of the target network
        gas_price: Gas price in wei (default: node's eth_gasPrice)
        gas_limit: Gas limit (default: 21000)
        data: Calldata

    Returns:
        Transaction hash
    """
    sender = get_address(private_key)

    if gas_price is None:
        gas_price = await get_gas_price(client)
    nonce = await get_transaction_count(client, sender)

    unsigned = UnsignedTransaction(
        nonce=nonce,
        gas_price=gas_price,
        gas_limit=gas_limit,
        to=to,
        value=value,
        data=data,
    )
    signed = sign_transaction(chain_id, unsigned, private_key)
    logger.debug("signed nonce=%d from %s hash=0x%s", nonce, sender, signed.hash.hex())
    return await send_raw_transaction(client, signed)


async def wait_for_receipt(
    client: JsonRpcClient,
    tx_hash: str,
    timeout: float = 120,
    poll_interval: float = 2.0,
) -> ReceiptView:
    """
    Poll for a transaction receipt.

    Raises:
        TimeoutError: If the receipt is not available within timeout
    """
    start = time.monotonic()
    while time.monotonic() - start < timeout:
        receipt = await get_transaction_receipt(client, tx_hash)
        if receipt is not None:
            return receipt
        await asyncio.sleep(poll_interval)

    raise TimeoutError(f"Transaction {tx_hash} not confirmed within {timeout}s")
