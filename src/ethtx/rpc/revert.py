"""
Revert Reason Decoder.

A failed transaction's receipt carries no reason. To recover it, the
original transaction is replayed with eth_call at the block it was mined in,
and the returned ``Error(string)`` payload is decoded:

    selector (4) | offset (32) | length L (32) | L bytes of UTF-8, zero-padded

The offset word is skipped, not followed; solidity always emits 0x20 there.
"""

from __future__ import annotations

import logging

from ..utils import MalformedHexError, from_hex, to_quantity
from .client import JsonRpcClient
from .gateway import call_raw, get_transaction
from .views import ReceiptView, TransactionView

logger = logging.getLogger(__name__)

TX_DID_NOT_FAIL = "Transaction did not fail"
TX_OUT_OF_GAS = "Transaction ran out of gas"

SELECTOR_SIZE = 4
WORD_SIZE = 32
_LENGTH_START = SELECTOR_SIZE + WORD_SIZE
_REASON_START = _LENGTH_START + WORD_SIZE


class MalformedRevertPayloadError(ValueError):
    pass


class TransactionNotFoundError(LookupError):
    pass


def parse_revert_reason(result: str) -> str:
    """
    Extract the message from an ABI-encoded ``Error(string)`` payload.

    Args:
        result: 0x-prefixed hex returned by eth_call

    Returns:
        The decoded reason string

    Raises:
        MalformedRevertPayloadError: If the payload is not hex, is shorter
            than its declared layout, or the reason is not UTF-8
    """
    try:
        payload = from_hex(result)
    except MalformedHexError as exc:
        raise MalformedRevertPayloadError(f"Revert payload is not hex: {exc}") from exc

    if len(payload) < _REASON_START:
        raise MalformedRevertPayloadError(
            f"Revert payload too short: {len(payload)} bytes, need at least {_REASON_START}"
        )

    length = int.from_bytes(payload[_LENGTH_START:_REASON_START], "big")
    end = _REASON_START + length
    if end > len(payload):
        raise MalformedRevertPayloadError(
            f"Revert reason length {length} exceeds payload ({len(payload) - _REASON_START} bytes available)"
        )

    try:
        return payload[_REASON_START:end].decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedRevertPayloadError("Revert reason is not valid UTF-8") from exc


def replay_params(txn: TransactionView) -> dict[str, str]:
    """eth_call parameters that reproduce ``txn`` as a read-only call."""
    return {
        "to": txn.to,
        "data": txn.input,
        "from": txn.from_address,
        "value": to_quantity(txn.value),
        "gas": to_quantity(txn.gas_limit),
        "gasPrice": to_quantity(txn.gas_price),
    }


async def get_revert_reason(client: JsonRpcClient, receipt: ReceiptView) -> str:
    """
    Explain why a mined transaction failed.

    Returns TX_DID_NOT_FAIL for a successful receipt and TX_OUT_OF_GAS when
    the transaction used exactly its gas limit; neither case replays the call.

    Raises:
        RPCError: From either lookup, unchanged
        TransactionNotFoundError: If the node no longer knows the transaction
        MalformedRevertPayloadError: If the replay result cannot be decoded
    """
    if receipt.status:
        return TX_DID_NOT_FAIL

    txn = await get_transaction(client, receipt.tx_hash)
    if txn is None:
        raise TransactionNotFoundError(f"Transaction {receipt.tx_hash} not found")

    # Heuristic: exhausting gas burns exactly the limit and leaves no payload.
    if receipt.gas_used == txn.gas_limit:
        return TX_OUT_OF_GAS

    logger.debug("replaying %s at block %d", receipt.tx_hash, txn.block_number)
    result = await call_raw(client, replay_params(txn), txn.block_number)
    return parse_revert_reason(result)
