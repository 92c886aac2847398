"""
Read-only views over JSON-RPC transaction and receipt objects.

Each view is populated once from the response dict; the dict itself is not
kept. Missing or null fields fall back to fixed defaults rather than raising.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..signing.tx import DEFAULT_GAS_LIMIT
from ..utils import ZERO_ADDRESS, hex_to_int


def _quantity(payload: dict[str, Any], key: str, default: int = 0) -> int:
    value = payload.get(key)
    if value is None:
        return default
    return hex_to_int(value)


def _address(payload: dict[str, Any], key: str) -> str:
    return payload.get(key) or ZERO_ADDRESS


@dataclass(frozen=True)
class TransactionView:
    hash: str
    block_number: int  # 0 while pending
    from_address: str
    to: str  # zero address for contract creation
    gas_limit: int
    gas_price: int
    input: str
    value: int
    nonce: int

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "TransactionView":
        return cls(
            hash=payload.get("hash") or "",
            block_number=_quantity(payload, "blockNumber"),
            from_address=_address(payload, "from"),
            to=_address(payload, "to"),
            gas_limit=_quantity(payload, "gas", DEFAULT_GAS_LIMIT),
            gas_price=_quantity(payload, "gasPrice"),
            input=payload.get("input") or "0x",
            value=_quantity(payload, "value"),
            nonce=_quantity(payload, "nonce"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "hash": self.hash,
            "blockNumber": self.block_number,
            "from": self.from_address,
            "to": self.to,
            "gas": self.gas_limit,
            "gasPrice": self.gas_price,
            "input": self.input,
            "value": self.value,
            "nonce": self.nonce,
        }


@dataclass(frozen=True)
class ReceiptView:
    tx_hash: str
    from_address: str
    to: str
    gas_used: int
    status: bool
    block_number: int = 0
    contract_address: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "ReceiptView":
        # Pre-Byzantium receipts have no status field; treat them as success.
        status = payload.get("status")
        return cls(
            tx_hash=payload.get("transactionHash") or "",
            from_address=_address(payload, "from"),
            to=_address(payload, "to"),
            gas_used=_quantity(payload, "gasUsed"),
            status=True if status is None else hex_to_int(status) == 1,
            block_number=_quantity(payload, "blockNumber"),
            contract_address=payload.get("contractAddress"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "transactionHash": self.tx_hash,
            "from": self.from_address,
            "to": self.to,
            "gasUsed": self.gas_used,
            "status": self.status,
            "blockNumber": self.block_number,
            "contractAddress": self.contract_address,
        }
