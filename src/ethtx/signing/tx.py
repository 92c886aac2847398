"""
Transaction Signer - EIP-155 signing of legacy transactions.

The signing payload is the RLP list

    [nonce, gasPrice, gasLimit, to, value, data, chainId, 0, 0]

whose Keccak-256 hash is signed with ECDSA. The chain id is folded into the
signature's ``v`` value and the broadcastable bytes are the RLP list

    [nonce, gasPrice, gasLimit, to, value, data, v, r, s]
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from eth_hash.auto import keccak
from eth_keys import keys

from .. import rlp
from ..utils import to_address_bytes, to_data_bytes
from .keys import to_signing_key

# EIP-155: v = recovery_id + chain_id * 2 + 35
CHAIN_ID_OFFSET = 35

DEFAULT_GAS_LIMIT = 21_000  # Base cost of a plain value transfer


@dataclass(frozen=True)
class UnsignedTransaction:
    nonce: int
    gas_price: int
    gas_limit: int
    to: Optional[Union[str, bytes]]  # None for contract creation
    value: int = 0
    data: bytes = b""

    def __post_init__(self) -> None:
        for name in ("nonce", "gas_price", "gas_limit", "value"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")

    def fields(self) -> list:
        """The six payload fields in RLP order, addresses and data as raw bytes."""
        return [
            self.nonce,
            self.gas_price,
            self.gas_limit,
            to_address_bytes(self.to),
            self.value,
            to_data_bytes(self.data),
        ]


@dataclass(frozen=True)
class Signature:
    r: int
    s: int
    recovery_id: int

    def v(self, chain_id: int) -> int:
        return compute_v(self.recovery_id, chain_id)


@dataclass(frozen=True)
class SignedTransaction:
    raw_transaction: bytes
    hash: bytes
    signature: Signature
    v: int

    @property
    def r(self) -> int:
        return self.signature.r

    @property
    def s(self) -> int:
        return self.signature.s

    def to_hex(self) -> str:
        return "0x" + self.raw_transaction.hex()


def compute_v(recovery_id: int, chain_id: int) -> int:
    if recovery_id not in (0, 1):
        raise ValueError(f"Recovery id must be 0 or 1, got {recovery_id}")
    return recovery_id + chain_id * 2 + CHAIN_ID_OFFSET


def signing_payload(chain_id: int, unsigned: UnsignedTransaction) -> bytes:
    """RLP bytes hashed for signing; the trailing zeros are EIP-155 placeholders."""
    return rlp.encode(unsigned.fields() + [chain_id, 0, 0])


def signing_hash(chain_id: int, unsigned: UnsignedTransaction) -> bytes:
    return keccak(signing_payload(chain_id, unsigned))


def sign_transaction(
    chain_id: int,
    unsigned: UnsignedTransaction,
    private_key: Union[str, bytes],
) -> SignedTransaction:
    """
    Sign a legacy transaction with EIP-155 replay protection.

    Signing is deterministic (RFC 6979 nonces), so identical inputs always
    yield identical bytes.

    Args:
        chain_id: Target network chain id
        unsigned: The transaction to sign
        private_key: 0x-prefixed hex or raw 32-byte private key

    Returns:
        SignedTransaction holding the broadcastable raw bytes

    Raises:
        InvalidKeyError: If the private key is malformed
    """
    signing_key = to_signing_key(private_key)
    msg_hash = signing_hash(chain_id, unsigned)

    sig = signing_key.sign_msg_hash(msg_hash)
    signature = Signature(r=sig.r, s=sig.s, recovery_id=sig.v)
    v = signature.v(chain_id)

    raw = rlp.encode(unsigned.fields() + [v, signature.r, signature.s])
    return SignedTransaction(
        raw_transaction=raw,
        hash=keccak(raw),
        signature=signature,
        v=v,
    )


def recover_sender(chain_id: int, unsigned: UnsignedTransaction, signature: Signature) -> str:
    """Recover the checksummed address that produced ``signature``."""
    sig = keys.Signature(vrs=(signature.recovery_id, signature.r, signature.s))
    public_key = sig.recover_public_key_from_msg_hash(signing_hash(chain_id, unsigned))
    return public_key.to_checksum_address()
