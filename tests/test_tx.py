"""Tests for EIP-155 transaction signing."""

from __future__ import annotations

import pytest
from eth_account import Account
from eth_keys.constants import SECPK1_N

from ethtx import rlp
from ethtx.signing.keys import InvalidKeyError, get_address, private_key_bytes
from ethtx.signing.tx import (
    Signature,
    UnsignedTransaction,
    compute_v,
    recover_sender,
    sign_transaction,
    signing_hash,
    signing_payload,
)

# Worked example from EIP-155.
EIP155_TX = UnsignedTransaction(
    nonce=9,
    gas_price=20 * 10**9,
    gas_limit=21000,
    to="0x3535353535353535353535353535353535353535",
    value=10**18,
    data=b"",
)
EIP155_SIGNING_DATA = (
    "ec098504a817c800825208943535353535353535353535353535353535353535"
    "880de0b6b3a764000080018080"
)
EIP155_SIGNING_HASH = "daf5a779ae972f972197303d7b574746c7ef83eadac0f2791ad23db92e4c8e53"
EIP155_SIGNED = (
    "f86c098504a817c800825208943535353535353535353535353535353535353535"
    "880de0b6b3a76400008025a028ef61340bd939bc2195fe537567866003e1a15d3c"
    "71ff63e1590620aa636276a067cbe9d8997f761aecb703304b3800ccf555c9f3dc"
    "64214b297fb1966a3b6d83"
)
EIP155_R = 18515461264373351373200002665853028612451056578545711640558177340181847433846
EIP155_S = 46948507304638947509940763649030358759909902576025900602547168820602576006531

CHAIN_IDS = [1, 3, 4, 5, 10, 56, 137, 42161, 11155111]


def _eth_account_dict(chain_id: int, tx: UnsignedTransaction) -> dict:
    return {
        "nonce": tx.nonce,
        "gasPrice": tx.gas_price,
        "gas": tx.gas_limit,
        "to": tx.to,
        "value": tx.value,
        "data": tx.data,
        "chainId": chain_id,
    }


class TestEip155Example:
    """The worked example from the EIP-155 text."""

    def test_signing_payload(self, private_key: str) -> None:
        assert signing_payload(1, EIP155_TX).hex() == EIP155_SIGNING_DATA

    def test_signing_hash(self) -> None:
        assert signing_hash(1, EIP155_TX).hex() == EIP155_SIGNING_HASH

    def test_signed_bytes(self, private_key: str) -> None:
        signed = sign_transaction(1, EIP155_TX, private_key)
        assert signed.raw_transaction.hex() == EIP155_SIGNED
        assert signed.to_hex() == "0x" + EIP155_SIGNED

    def test_signature_values(self, private_key: str) -> None:
        signed = sign_transaction(1, EIP155_TX, private_key)
        assert signed.r == EIP155_R
        assert signed.s == EIP155_S
        assert signed.v == 37
        assert signed.signature.recovery_id == 0


class TestComputeV:
    """v = recovery_id + chain_id * 2 + 35."""

    def test_mainnet(self) -> None:
        assert compute_v(0, 1) == 37
        assert compute_v(1, 1) == 38

    def test_other_chains(self) -> None:
        assert compute_v(0, 137) == 309
        assert compute_v(1, 11155111) == 22310258

    def test_signature_method(self) -> None:
        assert Signature(r=1, s=2, recovery_id=1).v(4) == 44

    def test_invalid_recovery_id(self) -> None:
        with pytest.raises(ValueError):
            compute_v(2, 1)


class TestSignTransaction:
    """Properties of sign_transaction."""

    def test_deterministic(self, private_key: str) -> None:
        first = sign_transaction(5, EIP155_TX, private_key)
        second = sign_transaction(5, EIP155_TX, private_key)
        assert first.raw_transaction == second.raw_transaction
        assert first == second

    def test_chain_id_changes_signature(self, private_key: str) -> None:
        mainnet = sign_transaction(1, EIP155_TX, private_key)
        polygon = sign_transaction(137, EIP155_TX, private_key)
        assert mainnet.raw_transaction != polygon.raw_transaction

    def test_accepts_raw_key_bytes(self, private_key: str) -> None:
        from_hex_key = sign_transaction(1, EIP155_TX, private_key)
        from_bytes_key = sign_transaction(1, EIP155_TX, private_key_bytes(private_key))
        assert from_hex_key == from_bytes_key

    @pytest.mark.parametrize("chain_id", CHAIN_IDS)
    def test_recovers_signer(self, chain_id: int, private_key: str) -> None:
        signed = sign_transaction(chain_id, EIP155_TX, private_key)
        assert recover_sender(chain_id, EIP155_TX, signed.signature) == get_address(private_key)

    @pytest.mark.parametrize("chain_id", CHAIN_IDS)
    def test_v_encodes_chain_id(self, chain_id: int, private_key: str) -> None:
        signed = sign_transaction(chain_id, EIP155_TX, private_key)
        assert signed.v in (chain_id * 2 + 35, chain_id * 2 + 36)

    @pytest.mark.parametrize("chain_id", CHAIN_IDS)
    def test_matches_eth_account(self, chain_id: int) -> None:
        account = Account.create()
        tx = UnsignedTransaction(
            nonce=42,
            gas_price=3 * 10**9,
            gas_limit=90_000,
            to=account.address,
            value=123456789,
            data=bytes.fromhex("a9059cbb") + b"\x00" * 64,
        )
        ours = sign_transaction(chain_id, tx, account.key)
        theirs = Account.sign_transaction(_eth_account_dict(chain_id, tx), account.key)
        assert ours.raw_transaction == bytes(theirs.raw_transaction)
        assert ours.hash == bytes(theirs.hash)

    @pytest.mark.parametrize("chain_id", CHAIN_IDS)
    def test_eth_account_recovers_sender(self, chain_id: int, private_key: str) -> None:
        signed = sign_transaction(chain_id, EIP155_TX, private_key)
        assert Account.recover_transaction(signed.raw_transaction) == get_address(private_key)

    def test_signed_layout(self, private_key: str) -> None:
        signed = sign_transaction(1, EIP155_TX, private_key)
        fields = rlp.decode(signed.raw_transaction)
        assert len(fields) == 9
        assert fields[0] == b"\x09"
        assert fields[3] == b"\x35" * 20
        assert fields[5] == b""
        assert int.from_bytes(fields[6], "big") == signed.v
        assert int.from_bytes(fields[7], "big") == signed.r
        assert int.from_bytes(fields[8], "big") == signed.s

    def test_r_and_s_are_minimal(self, private_key: str) -> None:
        for nonce in range(16):
            tx = UnsignedTransaction(nonce=nonce, gas_price=1, gas_limit=21000, to=EIP155_TX.to)
            fields = rlp.decode(sign_transaction(1, tx, private_key).raw_transaction)
            assert fields[7][:1] != b"\x00"
            assert fields[8][:1] != b"\x00"

    def test_contract_creation_has_empty_to(self, private_key: str) -> None:
        tx = UnsignedTransaction(nonce=0, gas_price=1, gas_limit=100_000, to=None, data=b"\x60\x00")
        fields = rlp.decode(sign_transaction(1, tx, private_key).raw_transaction)
        assert fields[3] == b""
        assert fields[5] == b"\x60\x00"

    def test_hex_data(self, private_key: str) -> None:
        as_hex = UnsignedTransaction(nonce=1, gas_price=1, gas_limit=50_000, to=EIP155_TX.to, data="0xdeadbeef")
        as_bytes = UnsignedTransaction(nonce=1, gas_price=1, gas_limit=50_000, to=EIP155_TX.to, data=b"\xde\xad\xbe\xef")
        assert sign_transaction(1, as_hex, private_key) == sign_transaction(1, as_bytes, private_key)


class TestInvalidInput:
    """Malformed keys and transactions."""

    @pytest.mark.parametrize(
        "bad_key",
        [
            "0x1234",
            "0x" + "zz" * 32,
            "0x" + "00" * 32,
            "0x" + "11" * 33,
            hex(SECPK1_N),
            b"\x01" * 31,
        ],
    )
    def test_invalid_key(self, bad_key) -> None:
        with pytest.raises(InvalidKeyError):
            sign_transaction(1, EIP155_TX, bad_key)

    def test_invalid_key_type(self) -> None:
        with pytest.raises(InvalidKeyError):
            sign_transaction(1, EIP155_TX, 12345)  # type: ignore[arg-type]

    def test_negative_field(self) -> None:
        with pytest.raises(ValueError):
            UnsignedTransaction(nonce=-1, gas_price=1, gas_limit=21000, to=None)

    def test_bad_recipient(self, private_key: str) -> None:
        tx = UnsignedTransaction(nonce=0, gas_price=1, gas_limit=21000, to="0x1234")
        with pytest.raises(ValueError):
            sign_transaction(1, tx, private_key)
