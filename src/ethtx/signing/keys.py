"""
ECDSA / secp256k1 key handling.

Keys are read from ~/.ethtx/.env (PRIVATE_KEY, hex format) or from the
environment. This module never writes keys anywhere.

Dependencies: eth-keys for key validation, eth-account for address derivation.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv
from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_keys import keys
from eth_keys.constants import SECPK1_N

from ..utils import MalformedHexError, from_hex, strip_hex_prefix


# Default config directory
ETHTX_DIR = Path.home() / ".ethtx"
ETHTX_ENV = ETHTX_DIR / ".env"


class InvalidKeyError(ValueError):
    pass


def load_private_key(env_path: Optional[Path] = None) -> str:
    """
    Load private key from .env file or environment.

    Args:
        env_path: Path to .env file (default: ~/.ethtx/.env)

    Returns:
        0x-prefixed hex private key

    Raises:
        ValueError: If PRIVATE_KEY is not set
    """
    env_path = env_path or ETHTX_ENV

    if env_path.exists():
        load_dotenv(env_path, override=True)

    private_key = os.environ.get("PRIVATE_KEY")
    if not private_key:
        raise ValueError(
            f"PRIVATE_KEY not found. Set PRIVATE_KEY in the environment or in {env_path}"
        )

    if not private_key.startswith("0x"):
        private_key = "0x" + private_key

    return private_key


def private_key_bytes(private_key: Union[str, bytes]) -> bytes:
    """
    Parse and validate a secp256k1 private key.

    Args:
        private_key: 32 raw bytes, or 64 hex digits with optional 0x prefix

    Returns:
        The 32 key bytes

    Raises:
        InvalidKeyError: If the key is not 64 hex digits / 32 bytes, or is outside [1, n-1]
    """
    if isinstance(private_key, str):
        # from_hex left-pads odd lengths; a truncated key must not pass as another key
        if len(strip_hex_prefix(private_key)) != 64:
            raise InvalidKeyError("Private key must be 64 hex digits.")
        try:
            raw = from_hex(private_key)
        except MalformedHexError as exc:
            raise InvalidKeyError("Private key is not valid hex.") from exc
    elif isinstance(private_key, (bytes, bytearray)):
        raw = bytes(private_key)
    else:
        raise InvalidKeyError(f"Unsupported private key type: {type(private_key).__name__}")

    if len(raw) != 32:
        raise InvalidKeyError(f"Private key must be 32 bytes, got {len(raw)}")
    if not 0 < int.from_bytes(raw, "big") < SECPK1_N:
        raise InvalidKeyError("Private key is outside the secp256k1 range.")
    return raw


def to_signing_key(private_key: Union[str, bytes]) -> keys.PrivateKey:
    """Wrap a validated private key in an eth-keys PrivateKey."""
    return keys.PrivateKey(private_key_bytes(private_key))


def get_account(private_key: Optional[Union[str, bytes]] = None) -> LocalAccount:
    """
    Get an eth-account LocalAccount from a private key.

    Args:
        private_key: 0x-prefixed hex private key.
                     If None, loads from .env.

    Returns:
        LocalAccount instance
    """
    if private_key is None:
        private_key = load_private_key()
    return Account.from_key(private_key_bytes(private_key))


def get_address(private_key: Optional[Union[str, bytes]] = None) -> str:
    """
    Get the checksummed Ethereum address for a private key.

    If private_key is None, loads from .env.
    """
    return get_account(private_key).address
