"""
Calldata helpers - function selectors and ABI-encoded arguments.

Functions can be described either by a canonical signature string
("transfer(address,uint256)") or by an ABI JSON file (a plain ABI list or a
compiler artifact with an "abi" key).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from eth_abi import encode
from eth_abi.exceptions import EncodingError
from eth_hash.auto import keccak


def load_abi(path: Path) -> list[dict[str, Any]]:
    """
    Load a contract ABI from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file holds neither an ABI list nor an artifact
    """
    with path.open("r", encoding="utf-8") as f:
        artifact = json.load(f)

    if isinstance(artifact, list):
        return artifact
    if isinstance(artifact, dict) and isinstance(artifact.get("abi"), list):
        return artifact["abi"]
    raise ValueError(f"No ABI found in {path}")


def function_selector(signature: str) -> bytes:
    """First 4 bytes of keccak256(signature)."""
    # NOTE: Keccak-256 != SHA3-256 (NIST). Never use hashlib.sha3_256 here.
    return keccak(signature.encode("utf-8"))[:4]


def split_signature(signature: str) -> tuple[str, list[str]]:
    """Split "name(t1,(t2,t3),t4)" into ("name", ["t1", "(t2,t3)", "t4"])."""
    signature = signature.replace(" ", "")
    open_idx = signature.find("(")
    if open_idx <= 0 or not signature.endswith(")"):
        raise ValueError(f"Invalid function signature: {signature}")

    name = signature[:open_idx]
    body = signature[open_idx + 1 : -1]
    types: list[str] = []
    depth = 0
    current = ""
    for char in body:
        if char == "," and depth == 0:
            types.append(current)
            current = ""
            continue
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                raise ValueError(f"Unbalanced parentheses in {signature}")
        current += char
    if depth != 0:
        raise ValueError(f"Unbalanced parentheses in {signature}")
    if current:
        types.append(current)
    if any(not t for t in types):
        raise ValueError(f"Empty parameter type in {signature}")
    return name, types


def encode_call(signature: str, args: list) -> bytes:
    """
    ABI-encode a call from its canonical signature.

    Args:
        signature: e.g. "transfer(address,uint256)"
        args: Argument values in declaration order

    Returns:
        Selector followed by the encoded arguments

    Raises:
        ValueError: On an arity mismatch or a value eth-abi cannot encode
    """
    name, input_types = split_signature(signature)
    if len(args) != len(input_types):
        raise ValueError(
            f"{name} expects {len(input_types)} arguments, got {len(args)}"
        )
    canonical = f"{name}({','.join(input_types)})"
    try:
        encoded_args = encode(input_types, args) if args else b""
    except EncodingError as exc:
        raise ValueError(f"Cannot encode arguments for {canonical}: {exc}") from exc
    return function_selector(canonical) + encoded_args


def _flatten_type(param: dict[str, Any]) -> str:
    if "components" in param and param["type"].startswith("tuple"):
        inner = ",".join(_flatten_type(c) for c in param["components"])
        return f"({inner}){param['type'][len('tuple'):]}"
    return param["type"]


def encode_function_call(abi: list[dict[str, Any]], function_name: str, args: list) -> bytes:
    """
    ABI-encode a call by looking the function up in a contract ABI.

    Raises:
        ValueError: If the function is not in the ABI
    """
    func = None
    for entry in abi:
        if entry.get("type") == "function" and entry.get("name") == function_name:
            func = entry
            break

    if func is None:
        raise ValueError(f"Function {function_name} not found in ABI")

    input_types = [_flatten_type(inp) for inp in func.get("inputs", [])]
    return encode_call(f"{function_name}({','.join(input_types)})", args)
