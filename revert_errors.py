"""
Revert reason decoding for contract calls.

web3.py raises ContractLogicError for `require` strings and
ContractCustomError for Solidity custom errors, carrying the raw revert data.
The in-process tester backend raises its own TransactionFailed with the
reason (or the raw revert bytes) folded into the message instead.
decode_revert() maps all of them back to a name using the contract ABI.
"""

import ast
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from eth_abi import decode
from web3 import Web3
from web3.exceptions import ContractCustomError, ContractPanicError

ERROR_STRING_SELECTOR = "0x08c379a0"  # Error(string)
PANIC_SELECTOR = "0x4e487b71"         # Panic(uint256)

REVERTED_PREFIX = "execution reverted: "


@dataclass
class RevertReason:
    kind: str  # "string" | "custom" | "panic" | "unknown"
    name: Optional[str] = None
    message: Optional[str] = None
    data: Optional[str] = None


def error_selector(signature: str) -> str:
    return "0x" + bytes(Web3.keccak(text=signature)[:4]).hex()


def error_signature(entry: Dict[str, Any]) -> str:
    types = ",".join(_canonical_type(i) for i in entry.get("inputs", []))
    return f"{entry['name']}({types})"


def _canonical_type(param: Dict[str, Any]) -> str:
    kind = param["type"]
    if kind.startswith("tuple"):
        inner = ",".join(_canonical_type(c) for c in param.get("components", []))
        return f"({inner}){kind[len('tuple'):]}"
    return kind


def custom_error_selectors(abi: List[Dict[str, Any]]) -> Dict[str, str]:
    return {
        error_selector(error_signature(entry)): entry["name"]
        for entry in abi or []
        if entry.get("type") == "error"
    }


def missing_role_message(account: str, role) -> str:
    role_hex = role if isinstance(role, str) else "0x" + bytes(role).hex()
    return f"AccessControl: account {account.lower()} is missing role {role_hex}"


def _revert_data(exc: Exception) -> Optional[str]:
    data = getattr(exc, "data", None)
    if isinstance(data, dict):
        data = data.get("data")
    if not isinstance(data, str):
        return None
    if data.startswith("Reverted "):
        data = data[len("Reverted "):]
    return data.lower() if data.startswith("0x") else None


def _message_data(message: str) -> Optional[str]:
    """Raw revert bytes printed into an "execution reverted: b'...'" message"""
    if not message.startswith(REVERTED_PREFIX):
        return None
    literal = message[len(REVERTED_PREFIX):]
    if not literal.startswith(("b'", 'b"')):
        return None
    try:
        raw = ast.literal_eval(literal)
    except (ValueError, SyntaxError):
        return None
    return "0x" + raw.hex() if isinstance(raw, bytes) else None


def decode_revert(exc: Exception, abi: Optional[List[Dict[str, Any]]] = None) -> RevertReason:
    message = getattr(exc, "message", None) or str(exc)
    data = _revert_data(exc) or _message_data(message)

    if isinstance(exc, ContractPanicError) or (data and data.startswith(PANIC_SELECTOR)):
        return RevertReason(kind="panic", name="Panic", message=message, data=data)

    if data and data.startswith(ERROR_STRING_SELECTOR):
        (reason,) = decode(["string"], bytes.fromhex(data[10:]))
        return RevertReason(kind="string", name="Error", message=reason, data=data)

    if data and len(data) >= 10 and (isinstance(exc, ContractCustomError) or abi):
        name = custom_error_selectors(abi).get(data[:10]) if abi else None
        return RevertReason(kind="custom", name=name, message=message, data=data)

    if data is None and message.startswith(REVERTED_PREFIX):
        return RevertReason(kind="string", name="Error", message=message[len(REVERTED_PREFIX):])

    return RevertReason(kind="unknown", message=message, data=data)
