"""
HD account inspection for the `accounts:mnemonic` task.

Derives the root node and the first child accounts of a BIP-39 mnemonic on
the default Ethereum path and renders them for the console.
"""

import json
from typing import Any, Dict, List

from eth_account import Account
from eth_account.hdaccount import ETHEREUM_DEFAULT_PATH, Mnemonic, key_from_seed, seed_from_mnemonic
from eth_keys import keys

Account.enable_unaudited_hdwallet_features()


def is_valid_mnemonic(mnemonic) -> bool:
    if not isinstance(mnemonic, str) or not mnemonic.strip():
        return False
    return Mnemonic().is_mnemonic_valid(mnemonic)


def child_path(index: int) -> str:
    """Default path with its last component replaced by `index`"""
    return "/".join(ETHEREUM_DEFAULT_PATH.split("/")[:-1] + [str(index)])


def _describe_key(private_key: bytes) -> Dict[str, str]:
    key = keys.PrivateKey(private_key)
    return {
        "address": key.public_key.to_checksum_address(),
        "publicKey": "0x" + key.public_key.to_compressed_bytes().hex(),
        "privateKey": "0x" + private_key.hex(),
    }


def root_key(mnemonic: str) -> bytes:
    # BIP-32 master node
    return key_from_seed(seed_from_mnemonic(mnemonic, ""), "m")


def derive_accounts(mnemonic, count: int = 2) -> Dict[str, Any]:
    if not is_valid_mnemonic(mnemonic):
        raise ValueError(f"Invalid Mnemonic: {mnemonic}")

    parent = {"mnemonic": mnemonic}
    parent.update(_describe_key(root_key(mnemonic)))

    children: List[Dict[str, str]] = []
    for i in range(count):
        path = child_path(i)
        account = Account.from_mnemonic(mnemonic, account_path=path)
        child = {"child": f"{i} - {path}"}
        child.update(_describe_key(bytes(account.key)))
        children.append(child)

    return {"parent": parent, "children": children}


def render_accounts(accounts: Dict[str, Any]) -> str:
    return json.dumps(accounts, indent=2)
