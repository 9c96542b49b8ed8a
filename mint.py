#!/usr/bin/env python3
"""
Mint one Veridca token to the first signer

Reads the contract address from CONTRACT_ADDRESS and mints the sample IPFS
metadata URI, then prints the transaction, its receipt and the new owner.

Usage:
    CONTRACT_ADDRESS=0x... HARDHAT_NETWORK=localhost python mint.py
"""

import os
import sys
from pprint import pformat

from dotenv import load_dotenv

from artifacts import get_contract_at
from logger import log_activity, setup_logger
from networks import open_network
from registry_service import VeridcaRegistry

logger = setup_logger("Veridca.Deploy")

DEFAULT_CONTRACT_ADDRESS = "0x9fe46736679d2d9a65f0992f2272de9f3c7fa6e0"
SAMPLE_TOKEN_URI = "ipfs://Qma3p7SnWr7ibseDYnjHSrH2fdM5MpphgjjeVBJRjLoSEM=="


def print_group(title: str, body: str):
    print(title)
    for line in body.splitlines():
        print("  " + line)


def mint(registry: VeridcaRegistry, to: str, uri: str = SAMPLE_TOKEN_URI) -> int:
    token_id = registry.current_index()
    result = registry.safe_mint(to, uri)

    transaction = registry.w3.eth.get_transaction(result.tx_hash)
    print_group("Transaction", pformat(dict(transaction)))
    print_group("Receipt", pformat(dict(result.receipt)))

    owner = registry.owner_of(token_id)
    print_group("Info", f"Owner of token {token_id} is {owner}")

    log_activity("INFO", "MINT", "Token minted", token_id=token_id, to=owner, tx=result.tx_hash)
    return token_id


def main():
    load_dotenv()
    contract_address = os.getenv("CONTRACT_ADDRESS") or DEFAULT_CONTRACT_ADDRESS

    w3, network, signers = open_network()
    owner = signers[0]
    contract = get_contract_at(w3, "Veridca", contract_address)
    registry = VeridcaRegistry(w3, contract, owner, network.gas_price)
    mint(registry, owner.address)


if __name__ == "__main__":
    try:
        main()
    except Exception as e:
        logger.error(f"Mint failed: {e}", exc_info=True)
        sys.exit(1)
