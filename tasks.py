#!/usr/bin/env python3
"""
Developer tasks for the Veridca registry.

    veridca [--network NAME] deploy:registry
    veridca accounts:mnemonic
    veridca print --message "Hello, World!"
    veridca export-abi
    veridca [--network NAME] verify --address 0x...
"""

import argparse
import os
import sys
from typing import Any, Dict, Optional

from dotenv import load_dotenv

import abi_exporter
import etherscan
from artifacts import find_build_info, load_artifact
from hd_accounts import derive_accounts, render_accounts
from logger import setup_logger
from networks import NetworkConfig, Signer, default_network, etherscan_api_keys, open_network
from print_table import print_table
from registry_service import TransactionSender, to_hex
from upgrades import ProxyDeployment, deploy_proxy

logger = setup_logger("Veridca.Tasks")

REGISTRY_CONTRACT = "Veridca"
REGISTRY_LABEL = "VeridcaRegistry"
TOKEN_NAME = "Veridca"
TOKEN_SYMBOL = "VR"

SAMPLE_TABLE = [
    ["0A", "0B", "0C"],
    [
        "1A AIJIJAIJAIJIJAIJAI AIJIJAIJAIJIJAIJAI AIJIJAIJAIJIJAIJAI AIJIJAIJAIJIJAIJAI",
        "1B",
        "AIJIJAIJAIJIJAIJAIAIJIJAIJAIJIJAIJAIAIJIJAIJAIJIJAIJAI",
    ],
    ["2A", "2B", "2C"],
]


# ===== deploy:registry =====

def deployment_summary(w3, deployment: ProxyDeployment, signer: Signer, prev_balance: int) -> Dict[str, Any]:
    tx = w3.eth.get_transaction(deployment.deploy_tx_hash)
    block_number = tx.get("blockNumber")
    confirmations = w3.eth.block_number - block_number + 1 if block_number is not None else 0

    return {
        "name": REGISTRY_CONTRACT,
        "address": deployment.address,
        "signerAddress": signer.address,
        "signerPrevBalance": prev_balance,
        "signerPostBalance": w3.eth.get_balance(signer.address),
        "gasPrice": tx.get("gasPrice"),
        "gasLimit": tx.get("gas"),
        "chainId": tx.get("chainId"),
        "from": tx.get("from"),
        "hash": to_hex(tx["hash"]),
        "blockHash": to_hex(tx["blockHash"]) if tx.get("blockHash") else None,
        "blockNumber": block_number,
        "maxFeePerGas": tx.get("maxFeePerGas"),
        "maxPriorityFeePerGas": tx.get("maxPriorityFeePerGas"),
        "value": tx.get("value"),
        "confirmations": confirmations,
    }


def deploy_registry(w3, network: NetworkConfig, signer: Signer, artifacts_root=None) -> Dict[str, Any]:
    prev_balance = w3.eth.get_balance(signer.address)

    sender = TransactionSender(w3, signer, network.gas_price)
    deployment = deploy_proxy(
        w3, sender, REGISTRY_CONTRACT,
        initializer="initialize",
        args=(signer.address, TOKEN_NAME, TOKEN_SYMBOL),
        artifacts_root=artifacts_root,
    )
    print(f"{REGISTRY_LABEL} deployed to:", deployment.address)

    summary = deployment_summary(w3, deployment, signer, prev_balance)
    print_table(summary, f"{REGISTRY_LABEL} deployment")
    return summary


def task_deploy_registry(args) -> int:
    w3, network, signers = open_network(args.network)
    deploy_registry(w3, network, signers[0])
    return 0


# ===== accounts:mnemonic =====

def task_accounts_mnemonic(args) -> int:
    accounts = derive_accounts(os.getenv("MNEMONIC"), count=args.count)
    print(render_accounts(accounts))
    return 0


# ===== print =====

def task_print(args) -> int:
    print_table({"message": args.message})
    print_table(SAMPLE_TABLE)
    return 0


# ===== export-abi =====

def task_export_abi(args) -> int:
    written = abi_exporter.export_abis(args.artifacts, args.out, pretty=not args.raw)
    print(f"✅ Exported {len(written)} ABIs")
    return 0


# ===== verify =====

def task_verify(args) -> int:
    network = args.network or default_network()
    key_name = etherscan.API_KEY_NAMES.get(network)
    api_key = etherscan_api_keys().get(key_name) if key_name else None
    if not api_key:
        print(f"❌ No explorer API key configured for {network}")
        return 1

    artifact = load_artifact(args.contract)
    build_info = find_build_info(artifact)
    guid = etherscan.verify_contract(network, args.address, artifact, build_info, api_key,
                                     constructor_args=args.constructor_args)
    if not guid:
        return 0

    result = etherscan.wait_for_verification(network, guid, api_key)
    print(f"🔍 {result}")
    return 0 if result and result.startswith("Pass") else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="veridca", description="Veridca registry developer tasks")
    parser.add_argument("--network", default=None, help="network name (default: HARDHAT_NETWORK or hardhat)")
    sub = parser.add_subparsers(dest="task", required=True)

    p = sub.add_parser("deploy:registry", help=f"Deploy {REGISTRY_LABEL}")
    p.set_defaults(func=task_deploy_registry)

    p = sub.add_parser("accounts:mnemonic", help="Prints the list of accounts")
    p.add_argument("--count", type=int, default=2)
    p.set_defaults(func=task_accounts_mnemonic)

    p = sub.add_parser("print", help="Prints a message")
    p.add_argument("--message", required=True, help="The message to print")
    p.set_defaults(func=task_print)

    p = sub.add_parser("export-abi", help="Export contract ABIs")
    p.add_argument("--artifacts", default=None)
    p.add_argument("--out", default=None)
    p.add_argument("--raw", action="store_true", help="write JSON ABI fragments instead of signatures")
    p.set_defaults(func=task_export_abi)

    p = sub.add_parser("verify", help="Verify a deployed contract on the block explorer")
    p.add_argument("--address", required=True)
    p.add_argument("--contract", default=REGISTRY_CONTRACT)
    p.add_argument("--constructor-args", default="")
    p.set_defaults(func=task_verify)

    return parser


def main(argv: Optional[list] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except Exception as e:
        logger.error(f"Task {args.task} failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
