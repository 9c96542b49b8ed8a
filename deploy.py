#!/usr/bin/env python3
"""
Deploy Veridca and initialize it

Deploys the implementation contract directly (no proxy) and calls
initialize(owner, name, symbol) as the first signer.

Usage:
    HARDHAT_NETWORK=localhost python deploy.py
"""

import sys

from dotenv import load_dotenv

from artifacts import get_contract_factory
from logger import setup_logger
from networks import Signer, open_network
from registry_service import TransactionSender, VeridcaRegistry, deploy_contract

logger = setup_logger("Veridca.Deploy")

CONTRACT_NAME = "Veridca"
CONTRACT_SYMBOL = "VR"


def deploy_registry(w3, signer: Signer, name: str = CONTRACT_NAME, symbol: str = CONTRACT_SYMBOL,
                    network: str = "hardhat", gas_price=None, artifacts_root=None) -> VeridcaRegistry:
    sender = TransactionSender(w3, signer, gas_price)
    factory = get_contract_factory(w3, CONTRACT_NAME, artifacts_root)

    result = deploy_contract(sender, factory, label=f"{CONTRACT_NAME} deployment")
    contract = w3.eth.contract(address=result.contract_address, abi=factory.abi)
    print("VeridcaRegistry deployed to:", contract.address, network)

    registry = VeridcaRegistry(w3, contract, signer, gas_price, sender=sender)
    registry.initialize(signer.address, name, symbol)
    print("VeridcaRegistry initialized")
    return registry


def main():
    load_dotenv()
    w3, network, signers = open_network()
    owner = signers[0]
    deploy_registry(w3, owner, network=network.name, gas_price=network.gas_price)


if __name__ == "__main__":
    try:
        main()
    except Exception as e:
        logger.error(f"Deployment failed: {e}", exc_info=True)
        sys.exit(1)
