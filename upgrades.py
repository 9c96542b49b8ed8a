"""
Upgradeable deployment through an ERC1967 proxy.

The implementation is deployed first, then an ERC1967Proxy pointing at it is
deployed with the initializer calldata, so the proxy storage is initialised
in the same transaction that creates it.
"""

from dataclasses import dataclass
from typing import Any, Sequence

from web3 import Web3

from artifacts import get_contract_factory, load_artifact
from logger import setup_logger
from registry_service import TransactionSender, TxResult, deploy_contract

logger = setup_logger("Veridca.Deploy")

PROXY_CONTRACT = "ERC1967Proxy"

# bytes32(uint256(keccak256("eip1967.proxy.implementation")) - 1)
IMPLEMENTATION_SLOT = "0x360894a13ba1a3210667c828492db98dca3e2076cc3735a920a3ca505d382bbc"


@dataclass
class ProxyDeployment:
    contract: Any
    implementation: str
    proxy_tx: TxResult
    implementation_tx: TxResult

    @property
    def address(self) -> str:
        return self.contract.address

    @property
    def deploy_tx_hash(self) -> str:
        return self.proxy_tx.tx_hash


def encode_initializer(contract, initializer: str, args: Sequence) -> str:
    if not initializer:
        return "0x"
    return contract.encode_abi(initializer, args=list(args))


def deploy_proxy(w3: Web3, sender: TransactionSender, implementation_name: str,
                 initializer: str = "initialize", args: Sequence = (), artifacts_root=None) -> ProxyDeployment:
    implementation_factory = get_contract_factory(w3, implementation_name, artifacts_root)
    implementation_tx = deploy_contract(sender, implementation_factory, label=f"{implementation_name} implementation")
    implementation = implementation_tx.contract_address

    data = encode_initializer(implementation_factory, initializer, args)

    proxy_factory = get_contract_factory(w3, PROXY_CONTRACT, artifacts_root)
    proxy_tx = deploy_contract(sender, proxy_factory, implementation, data, label=f"{implementation_name} proxy")

    abi = load_artifact(implementation_name, artifacts_root).abi
    contract = w3.eth.contract(address=proxy_tx.contract_address, abi=abi)

    logger.info(f"📜 {implementation_name} proxy: {contract.address} → implementation {implementation}")
    return ProxyDeployment(
        contract=contract,
        implementation=implementation,
        proxy_tx=proxy_tx,
        implementation_tx=implementation_tx,
    )


def implementation_address(w3: Web3, proxy: str) -> str:
    raw = w3.eth.get_storage_at(Web3.to_checksum_address(proxy), int(IMPLEMENTATION_SLOT, 16))
    return Web3.to_checksum_address(bytes(raw)[-20:])
