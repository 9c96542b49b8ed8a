"""
Network table and signer resolution.

hardhat        in-process chain (eth-tester), throwaway state per process
localhost      a node on http://127.0.0.1:8545 with unlocked accounts
polygon        Alchemy, Polygon mainnet
polygon_mumbai Alchemy, Polygon Mumbai testnet
goerli         Alchemy, Ethereum Goerli testnet

Remote networks sign locally with PRIVATE_KEY, or with accounts derived
from MNEMONIC when no private key is set.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import Web3

from logger import setup_logger

logger = setup_logger("Veridca.Web3")

Account.enable_unaudited_hdwallet_features()

HD_ACCOUNT_COUNT = 20
HD_PATH_PREFIX = "m/44'/60'/0'/0"
HARDHAT_GAS_PRICE = 2_000_000_000
HARDHAT_FUNDING = Web3.to_wei(1000, "ether")
LOCALHOST_URL = "http://127.0.0.1:8545"


class NetworkConfigError(RuntimeError):
    pass


@dataclass
class NetworkConfig:
    name: str
    url: Optional[str] = None
    chain_id: Optional[int] = None
    gas_price: Optional[int] = None
    accounts: List[str] = field(default_factory=list)
    in_process: bool = False


@dataclass
class Signer:
    address: str
    account: Optional[LocalAccount] = None

    @property
    def is_local(self) -> bool:
        return self.account is not None


def _is_str(value) -> bool:
    return isinstance(value, str)


def shake(values: Mapping) -> Dict:
    """Drop unset entries"""
    return {k: v for k, v in values.items() if v is not None}


def mnemonic_keys(mnemonic: str, count: int = HD_ACCOUNT_COUNT) -> List[str]:
    keys = []
    for i in range(count):
        account = Account.from_mnemonic(mnemonic, account_path=f"{HD_PATH_PREFIX}/{i}")
        keys.append("0x" + bytes(account.key).hex())
    return keys


def remote_accounts(environ: Mapping[str, str]) -> List[str]:
    private_key = environ.get("PRIVATE_KEY")
    mnemonic = environ.get("MNEMONIC")
    if not (_is_str(private_key) or _is_str(mnemonic)):
        return []
    if private_key is not None:
        return [private_key]
    return mnemonic_keys(mnemonic)


def build_networks(environ: Optional[Mapping[str, str]] = None) -> Dict[str, NetworkConfig]:
    environ = os.environ if environ is None else environ
    alchemy_key = environ.get("ALCHEMY_KEY", "")
    mnemonic = environ.get("MNEMONIC")
    accounts = remote_accounts(environ)

    return {
        "hardhat": NetworkConfig(
            name="hardhat",
            chain_id=1337,
            gas_price=HARDHAT_GAS_PRICE,
            accounts=mnemonic_keys(mnemonic) if _is_str(mnemonic) else [],
            in_process=True,
        ),
        "localhost": NetworkConfig(name="localhost", url=LOCALHOST_URL),
        "polygon": NetworkConfig(
            name="polygon",
            url=f"https://polygon-mainnet.g.alchemy.com/v2/{alchemy_key}",
            chain_id=137,
            accounts=accounts,
        ),
        "polygon_mumbai": NetworkConfig(
            name="polygon_mumbai",
            url=f"https://polygon-mumbai.g.alchemy.com/v2/{alchemy_key}",
            chain_id=80001,
            accounts=accounts,
        ),
        "goerli": NetworkConfig(
            name="goerli",
            url=f"https://eth-goerli.alchemyapi.io/v2/{alchemy_key}",
            chain_id=5,
            accounts=accounts,
        ),
    }


def default_network(environ: Optional[Mapping[str, str]] = None) -> str:
    environ = os.environ if environ is None else environ
    network = environ.get("HARDHAT_NETWORK")
    return network if _is_str(network) else "hardhat"


def etherscan_api_keys(environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    environ = os.environ if environ is None else environ
    return shake({
        "goerli": environ.get("ETHERSCAN_API_KEY"),
        "polygon": environ.get("POLYGONSCAN_API_KEY"),
        "polygonMumbai": environ.get("POLYGONSCAN_API_KEY"),
    })


def solidity_settings() -> Dict:
    """Compiler settings the Veridca artifacts are built with"""
    return {
        "version": "0.8.17",
        "settings": {
            "optimizer": {"enabled": True, "runs": 10000},
            "outputSelection": {
                "*": {
                    "*": ["evm.bytecode", "evm.deployedBytecode", "devdoc", "userdoc", "metadata", "abi"],
                },
            },
            "libraries": {},
        },
    }


def get_network(name: str, environ: Optional[Mapping[str, str]] = None) -> NetworkConfig:
    networks = build_networks(environ)
    if name not in networks:
        raise NetworkConfigError(f"Unknown network: {name} (known: {', '.join(networks)})")
    return networks[name]


def connect(network: NetworkConfig) -> Web3:
    if network.in_process:
        from web3 import EthereumTesterProvider

        w3 = Web3(EthereumTesterProvider())
    else:
        w3 = Web3(Web3.HTTPProvider(network.url, request_kwargs={"timeout": 30}))
        if not w3.is_connected():
            raise NetworkConfigError(f"Could not connect to {network.name}")

    logger.info(f"🌐 Connected to {network.name} (chain {w3.eth.chain_id})")
    return w3


def _fund_in_process(w3: Web3, addresses: List[str]):
    funder = w3.eth.accounts[0]
    for address in addresses:
        if w3.eth.get_balance(address) > 0:
            continue
        tx_hash = w3.eth.send_transaction({"from": funder, "to": address, "value": HARDHAT_FUNDING})
        w3.eth.wait_for_transaction_receipt(tx_hash)
    logger.debug(f"Funded {len(addresses)} in-process accounts")


def get_signers(w3: Web3, network: NetworkConfig) -> List[Signer]:
    if not network.accounts:
        return [Signer(address=address) for address in w3.eth.accounts]

    signers = [Signer(address=acct.address, account=acct)
               for acct in (Account.from_key(key) for key in network.accounts)]

    if network.in_process:
        _fund_in_process(w3, [s.address for s in signers])

    return signers


def open_network(name: Optional[str] = None, environ: Optional[Mapping[str, str]] = None):
    """Connect to a named (or the default) network and resolve its signers"""
    network = get_network(name or default_network(environ), environ)
    w3 = connect(network)
    return w3, network, get_signers(w3, network)
