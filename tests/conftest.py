import json
import os
import tempfile

import pytest

# Loggers open their files at import time
os.environ.setdefault("VERIDCA_LOG_DIR", tempfile.mkdtemp(prefix="veridca-logs-"))

HARDHAT_MNEMONIC = "test test test test test test test test test test test junk"

VERIDCA_ABI = [
    {"inputs": [], "stateMutability": "nonpayable", "type": "constructor"},
    {"inputs": [], "name": "MintToZeroAddress", "type": "error"},
    {"inputs": [], "name": "URISetEmptyValue", "type": "error"},
    {"inputs": [], "name": "OwnerQueryForNonexistentToken", "type": "error"},
    {
        "anonymous": False,
        "inputs": [
            {"indexed": True, "internalType": "address", "name": "from", "type": "address"},
            {"indexed": True, "internalType": "address", "name": "to", "type": "address"},
            {"indexed": True, "internalType": "uint256", "name": "tokenId", "type": "uint256"},
        ],
        "name": "Transfer",
        "type": "event",
    },
    {
        "inputs": [
            {"internalType": "address", "name": "owner", "type": "address"},
            {"internalType": "string", "name": "name_", "type": "string"},
            {"internalType": "string", "name": "symbol_", "type": "string"},
        ],
        "name": "initialize",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [
            {"internalType": "address", "name": "to", "type": "address"},
            {"internalType": "string", "name": "uri", "type": "string"},
        ],
        "name": "safeMint",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [{"internalType": "address", "name": "owner", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]

PROXY_ABI = [
    {
        "inputs": [
            {"internalType": "address", "name": "_logic", "type": "address"},
            {"internalType": "bytes", "name": "_data", "type": "bytes"},
        ],
        "stateMutability": "payable",
        "type": "constructor",
    },
]

INTERFACE_ABI = [
    {
        "inputs": [{"internalType": "uint256", "name": "tokenId", "type": "uint256"}],
        "name": "exists",
        "outputs": [{"internalType": "bool", "name": "", "type": "bool"}],
        "stateMutability": "view",
        "type": "function",
    },
]

BYTECODE = "0x6080604052348015600f57600080fd5b50"


def _write(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")


def _artifact(name, source, abi, bytecode=BYTECODE):
    return {
        "_format": "hh-sol-artifact-1",
        "contractName": name,
        "sourceName": source,
        "abi": abi,
        "bytecode": bytecode,
        "deployedBytecode": bytecode,
        "linkReferences": {},
        "deployedLinkReferences": {},
    }


@pytest.fixture
def veridca_abi():
    return json.loads(json.dumps(VERIDCA_ABI))


@pytest.fixture
def artifacts_root(tmp_path):
    """Hardhat-layout artifacts for Veridca, ERC1967Proxy and an interface"""
    root = tmp_path / "artifacts"

    veridca = root / "contracts" / "Veridca.sol" / "Veridca.json"
    _write(veridca, _artifact("Veridca", "contracts/Veridca.sol", VERIDCA_ABI))
    _write(veridca.with_name("Veridca.dbg.json"), {
        "_format": "hh-sol-dbg-1",
        "buildInfo": "../../build-info/aaaa.json",
    })

    _write(
        root / "@openzeppelin" / "contracts" / "proxy" / "ERC1967" / "ERC1967Proxy.sol" / "ERC1967Proxy.json",
        _artifact("ERC1967Proxy", "@openzeppelin/contracts/proxy/ERC1967/ERC1967Proxy.sol", PROXY_ABI),
    )
    _write(
        root / "contracts" / "IVeridca.sol" / "IVeridca.json",
        _artifact("IVeridca", "contracts/IVeridca.sol", INTERFACE_ABI, bytecode="0x"),
    )

    _write(root / "build-info" / "aaaa.json", {
        "_format": "hh-sol-build-info-1",
        "solcVersion": "0.8.17",
        "solcLongVersion": "0.8.17+commit.8df45f5f",
        "input": {"language": "Solidity", "sources": {"contracts/Veridca.sol": {"content": "// veridca"}}},
        "output": {"contracts": {"contracts/Veridca.sol": {"Veridca": {"abi": VERIDCA_ABI}}}},
    })
    _write(root / "build-info" / "bbbb.json", {
        "_format": "hh-sol-build-info-1",
        "solcVersion": "0.8.17",
        "solcLongVersion": "0.8.17+commit.8df45f5f",
        "input": {"language": "Solidity", "sources": {}},
        "output": {"contracts": {"contracts/IVeridca.sol": {"IVeridca": {"abi": INTERFACE_ABI}}}},
    })
    return root


@pytest.fixture
def hardhat_mnemonic():
    return HARDHAT_MNEMONIC


@pytest.fixture
def full_env(hardhat_mnemonic):
    return {
        "MNEMONIC": hardhat_mnemonic,
        "ALCHEMY_KEY": "alchemy-key",
        "ETHERSCAN_API_KEY": "etherscan-key",
        "POLYGONSCAN_API_KEY": "polygonscan-key",
    }


# Runtime: return the word 1 for every call
WORD_RUNTIME = "600160005260206000f3"
# Constructor: copy the runtime out and return it
WORD_BYTECODE = "0x600a600c600039600a6000f3" + WORD_RUNTIME
# Proxy constructor: store the first constructor argument in the EIP-1967
# implementation slot, then return the same runtime
PROXY_BYTECODE = (
    "0x60206042600039600051"
    "7f360894a13ba1a3210667c828492db98dca3e2076cc3735a920a3ca505d382bbc55"
    "600a6038600039600a6000f3" + WORD_RUNTIME
)

VIEW_ABI = [
    {
        "inputs": [],
        "name": "currentIndex",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [{"internalType": "uint256", "name": "tokenId", "type": "uint256"}],
        "name": "ownerOf",
        "outputs": [{"internalType": "address", "name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
]


@pytest.fixture
def chain_artifacts_root(tmp_path):
    """Deployable Veridca and ERC1967Proxy artifacts for the in-process chain"""
    root = tmp_path / "chain-artifacts"
    _write(
        root / "contracts" / "Veridca.sol" / "Veridca.json",
        _artifact("Veridca", "contracts/Veridca.sol", VERIDCA_ABI + VIEW_ABI, bytecode=WORD_BYTECODE),
    )
    _write(
        root / "@openzeppelin" / "contracts" / "proxy" / "ERC1967" / "ERC1967Proxy.sol" / "ERC1967Proxy.json",
        _artifact("ERC1967Proxy", "@openzeppelin/contracts/proxy/ERC1967/ERC1967Proxy.sol", PROXY_ABI,
                  bytecode=PROXY_BYTECODE),
    )
    return root
