"""
Veridca Registry contract client
Licensed under the Apache License, Version 2.0

Handles all interactions with a deployed Veridca (ERC721A) contract:
- Role and interface constants
- Token queries (owner, balance, URI, supply counters)
- Role-gated minting and burning
- Transfers and approvals
- Transfer event decoding
"""

import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from web3 import Web3
from web3.logs import DISCARD

from logger import setup_logger
from networks import Signer

logger = setup_logger("Veridca.Web3")

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

DEFAULT_ADMIN_ROLE = b"\x00" * 32
ADMIN_ROLE = Web3.keccak(text="ADMIN_ROLE")
MINTER_ROLE = Web3.keccak(text="MINTER_ROLE")
PAUSER_ROLE = Web3.keccak(text="PAUSER_ROLE")
BURNER_ROLE = Web3.keccak(text="BURNER_ROLE")

ROLES = {
    "DEFAULT_ADMIN_ROLE": DEFAULT_ADMIN_ROLE,
    "ADMIN_ROLE": ADMIN_ROLE,
    "MINTER_ROLE": MINTER_ROLE,
    "PAUSER_ROLE": PAUSER_ROLE,
    "BURNER_ROLE": BURNER_ROLE,
}

INTERFACE_ERC165 = "0x01ffc9a7"
INTERFACE_ERC721 = "0x80ac58cd"
INTERFACE_ERC721_METADATA = "0x5b5e139f"

TX_TIMEOUT = 120


class TransactionFailed(RuntimeError):
    """A transaction was mined but reverted (status 0)"""

    def __init__(self, tx_hash: str, receipt=None):
        self.tx_hash = tx_hash
        self.receipt = receipt
        super().__init__(f"Transaction {tx_hash} failed")


@dataclass
class TxResult:
    tx_hash: str
    status: int
    block_number: int
    gas_used: int
    receipt: Any = field(repr=False, default=None)

    @property
    def contract_address(self) -> Optional[str]:
        return self.receipt["contractAddress"] if self.receipt else None


def to_hex(value) -> str:
    if isinstance(value, str):
        return value if value.startswith("0x") else "0x" + value
    return "0x" + bytes(value).hex()


def role_bytes(role) -> bytes:
    if isinstance(role, str):
        if role in ROLES:
            return bytes(ROLES[role])
        return bytes.fromhex(role.removeprefix("0x"))
    return bytes(role)


class TransactionSender:
    """Signs and sends contract transactions for one signer"""

    def __init__(self, w3: Web3, signer: Signer, gas_price: Optional[int] = None):
        self.w3 = w3
        self.signer = signer
        self.gas_price = gas_price

        # Nonce cache to keep back-to-back transactions from colliding
        self._nonce_lock = threading.Lock()
        self._last_nonce = None
        self._last_nonce_time = 0.0

    @property
    def address(self) -> str:
        return self.signer.address

    def _get_next_nonce(self) -> int:
        """MUST be called under self._nonce_lock"""
        current_nonce = self.w3.eth.get_transaction_count(self.address, "pending")

        if self._last_nonce is not None and (time.time() - self._last_nonce_time) < 30:
            next_nonce = max(current_nonce, self._last_nonce + 1)
        else:
            next_nonce = current_nonce

        self._last_nonce = next_nonce
        self._last_nonce_time = time.time()

        logger.debug(f"🔢 Next nonce: {next_nonce} (chain: {current_nonce})")
        return next_nonce

    def _fee_params(self) -> Dict[str, int]:
        if self.gas_price is not None:
            return {"gasPrice": self.gas_price}
        gas_price = self.w3.eth.gas_price
        return {
            "maxFeePerGas": gas_price * 2,
            "maxPriorityFeePerGas": gas_price,
        }

    def send(self, call, label: str = "transaction", value: int = 0) -> TxResult:
        """Send a ContractFunction or ContractConstructor call and wait for the receipt"""
        params: Dict[str, Any] = {"from": self.address}
        if value:
            params["value"] = value

        if self.signer.is_local:
            with self._nonce_lock:
                params["nonce"] = self._get_next_nonce()
                params["chainId"] = self.w3.eth.chain_id
                params.update(self._fee_params())
                tx = call.build_transaction(params)

                signed_tx = self.signer.account.sign_transaction(tx)
                tx_hash = self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)
        else:
            if self.gas_price is not None:
                params["gasPrice"] = self.gas_price
            tx_hash = call.transact(params)

        tx_hash_hex = to_hex(tx_hash)
        logger.info(f"📤 {label} sent: {tx_hash_hex}")

        receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=TX_TIMEOUT)
        if receipt["status"] != 1:
            logger.error(f"❌ {label} FAILED: {tx_hash_hex}")
            raise TransactionFailed(tx_hash_hex, receipt)

        logger.info(f"✅ {label} mined in block {receipt['blockNumber']} (gas {receipt['gasUsed']})")
        return TxResult(
            tx_hash=tx_hash_hex,
            status=receipt["status"],
            block_number=receipt["blockNumber"],
            gas_used=receipt["gasUsed"],
            receipt=receipt,
        )


def deploy_contract(sender: TransactionSender, factory, *args, label: str = "deployment") -> TxResult:
    result = sender.send(factory.constructor(*args), label=label)
    logger.info(f"📜 Contract deployed at {result.contract_address}")
    return result


class VeridcaRegistry:
    """Client for one deployed Veridca contract, acting as one signer"""

    def __init__(self, w3: Web3, contract, signer: Signer, gas_price: Optional[int] = None,
                 sender: Optional[TransactionSender] = None):
        self.w3 = w3
        self.contract = contract
        self.signer = signer
        self.gas_price = gas_price
        self.sender = sender or TransactionSender(w3, signer, gas_price)

    @property
    def address(self) -> str:
        return self.contract.address

    @property
    def abi(self) -> List[Dict[str, Any]]:
        return self.contract.abi

    def connect(self, signer: Signer) -> "VeridcaRegistry":
        return VeridcaRegistry(self.w3, self.contract, signer, self.gas_price)

    # ===== Views =====

    def name(self) -> str:
        return self.contract.functions.name().call()

    def symbol(self) -> str:
        return self.contract.functions.symbol().call()

    def current_index(self) -> int:
        return self.contract.functions.currentIndex().call()

    def start_token_id(self) -> int:
        return self.contract.functions.startTokenId().call()

    def total_supply(self) -> int:
        return self.contract.functions.totalSupply().call()

    def total_minted(self) -> int:
        return self.contract.functions.totalMinted().call()

    def total_burned(self) -> int:
        return self.contract.functions.totalBurned().call()

    def balance_of(self, owner: str) -> int:
        return self.contract.functions.balanceOf(Web3.to_checksum_address(owner)).call()

    def owner_of(self, token_id: int) -> str:
        return self.contract.functions.ownerOf(token_id).call()

    def token_uri(self, token_id: int) -> str:
        return self.contract.functions.tokenURI(token_id).call()

    def exists(self, token_id: int) -> bool:
        return self.contract.functions.exists(token_id).call()

    def get_approved(self, token_id: int) -> str:
        return self.contract.functions.getApproved(token_id).call()

    def is_approved_for_all(self, owner: str, operator: str) -> bool:
        return self.contract.functions.isApprovedForAll(
            Web3.to_checksum_address(owner), Web3.to_checksum_address(operator)
        ).call()

    def role(self, name: str) -> bytes:
        """Role id as reported by the contract, e.g. role("MINTER_ROLE")"""
        return getattr(self.contract.functions, name)().call()

    def has_role(self, role, account: str) -> bool:
        return self.contract.functions.hasRole(role_bytes(role), Web3.to_checksum_address(account)).call()

    def supports_interface(self, interface_id: str) -> bool:
        return self.contract.functions.supportsInterface(
            bytes.fromhex(interface_id.removeprefix("0x"))
        ).call()

    # ===== Transactions =====

    def initialize(self, owner: str, name: str, symbol: str) -> TxResult:
        return self.sender.send(
            self.contract.functions.initialize(Web3.to_checksum_address(owner), name, symbol),
            label="initialize",
        )

    def safe_mint(self, to: str, uri: str) -> TxResult:
        result = self.sender.send(
            self.contract.functions.safeMint(Web3.to_checksum_address(to), uri),
            label="safeMint",
        )
        logger.info(f"   → To: {to}")
        logger.info(f"   → Token: {self.minted_token_id(result.receipt)}")
        return result

    def burn(self, token_id: int) -> TxResult:
        return self.sender.send(self.contract.functions.burn(token_id), label=f"burn #{token_id}")

    def transfer_from(self, from_address: str, to: str, token_id: int) -> TxResult:
        return self.sender.send(
            self.contract.functions.transferFrom(
                Web3.to_checksum_address(from_address), Web3.to_checksum_address(to), token_id
            ),
            label=f"transferFrom #{token_id}",
        )

    def approve(self, to: str, token_id: int) -> TxResult:
        return self.sender.send(
            self.contract.functions.approve(Web3.to_checksum_address(to), token_id),
            label=f"approve #{token_id}",
        )

    def set_approval_for_all(self, operator: str, approved: bool) -> TxResult:
        return self.sender.send(
            self.contract.functions.setApprovalForAll(Web3.to_checksum_address(operator), approved),
            label="setApprovalForAll",
        )

    def grant_role(self, role, account: str) -> TxResult:
        return self.sender.send(
            self.contract.functions.grantRole(role_bytes(role), Web3.to_checksum_address(account)),
            label="grantRole",
        )

    def revoke_role(self, role, account: str) -> TxResult:
        return self.sender.send(
            self.contract.functions.revokeRole(role_bytes(role), Web3.to_checksum_address(account)),
            label="revokeRole",
        )

    # ===== Events =====

    def transfer_events(self, receipt) -> List[Dict[str, Any]]:
        events = self.contract.events.Transfer().process_receipt(receipt, errors=DISCARD)
        return [
            {"from": e["args"]["from"], "to": e["args"]["to"], "tokenId": int(e["args"]["tokenId"])}
            for e in events
        ]

    def minted_token_id(self, receipt) -> Optional[int]:
        for event in self.transfer_events(receipt):
            if event["from"] == ZERO_ADDRESS:
                return event["tokenId"]
        return None
