"""
Source verification on Etherscan-compatible explorers.

Submits the solc standard-json input from the contract's build-info, then
polls the explorer until the verification leaves the queue.
"""

import json
import time
from typing import Any, Dict, Optional

import requests

from artifacts import Artifact
from logger import setup_logger

logger = setup_logger("Veridca.Deploy")

API_URLS = {
    "goerli": "https://api-goerli.etherscan.io/api",
    "polygon": "https://api.polygonscan.com/api",
    "polygon_mumbai": "https://api-testnet.polygonscan.com/api",
}

# networks.etherscan_api_keys() uses the explorer's own network names
API_KEY_NAMES = {
    "goerli": "goerli",
    "polygon": "polygon",
    "polygon_mumbai": "polygonMumbai",
}

PENDING = "Pending in queue"
ALREADY_VERIFIED = "Already Verified"


class ExplorerError(RuntimeError):
    pass


def api_url(network: str) -> str:
    if network not in API_URLS:
        raise ExplorerError(f"No block explorer configured for network {network}")
    return API_URLS[network]


def _request(method: str, network: str, **kwargs) -> Dict[str, Any]:
    response = requests.request(method, api_url(network), timeout=30, **kwargs)
    response.raise_for_status()
    return response.json()


def verify_contract(network: str, address: str, artifact: Artifact, build_info: Dict[str, Any],
                    api_key: str, constructor_args: str = "") -> str:
    """Submit a verification request and return the explorer GUID"""
    payload = {
        "apikey": api_key,
        "module": "contract",
        "action": "verifysourcecode",
        "contractaddress": address,
        "sourceCode": json.dumps(build_info["input"]),
        "codeformat": "solidity-standard-json-input",
        "contractname": artifact.fully_qualified_name,
        "compilerversion": f"v{build_info['solcLongVersion']}",
        "constructorArguements": constructor_args.removeprefix("0x"),
    }

    logger.info(f"🔍 Verifying {artifact.fully_qualified_name} at {address} on {network}")
    data = _request("POST", network, data=payload)

    if str(data.get("status")) != "1":
        if ALREADY_VERIFIED.lower() in str(data.get("result", "")).lower():
            logger.info(f"✅ {address} is already verified")
            return ""
        raise ExplorerError(f"Verification request rejected: {data.get('result')}")

    guid = data["result"]
    logger.info(f"📤 Verification submitted, guid {guid}")
    return guid


def check_verification(network: str, guid: str, api_key: str) -> str:
    data = _request("GET", network, params={
        "apikey": api_key,
        "module": "contract",
        "action": "checkverifystatus",
        "guid": guid,
    })
    return str(data.get("result", ""))


def wait_for_verification(network: str, guid: str, api_key: str, attempts: int = 10,
                          interval: float = 5.0, sleep=time.sleep) -> Optional[str]:
    result = None
    for attempt in range(attempts):
        result = check_verification(network, guid, api_key)
        if result != PENDING:
            logger.info(f"Verification result: {result}")
            return result
        logger.debug(f"⏳ Verification pending ({attempt + 1}/{attempts})")
        sleep(interval)
    return result
