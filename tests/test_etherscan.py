import json
from unittest.mock import MagicMock

import pytest

import etherscan
from artifacts import find_build_info, load_artifact
from etherscan import ExplorerError, api_url, check_verification, verify_contract, wait_for_verification

ADDRESS = "0x9fE46736679d2D9a65F0992F2272dE9f3c7fa6e0"


@pytest.fixture
def explorer(monkeypatch):
    """Replaces requests.request; queue JSON bodies on .responses"""
    calls = []
    responses = []

    def fake_request(method, url, timeout=None, **kwargs):
        calls.append({"method": method, "url": url, "timeout": timeout, **kwargs})
        response = MagicMock()
        response.json.return_value = responses.pop(0)
        return response

    monkeypatch.setattr(etherscan.requests, "request", fake_request)
    fake = MagicMock()
    fake.calls = calls
    fake.responses = responses
    return fake


@pytest.fixture
def veridca(artifacts_root):
    artifact = load_artifact("Veridca", artifacts_root)
    return artifact, find_build_info(artifact, artifacts_root)


def test_api_url():
    assert api_url("polygon") == "https://api.polygonscan.com/api"
    assert api_url("polygon_mumbai") == "https://api-testnet.polygonscan.com/api"
    with pytest.raises(ExplorerError):
        api_url("hardhat")


def test_verify_contract(explorer, veridca):
    artifact, build_info = veridca
    explorer.responses.append({"status": "1", "message": "OK", "result": "guid-123"})

    guid = verify_contract("goerli", ADDRESS, artifact, build_info, "key", constructor_args="0xabcd")

    assert guid == "guid-123"
    call = explorer.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "https://api-goerli.etherscan.io/api"
    assert call["timeout"] == 30

    payload = call["data"]
    assert payload["action"] == "verifysourcecode"
    assert payload["contractname"] == "contracts/Veridca.sol:Veridca"
    assert payload["compilerversion"] == "v0.8.17+commit.8df45f5f"
    assert payload["constructorArguements"] == "abcd"
    assert json.loads(payload["sourceCode"]) == build_info["input"]


def test_verify_contract_rejected(explorer, veridca):
    artifact, build_info = veridca
    explorer.responses.append({"status": "0", "message": "NOTOK", "result": "Invalid API Key"})

    with pytest.raises(ExplorerError, match="Invalid API Key"):
        verify_contract("polygon", ADDRESS, artifact, build_info, "bad")


def test_verify_contract_already_verified(explorer, veridca):
    artifact, build_info = veridca
    explorer.responses.append({"status": "0", "message": "NOTOK", "result": "Contract source code already verified"})

    assert verify_contract("polygon", ADDRESS, artifact, build_info, "key") == ""


def test_check_verification(explorer):
    explorer.responses.append({"status": "1", "result": "Pass - Verified"})

    assert check_verification("goerli", "guid-123", "key") == "Pass - Verified"
    assert explorer.calls[0]["params"]["action"] == "checkverifystatus"
    assert explorer.calls[0]["params"]["guid"] == "guid-123"


def test_wait_for_verification(explorer):
    explorer.responses.extend([
        {"status": "0", "result": "Pending in queue"},
        {"status": "0", "result": "Pending in queue"},
        {"status": "1", "result": "Pass - Verified"},
    ])
    sleeps = []

    result = wait_for_verification("goerli", "guid-123", "key", interval=2.0, sleep=sleeps.append)

    assert result == "Pass - Verified"
    assert sleeps == [2.0, 2.0]


def test_wait_for_verification_gives_up(explorer):
    explorer.responses.extend([{"status": "0", "result": "Pending in queue"}] * 3)

    result = wait_for_verification("goerli", "guid-123", "key", attempts=3, sleep=lambda _: None)
    assert result == "Pending in queue"
