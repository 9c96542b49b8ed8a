"""
Compiled contract artifacts (Hardhat layout) and contract factories.

Artifacts are read from ARTIFACTS_DIR (default ./artifacts):
    artifacts/contracts/Veridca.sol/Veridca.json
    artifacts/build-info/<hash>.json
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from web3 import Web3

from logger import setup_logger

logger = setup_logger("Veridca.Web3")


class ArtifactError(RuntimeError):
    pass


class ArtifactNotFoundError(ArtifactError, FileNotFoundError):
    pass


@dataclass
class Artifact:
    contract_name: str
    source_name: str
    abi: List[Dict[str, Any]]
    bytecode: str
    path: Optional[Path] = None

    @property
    def deployable(self) -> bool:
        return bool(self.bytecode) and self.bytecode not in ("0x", "0x0")

    @property
    def fully_qualified_name(self) -> str:
        return f"{self.source_name}:{self.contract_name}"


def artifacts_dir(path=None) -> Path:
    return Path(path or os.getenv("ARTIFACTS_DIR", "artifacts"))


def iter_artifact_files(root) -> Iterator[Path]:
    root = artifacts_dir(root)
    if not root.exists():
        return
    for path in sorted(root.rglob("*.json")):
        if path.name.endswith(".dbg.json") or "build-info" in path.parts:
            continue
        yield path


def read_artifact(path: Path) -> Artifact:
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ArtifactError(f"Artifact is not valid JSON: {path}") from e

    abi = data.get("abi")
    if abi is None:
        raise ArtifactError(f"Artifact missing abi: {path}")

    return Artifact(
        contract_name=data.get("contractName") or Path(path).stem,
        source_name=data.get("sourceName", ""),
        abi=abi,
        bytecode=data.get("bytecode") or "",
        path=Path(path),
    )


def load_artifact(name: str, root=None) -> Artifact:
    root = artifacts_dir(root)
    for path in iter_artifact_files(root):
        if path.stem != name:
            continue
        artifact = read_artifact(path)
        if artifact.contract_name == name:
            logger.debug(f"📦 Artifact {artifact.fully_qualified_name} loaded from {path}")
            return artifact

    raise ArtifactNotFoundError(
        f"Artifact for {name} not found in {root}. Compile the contracts first."
    )


def get_contract_factory(w3: Web3, name: str, root=None):
    artifact = load_artifact(name, root)
    if not artifact.deployable:
        raise ArtifactError(f"{name} has no bytecode (abstract contract or interface?)")
    return w3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)


def get_contract_at(w3: Web3, name: str, address: str, root=None):
    artifact = load_artifact(name, root)
    return w3.eth.contract(address=Web3.to_checksum_address(address), abi=artifact.abi)


def find_build_info(artifact: Artifact, root=None) -> Dict[str, Any]:
    """Build-info JSON that compiled the artifact's source file"""
    root = artifacts_dir(root)

    # Hardhat writes the build-info pointer next to the artifact
    if artifact.path is not None:
        dbg = artifact.path.with_name(f"{artifact.contract_name}.dbg.json")
        if dbg.exists():
            pointer = json.loads(dbg.read_text(encoding="utf-8")).get("buildInfo")
            if pointer:
                candidate = (dbg.parent / pointer).resolve()
                if candidate.exists():
                    return json.loads(candidate.read_text(encoding="utf-8"))

    build_info_dir = root / "build-info"
    if build_info_dir.exists():
        for path in sorted(build_info_dir.glob("*.json")):
            data = json.loads(path.read_text(encoding="utf-8"))
            contracts = data.get("output", {}).get("contracts", {})
            if artifact.contract_name in contracts.get(artifact.source_name, {}):
                return data

    raise ArtifactNotFoundError(f"No build-info found for {artifact.fully_qualified_name}")
