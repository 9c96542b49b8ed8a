"""
ABI exporter.

Writes the ABI of every compiled contract to ABI_EXPORT_DIR (default
./data/abi), one <ContractName>.json per contract. In pretty mode each entry
is a human-readable signature instead of the JSON fragment:

    function safeMint(address to, string uri)
    event Transfer(address indexed from, address indexed to, uint256 indexed tokenId)
"""

import json
import os
import shutil
from pathlib import Path
from typing import Any, Dict, List

from artifacts import ArtifactError, iter_artifact_files, read_artifact
from logger import setup_logger

logger = setup_logger("Veridca.Tasks")


def _param_type(param: Dict[str, Any]) -> str:
    kind = param["type"]
    if kind.startswith("tuple"):
        inner = ", ".join(_format_param(c) for c in param.get("components", []))
        return f"tuple({inner}){kind[len('tuple'):]}"
    return kind


def _format_param(param: Dict[str, Any], event: bool = False) -> str:
    parts = [_param_type(param)]
    if event and param.get("indexed"):
        parts.append("indexed")
    if param.get("name"):
        parts.append(param["name"])
    return " ".join(parts)


def _params(params: List[Dict[str, Any]], event: bool = False) -> str:
    return ", ".join(_format_param(p, event) for p in params)


def format_abi_entry(entry: Dict[str, Any]) -> str:
    kind = entry.get("type", "function")
    mutability = entry.get("stateMutability")

    if kind == "constructor":
        text = f"constructor({_params(entry.get('inputs', []))})"
        if mutability == "payable":
            text += " payable"
        return text

    if kind in ("fallback", "receive"):
        text = f"{kind}()"
        if mutability == "payable":
            text += " payable"
        return text

    if kind == "event":
        text = f"event {entry['name']}({_params(entry.get('inputs', []), event=True)})"
        if entry.get("anonymous"):
            text += " anonymous"
        return text

    if kind == "error":
        return f"error {entry['name']}({_params(entry.get('inputs', []))})"

    text = f"function {entry['name']}({_params(entry.get('inputs', []))})"
    if mutability and mutability != "nonpayable":
        text += f" {mutability}"
    outputs = entry.get("outputs") or []
    if outputs:
        text += f" returns ({_params(outputs)})"
    return text


def export_abis(artifacts_root=None, out_dir=None, clear=True, flat=True, spacing=2, pretty=True) -> List[Path]:
    out_dir = Path(out_dir or os.getenv("ABI_EXPORT_DIR", os.path.join("data", "abi")))

    if clear and out_dir.exists():
        shutil.rmtree(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    written: Dict[Path, str] = {}
    for path in iter_artifact_files(artifacts_root):
        artifact = read_artifact(path)
        if not artifact.abi:
            continue

        if flat:
            target = out_dir / f"{artifact.contract_name}.json"
        else:
            target = out_dir / Path(artifact.source_name).with_suffix("") / f"{artifact.contract_name}.json"

        if target in written:
            raise ArtifactError(
                f"Duplicate output destination {target}: "
                f"{written[target]} and {artifact.fully_qualified_name}"
            )

        abi = [format_abi_entry(e) for e in artifact.abi] if pretty else artifact.abi
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps(abi, indent=spacing) + "\n", encoding="utf-8")
        written[target] = artifact.fully_qualified_name
        logger.debug(f"ABI exported: {artifact.fully_qualified_name} -> {target}")

    logger.info(f"📄 Exported {len(written)} ABIs to {out_dir}")
    return list(written)
