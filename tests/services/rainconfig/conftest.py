from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from dotrain_workspace.rainconfig.config import DeployerConfig, MetaEntry


_EXPRESSION_DEPLOYER_CREATION = "0x6080604052348015600f57600080fd5b50"
_EXPRESSION_DEPLOYER_DEPLOYED = "0x6080604052600080fdfea164736f6c6343"
_CONSTRUCTION_META = b"\xff\x0a\x89\xc6\x74\xee\x78\x74construction-meta"


def _write_artifact(path: Path, *, creation: Any = None, deployed: Any = None) -> Path:
    payload: dict[str, Any] = {"abi": []}
    if creation is not None:
        payload["bytecode"] = {"object": creation, "linkReferences": {}}
    if deployed is not None:
        payload["deployedBytecode"] = {"object": deployed, "linkReferences": {}}
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def _write_deployer_bundle(root: Path, name: str = "deployer") -> DeployerConfig:
    base = root / name
    base.mkdir(parents=True, exist_ok=True)
    meta_path = base / "construction.meta"
    meta_path.write_bytes(_CONSTRUCTION_META)
    return DeployerConfig(
        construction_meta=MetaEntry.binary_file(meta_path),
        expression_deployer=_write_artifact(
            base / "ExpressionDeployer.json",
            creation=_EXPRESSION_DEPLOYER_CREATION,
            deployed=_EXPRESSION_DEPLOYER_DEPLOYED,
        ),
        parser=_write_artifact(base / "Parser.json", creation="0x60aa", deployed="0x6001"),
        store=_write_artifact(base / "Store.json", deployed="0x6002"),
        interpreter=_write_artifact(base / "Interpreter.json", creation="0x60ff", deployed="0x6003"),
    )


@pytest.fixture()
def write_artifact() -> Callable[..., Path]:
    return _write_artifact


@pytest.fixture()
def write_deployer_bundle() -> Callable[..., DeployerConfig]:
    return _write_deployer_bundle


@pytest.fixture()
def deployer_bundle(tmp_path: Path) -> DeployerConfig:
    return _write_deployer_bundle(tmp_path)
