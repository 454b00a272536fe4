from __future__ import annotations

import json
from pathlib import Path

import pytest

from dotrain_workspace.rainconfig.artifacts import BytecodePresence, read_artifact_bytecode
from dotrain_workspace.rainconfig.errors import (
    RainConfigDecodeError,
    RainConfigIoError,
    RainConfigSemanticError,
)


def test_both_fields_present(tmp_path: Path, write_artifact) -> None:
    path = write_artifact(tmp_path / "Both.json", creation="0x6001", deployed="6002")
    artifact = read_artifact_bytecode(path)
    assert artifact.presence is BytecodePresence.BOTH
    assert artifact.creation == b"\x60\x01"
    assert artifact.deployed == b"\x60\x02"


def test_only_deployed_bytecode(tmp_path: Path, write_artifact) -> None:
    path = write_artifact(tmp_path / "Deployed.json", deployed="0x6002")
    artifact = read_artifact_bytecode(path)
    assert artifact.presence is BytecodePresence.DEPLOYED_ONLY
    assert (artifact.creation, artifact.deployed) == (None, b"\x60\x02")
    assert artifact.require_deployed() == b"\x60\x02"
    with pytest.raises(RainConfigSemanticError) as excinfo:
        artifact.require_creation("expression deployer")
    assert excinfo.value.code == "MISSING_CREATION_BYTECODE"


def test_only_creation_bytecode(tmp_path: Path, write_artifact) -> None:
    path = write_artifact(tmp_path / "Creation.json", creation="0x6001")
    artifact = read_artifact_bytecode(path)
    assert artifact.presence is BytecodePresence.CREATION_ONLY
    assert (artifact.creation, artifact.deployed) == (b"\x60\x01", None)
    with pytest.raises(RainConfigSemanticError) as excinfo:
        artifact.require_deployed("parser")
    assert "Creation.json" in str(excinfo.value)


def test_neither_field_is_an_error(tmp_path: Path, write_artifact) -> None:
    path = write_artifact(tmp_path / "Empty.json")
    with pytest.raises(RainConfigSemanticError) as excinfo:
        read_artifact_bytecode(path)
    assert "artifact contains no bytecode" in str(excinfo.value)


def test_non_string_fields_count_as_absent(tmp_path: Path, write_artifact) -> None:
    path = write_artifact(tmp_path / "Weird.json", creation=123, deployed="0x6002")
    assert read_artifact_bytecode(path).presence is BytecodePresence.DEPLOYED_ONLY


@pytest.mark.parametrize(
    ("creation", "deployed", "field"),
    [
        ("0xnothex", "0x6002", "bytecode"),
        ("0x6001", "0x600", "deployedBytecode"),
    ],
)
def test_malformed_field_is_named(tmp_path: Path, write_artifact, creation: str, deployed: str, field: str) -> None:
    path = write_artifact(tmp_path / "Malformed.json", creation=creation, deployed=deployed)
    with pytest.raises(RainConfigDecodeError) as excinfo:
        read_artifact_bytecode(path)
    message = str(excinfo.value)
    assert f"{field}:" in message
    assert "Malformed.json" in message


def test_flat_string_fields_are_accepted(tmp_path: Path) -> None:
    path = tmp_path / "Hardhat.json"
    path.write_text(json.dumps({"bytecode": "0x6001", "deployedBytecode": "0x6002"}), encoding="utf-8")
    artifact = read_artifact_bytecode(path)
    assert artifact.presence is BytecodePresence.BOTH


def test_empty_hex_decodes_to_empty_bytes(tmp_path: Path, write_artifact) -> None:
    path = write_artifact(tmp_path / "Interface.json", creation="0x", deployed="0x")
    artifact = read_artifact_bytecode(path)
    assert artifact.creation == b""
    assert artifact.deployed == b""


def test_invalid_json_is_a_decode_error(tmp_path: Path) -> None:
    path = tmp_path / "Broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(RainConfigDecodeError) as excinfo:
        read_artifact_bytecode(path)
    assert excinfo.value.code == "ARTIFACT_JSON_INVALID"


def test_missing_artifact_is_an_io_error(tmp_path: Path) -> None:
    with pytest.raises(RainConfigIoError):
        read_artifact_bytecode(tmp_path / "Missing.json")
