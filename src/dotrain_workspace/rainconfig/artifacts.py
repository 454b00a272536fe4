"""Bytecode extraction from compiled contract artifacts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import json
from pathlib import Path
from typing import Any

from dotrain_workspace.meta_store.hashing import HexDecodeError, decode_hex

from .errors import RainConfigDecodeError, RainConfigIoError, RainConfigSemanticError


CREATION_FIELD = "bytecode"
DEPLOYED_FIELD = "deployedBytecode"


class BytecodePresence(str, Enum):
    NEITHER = "NEITHER"
    CREATION_ONLY = "CREATION_ONLY"
    DEPLOYED_ONLY = "DEPLOYED_ONLY"
    BOTH = "BOTH"


@dataclass(frozen=True)
class ArtifactBytecode:
    path: Path
    presence: BytecodePresence
    creation: bytes | None = None
    deployed: bytes | None = None

    def require_creation(self, role: str = "artifact") -> bytes:
        if self.creation is None:
            raise RainConfigSemanticError(
                "MISSING_CREATION_BYTECODE", path=self.path, detail=f"{role} has no creation bytecode"
            )
        return self.creation

    def require_deployed(self, role: str = "artifact") -> bytes:
        if self.deployed is None:
            raise RainConfigSemanticError(
                "MISSING_DEPLOYED_BYTECODE", path=self.path, detail=f"{role} has no deployed bytecode"
            )
        return self.deployed


def read_artifact_bytecode(path: Path) -> ArtifactBytecode:
    """Read ``bytecode.object`` / ``deployedBytecode.object`` from a json artifact.

    A side is present when its field holds a string; artifacts exposing the
    hex directly as ``"bytecode": "0x..."`` are read the same way. Fails
    when neither side is present or a present side is not valid hex.
    """
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise RainConfigIoError("ARTIFACT_UNREADABLE", path=path, detail=exc.strerror or exc) from exc
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise RainConfigDecodeError("ARTIFACT_JSON_INVALID", path=path, detail=exc) from exc

    creation_hex = _field_hex(payload, CREATION_FIELD)
    deployed_hex = _field_hex(payload, DEPLOYED_FIELD)
    presence = _presence(creation_hex is not None, deployed_hex is not None)
    if presence is BytecodePresence.NEITHER:
        raise RainConfigSemanticError(
            "ARTIFACT_NO_BYTECODE", path=path, detail="artifact contains no bytecode"
        )
    creation = _decode(path, CREATION_FIELD, creation_hex) if creation_hex is not None else None
    deployed = _decode(path, DEPLOYED_FIELD, deployed_hex) if deployed_hex is not None else None
    return ArtifactBytecode(path=path, presence=presence, creation=creation, deployed=deployed)


def _presence(has_creation: bool, has_deployed: bool) -> BytecodePresence:
    if has_creation and has_deployed:
        return BytecodePresence.BOTH
    if has_creation:
        return BytecodePresence.CREATION_ONLY
    if has_deployed:
        return BytecodePresence.DEPLOYED_ONLY
    return BytecodePresence.NEITHER


def _field_hex(payload: Any, field: str) -> str | None:
    if not isinstance(payload, dict):
        return None
    value = payload.get(field)
    if isinstance(value, dict):
        value = value.get("object")
    return value if isinstance(value, str) else None


def _decode(path: Path, field: str, value: str) -> bytes:
    try:
        return decode_hex(value)
    except HexDecodeError as exc:
        raise RainConfigDecodeError("ARTIFACT_HEX_INVALID", path=path, detail=f"{field}: {exc}") from exc
