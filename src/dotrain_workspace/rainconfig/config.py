"""rainconfig model and loader."""

from __future__ import annotations

from enum import Enum
import json
import os
from pathlib import Path
import re
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .errors import RainConfigLoadError
from .schemas import (
    RAINCONFIG_SCHEMA,
    RainConfigSchemaError,
    RainConfigSchemaRegistry,
    default_registry,
)


DEFAULT_CONFIG_NAME = "rainconfig.json"

_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")


class _RainConfigYamlLoader(yaml.SafeLoader):
    """SafeLoader whose scalar mapping keys stay as written (``0xab..`` is not an int)."""


def _construct_text_keyed_mapping(loader: yaml.SafeLoader, node: yaml.MappingNode) -> dict[Any, Any]:
    loader.flatten_mapping(node)
    mapping: dict[Any, Any] = {}
    for key_node, value_node in node.value:
        if isinstance(key_node, yaml.ScalarNode):
            key = loader.construct_scalar(key_node)
        else:
            key = loader.construct_object(key_node, deep=True)
        mapping[key] = loader.construct_object(value_node, deep=True)
    return mapping


_RainConfigYamlLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG, _construct_text_keyed_mapping
)


class MetaKind(str, Enum):
    BINARY = "binary"
    HEX = "hex"


class MetaEntry(BaseModel):
    """A local meta file: raw bytes (``binary``) or a hex string (``hex``)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    binary: Path | None = None
    hex: Path | None = None

    @model_validator(mode="after")
    def _exactly_one(self) -> "MetaEntry":
        if (self.binary is None) == (self.hex is None):
            raise ValueError("meta entry needs exactly one of 'binary' or 'hex'")
        return self

    @classmethod
    def binary_file(cls, path: Path | str) -> "MetaEntry":
        return cls(binary=Path(path))

    @classmethod
    def hex_file(cls, path: Path | str) -> "MetaEntry":
        return cls(hex=Path(path))

    @property
    def kind(self) -> MetaKind:
        return MetaKind.BINARY if self.binary is not None else MetaKind.HEX

    @property
    def path(self) -> Path:
        return self.binary if self.binary is not None else self.hex  # type: ignore[return-value]

    def resolved(self, base: Path) -> "MetaEntry":
        return self.model_copy(update={self.kind.value: _resolve_path(self.path, base)})


class DeployerConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    construction_meta: MetaEntry = Field(..., alias="constructionMeta")
    expression_deployer: Path = Field(..., alias="expressionDeployer")
    parser: Path
    store: Path
    interpreter: Path

    def resolved(self, base: Path) -> "DeployerConfig":
        return self.model_copy(
            update={
                "construction_meta": self.construction_meta.resolved(base),
                "expression_deployer": _resolve_path(self.expression_deployer, base),
                "parser": _resolve_path(self.parser, base),
                "store": _resolve_path(self.store, base),
                "interpreter": _resolve_path(self.interpreter, base),
            }
        )


class RainConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    include: list[Path] = Field(default_factory=list)
    subgraphs: list[str] = Field(default_factory=list)
    meta: list[MetaEntry] = Field(default_factory=list)
    deployers: dict[str, DeployerConfig] = Field(default_factory=dict)

    def resolved(self, base: Path) -> "RainConfig":
        """Copy with every relative path anchored at ``base``."""
        return self.model_copy(
            update={
                "include": [_resolve_path(path, base) for path in self.include],
                "meta": [entry.resolved(base) for entry in self.meta],
                "deployers": {key: item.resolved(base) for key, item in self.deployers.items()},
            }
        )


def load_rainconfig(
    path: Path,
    *,
    registry: RainConfigSchemaRegistry | None = None,
) -> RainConfig:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise RainConfigLoadError("RAINCONFIG_UNREADABLE", path=path, detail=exc) from exc
    try:
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.load(text, Loader=_RainConfigYamlLoader)
    except (json.JSONDecodeError, yaml.YAMLError, TypeError) as exc:
        raise RainConfigLoadError("RAINCONFIG_PARSE_FAILED", path=path, detail=exc) from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise RainConfigLoadError("RAINCONFIG_NOT_A_MAPPING", path=path)
    return parse_rainconfig(data, base=path.parent, registry=registry, source=path)


def parse_rainconfig(
    payload: dict[str, Any],
    *,
    base: Path | None = None,
    registry: RainConfigSchemaRegistry | None = None,
    source: Path | str = "<payload>",
) -> RainConfig:
    try:
        expanded = _expand_payload(payload)
    except ValueError as exc:
        raise RainConfigLoadError("RAINCONFIG_ENV_MISSING", path=source, detail=exc) from exc
    try:
        (registry or default_registry()).validate(RAINCONFIG_SCHEMA, expanded)
    except RainConfigSchemaError as exc:
        raise RainConfigLoadError("RAINCONFIG_SCHEMA_INVALID", path=source, detail=exc) from exc
    try:
        config = RainConfig.model_validate(expanded)
    except ValidationError as exc:
        raise RainConfigLoadError("RAINCONFIG_INVALID", path=source, detail=exc) from exc
    return config.resolved(base) if base is not None else config


def _resolve_path(path: Path, base: Path) -> Path:
    path = Path(path)
    if path.is_absolute():
        return path
    return base / path


def _expand_str(value: str) -> str:
    def replacer(match: re.Match[str]) -> str:
        token = match.group(1)
        if ":-" in token:
            key, default = token.split(":-", 1)
            actual = os.getenv(key, "")
            return actual if actual.strip() else default
        actual = os.getenv(token, "")
        if not actual.strip():
            raise ValueError(f"missing environment variable: {token}")
        return actual

    return _VAR_PATTERN.sub(replacer, value)


def _expand_payload(value: Any) -> Any:
    if isinstance(value, str):
        return _expand_str(value)
    if isinstance(value, list):
        return [_expand_payload(item) for item in value]
    if isinstance(value, dict):
        return {str(key): _expand_payload(item) for key, item in value.items()}
    return value
