"""Packaged JSON Schemas for rainconfig payloads."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError, best_match


class RainConfigSchemaError(ValueError):
    """Raised when a rainconfig payload fails schema validation."""


_DEFAULT_ROOT = Path(__file__).with_name("schemas")
RAINCONFIG_SCHEMA = "rainconfig.schema.yaml"


@dataclass(frozen=True)
class RainConfigSchemaRegistry:
    """Loads each schema once per registry and reports the most relevant violation."""

    root: Path = _DEFAULT_ROOT
    _validators: dict[str, Draft202012Validator] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def validate(self, schema_name: str, payload: Mapping[str, Any]) -> None:
        error = best_match(self.validator(schema_name).iter_errors(dict(payload)))
        if error is None:
            return
        location = ".".join(str(item) for item in error.absolute_path) or "<root>"
        raise RainConfigSchemaError(f"{schema_name}:{location}:{error.message}")

    def validator(self, schema_name: str) -> Draft202012Validator:
        name = str(schema_name or "").strip()
        if not name:
            raise RainConfigSchemaError("schema_name is required")
        cached = self._validators.get(name)
        if cached is None:
            schema = self._load_schema(name)
            try:
                Draft202012Validator.check_schema(schema)
            except SchemaError as exc:
                raise RainConfigSchemaError(f"{name}:schema is invalid:{exc.message}") from exc
            cached = self._validators[name] = Draft202012Validator(schema)
        return cached

    def _load_schema(self, name: str) -> dict[str, Any]:
        path = self.root / name
        try:
            payload = yaml.safe_load(path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise RainConfigSchemaError(f"schema not found: {path}") from exc
        if not isinstance(payload, dict):
            raise RainConfigSchemaError(f"schema is not a mapping: {path}")
        return payload


_DEFAULT_REGISTRY = RainConfigSchemaRegistry()


def default_registry() -> RainConfigSchemaRegistry:
    return _DEFAULT_REGISTRY
