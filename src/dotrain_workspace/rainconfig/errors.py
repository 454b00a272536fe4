"""Error taxonomy and the strict/lenient error policy for store builds."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from pathlib import Path
from typing import Any


logger = logging.getLogger("dotrain_workspace.rainconfig.errors")


class ErrorPolicy(str, Enum):
    STRICT = "STRICT"
    LENIENT = "LENIENT"


class RainConfigError(RuntimeError):
    def __init__(self, code: str, *, path: Path | str | None = None, detail: Any = None) -> None:
        self.code = code
        self.path = path
        self.detail = detail
        parts = [code]
        if path is not None:
            parts.append(str(path))
        if detail is not None:
            parts.append(str(detail))
        super().__init__(":".join(parts))


class RainConfigIoError(RainConfigError):
    """A file or directory could not be read."""


class RainConfigDecodeError(RainConfigError):
    """Hex, UTF-8 or JSON content could not be decoded."""


class RainConfigSemanticError(RainConfigError):
    """Content was readable but not usable (cardinality, missing fields, paths)."""


class RainConfigLoadError(RainConfigError):
    """The rainconfig file itself is unreadable or invalid."""


@dataclass(frozen=True)
class SkippedItem:
    stage: str
    item: str
    error: str

    def as_dict(self) -> dict[str, str]:
        return {"stage": self.stage, "item": self.item, "error": self.error}


def recover(
    policy: ErrorPolicy,
    error: RainConfigError,
    *,
    stage: str,
    item: Any,
    skipped: list[SkippedItem] | None = None,
) -> None:
    """Raise ``error`` under STRICT; log and record it under LENIENT."""
    if policy is ErrorPolicy.STRICT:
        raise error
    logger.warning("rainconfig item skipped stage=%s item=%s error=%s", stage, item, error)
    if skipped is not None:
        skipped.append(SkippedItem(stage=stage, item=str(item), error=str(error)))
