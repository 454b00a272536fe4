"""Loading of local meta files into hash-addressed payloads."""

from __future__ import annotations

import logging
from typing import Iterable

from dotrain_workspace.meta_store.hashing import HexDecodeError, decode_hex, keccak256

from .config import MetaEntry, MetaKind
from .errors import (
    ErrorPolicy,
    RainConfigDecodeError,
    RainConfigError,
    RainConfigIoError,
    SkippedItem,
    recover,
)


logger = logging.getLogger("dotrain_workspace.rainconfig.meta_loader")

LoadedMeta = tuple[bytes, bytes]


def read_meta_bytes(entry: MetaEntry) -> bytes:
    """Raw meta bytes of ``entry``; hex files are decoded after trimming whitespace."""
    path = entry.path
    if entry.kind is MetaKind.BINARY:
        try:
            return path.read_bytes()
        except OSError as exc:
            raise RainConfigIoError("META_UNREADABLE", path=path, detail=exc.strerror or exc) from exc
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RainConfigIoError("META_UNREADABLE", path=path, detail=exc.strerror or exc) from exc
    except UnicodeDecodeError as exc:
        raise RainConfigDecodeError("META_NOT_UTF8", path=path, detail=exc.reason) from exc
    try:
        return decode_hex(text.strip())
    except HexDecodeError as exc:
        raise RainConfigDecodeError("META_HEX_INVALID", path=path, detail=exc) from exc


def load_meta(
    entry: MetaEntry,
    out: list[LoadedMeta],
    policy: ErrorPolicy,
    *,
    skipped: list[SkippedItem] | None = None,
) -> None:
    """Append ``(keccak256(bytes), bytes)`` for ``entry`` to ``out``."""
    try:
        data = read_meta_bytes(entry)
    except RainConfigError as exc:
        recover(policy, exc, stage="meta", item=entry.path, skipped=skipped)
        return
    out.append((keccak256(data), data))


def load_metas(
    entries: Iterable[MetaEntry],
    policy: ErrorPolicy,
    *,
    skipped: list[SkippedItem] | None = None,
) -> list[LoadedMeta]:
    loaded: list[LoadedMeta] = []
    for entry in entries:
        load_meta(entry, loaded, policy, skipped=skipped)
    logger.debug("rainconfig metas loaded=%d", len(loaded))
    return loaded
