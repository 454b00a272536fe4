"""Discovery of .rain source files under included directories."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
from typing import Iterable

from .errors import (
    ErrorPolicy,
    RainConfigDecodeError,
    RainConfigIoError,
    SkippedItem,
    recover,
)


logger = logging.getLogger("dotrain_workspace.rainconfig.scanner")

DOTRAIN_EXTENSION = ".rain"


@dataclass(frozen=True)
class DotrainFile:
    path: Path
    text: str


def scan_dotrain_files(
    root: Path,
    policy: ErrorPolicy,
    *,
    skipped: list[SkippedItem] | None = None,
) -> list[DotrainFile]:
    """Depth-first walk of ``root`` collecting every ``.rain`` file.

    Walks with an explicit stack. Entries of a directory are visited in name
    order, so the result is deterministic for a given tree. Under LENIENT a
    directory that cannot be listed drops its whole subtree and an
    unreadable file drops only itself.
    """
    found: list[DotrainFile] = []
    stack: list[Path] = [Path(root)]
    while stack:
        directory = stack.pop()
        try:
            with os.scandir(directory) as handle:
                entries = sorted(handle, key=lambda entry: entry.name)
        except OSError as exc:
            recover(
                policy,
                RainConfigIoError("DIRECTORY_UNREADABLE", path=directory, detail=exc.strerror or exc),
                stage="include",
                item=directory,
                skipped=skipped,
            )
            continue

        subdirs: list[Path] = []
        for entry in entries:
            path = Path(entry.path)
            try:
                is_dir = entry.is_dir()
                is_file = not is_dir and entry.is_file()
            except OSError as exc:
                recover(
                    policy,
                    RainConfigIoError("ENTRY_UNREADABLE", path=path, detail=exc.strerror or exc),
                    stage="include",
                    item=path,
                    skipped=skipped,
                )
                continue
            if is_dir:
                subdirs.append(path)
            elif is_file and path.suffix == DOTRAIN_EXTENSION:
                dotrain = _read_dotrain(path, policy, skipped)
                if dotrain is not None:
                    found.append(dotrain)
        # reversed so the first subdirectory by name is walked first
        stack.extend(reversed(subdirs))
    logger.debug("rainconfig scan root=%s files=%d", root, len(found))
    return found


def scan_included(
    roots: Iterable[Path],
    policy: ErrorPolicy,
    *,
    skipped: list[SkippedItem] | None = None,
) -> list[DotrainFile]:
    found: list[DotrainFile] = []
    for root in roots:
        found.extend(scan_dotrain_files(root, policy, skipped=skipped))
    return found


def _read_dotrain(path: Path, policy: ErrorPolicy, skipped: list[SkippedItem] | None) -> DotrainFile | None:
    try:
        data = path.read_bytes()
    except OSError as exc:
        recover(
            policy,
            RainConfigIoError("DOTRAIN_UNREADABLE", path=path, detail=exc.strerror or exc),
            stage="include",
            item=path,
            skipped=skipped,
        )
        return None
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        recover(
            policy,
            RainConfigDecodeError("DOTRAIN_NOT_UTF8", path=path, detail=exc.reason),
            stage="include",
            item=path,
            skipped=skipped,
        )
        return None
    return DotrainFile(path=path, text=text)
