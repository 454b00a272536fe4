"""Store builder: turns a rainconfig into a populated, shared meta store."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Any

from dotrain_workspace.meta_store.models import DeployerRecord
from dotrain_workspace.meta_store.shared import SharedMetaStore
from dotrain_workspace.meta_store.store import MetaStore

from .config import RainConfig
from .deployer import assemble_deployer
from .errors import ErrorPolicy, RainConfigError, RainConfigSemanticError, SkippedItem, recover
from .meta_loader import load_metas
from .scanner import scan_included


logger = logging.getLogger("dotrain_workspace.rainconfig.builder")


@dataclass
class BuildReport:
    policy: ErrorPolicy
    subgraphs: int = 0
    metas: int = 0
    dotrains: int = 0
    deployers: int = 0
    skipped: list[SkippedItem] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        return {
            "policy": self.policy.value,
            "subgraphs": self.subgraphs,
            "metas": self.metas,
            "dotrains": self.dotrains,
            "deployers": self.deployers,
            "skipped": [item.as_dict() for item in self.skipped],
        }


class RainConfigStoreBuilder:
    def __init__(self, config: RainConfig) -> None:
        self.config = config

    def build_store(self) -> SharedMetaStore:
        """Build aborting on the first error of any stage."""
        return self.build_with_report(ErrorPolicy.STRICT)[0]

    def force_build_store(self) -> SharedMetaStore:
        """Build skipping every erroneous path or item."""
        return self.build_with_report(ErrorPolicy.LENIENT)[0]

    def build_with_report(self, policy: ErrorPolicy) -> tuple[SharedMetaStore, BuildReport]:
        report = BuildReport(policy=policy)
        skipped = report.skipped
        logger.info(
            "rainconfig build start policy=%s include=%d meta=%d deployers=%d",
            policy.value,
            len(self.config.include),
            len(self.config.meta),
            len(self.config.deployers),
        )

        dotrains = scan_included(self.config.include, policy, skipped=skipped)
        metas = load_metas(self.config.meta, policy, skipped=skipped)
        deployers = self._assemble_deployers(policy, skipped)

        store = MetaStore()
        store.add_subgraphs(self.config.subgraphs)
        report.subgraphs = len(store.subgraphs)

        for hash_, data in metas:
            store.update_with(hash_, data)
        report.metas = len(metas)

        for dotrain in dotrains:
            uri = _uri_from_path(dotrain.path)
            if uri is None:
                # LENIENT drops the file without recording it as a failure
                if policy is ErrorPolicy.STRICT:
                    raise RainConfigSemanticError(
                        "DOTRAIN_URI_INVALID",
                        path=repr(dotrain.path),
                        detail="could not derive a valid utf-8 encoded URI from path",
                    )
                logger.warning("rainconfig dotrain skipped path=%r reason=uri_not_utf8", dotrain.path)
                continue
            store.set_dotrain(dotrain.text, uri, True)
            report.dotrains += 1

        while deployers:
            store.set_deployer(deployers.pop())
            report.deployers += 1

        logger.info(
            "rainconfig build done policy=%s subgraphs=%d metas=%d dotrains=%d deployers=%d skipped=%d",
            policy.value,
            report.subgraphs,
            report.metas,
            report.dotrains,
            report.deployers,
            len(skipped),
        )
        return SharedMetaStore(store), report

    def _assemble_deployers(
        self, policy: ErrorPolicy, skipped: list[SkippedItem]
    ) -> list[DeployerRecord]:
        records: list[DeployerRecord] = []
        for key, deployer in self.config.deployers.items():
            try:
                records.append(assemble_deployer(key, deployer))
            except RainConfigError as exc:
                recover(policy, exc, stage="deployer", item=key, skipped=skipped)
        return records


def build(config: RainConfig, policy: ErrorPolicy) -> SharedMetaStore:
    return RainConfigStoreBuilder(config).build_with_report(policy)[0]


def build_store(config: RainConfig) -> SharedMetaStore:
    return RainConfigStoreBuilder(config).build_store()


def force_build_store(config: RainConfig) -> SharedMetaStore:
    return RainConfigStoreBuilder(config).force_build_store()


def _uri_from_path(path: Path) -> str | None:
    text = str(path)
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return None
    return text
