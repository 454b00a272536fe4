"""rainconfig: workspace configuration and meta store building."""

from .artifacts import ArtifactBytecode, BytecodePresence, read_artifact_bytecode
from .builder import BuildReport, RainConfigStoreBuilder, build, build_store, force_build_store
from .config import DeployerConfig, MetaEntry, MetaKind, RainConfig, load_rainconfig, parse_rainconfig
from .deployer import assemble_deployer
from .errors import (
    ErrorPolicy,
    RainConfigDecodeError,
    RainConfigError,
    RainConfigIoError,
    RainConfigLoadError,
    RainConfigSemanticError,
)
from .meta_loader import load_meta, load_metas
from .scanner import DotrainFile, scan_dotrain_files, scan_included

__all__ = [
    "ArtifactBytecode",
    "BuildReport",
    "BytecodePresence",
    "DeployerConfig",
    "DotrainFile",
    "ErrorPolicy",
    "MetaEntry",
    "MetaKind",
    "RainConfig",
    "RainConfigDecodeError",
    "RainConfigError",
    "RainConfigIoError",
    "RainConfigLoadError",
    "RainConfigSemanticError",
    "RainConfigStoreBuilder",
    "assemble_deployer",
    "build",
    "build_store",
    "force_build_store",
    "load_meta",
    "load_metas",
    "load_rainconfig",
    "parse_rainconfig",
    "read_artifact_bytecode",
    "scan_dotrain_files",
    "scan_included",
]
