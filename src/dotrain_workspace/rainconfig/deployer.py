"""Assembly of ExpressionDeployer records from rainconfig deployer entries."""

from __future__ import annotations

import logging

from dotrain_workspace.meta_store.envelope import expression_deployer_bytecode_envelope
from dotrain_workspace.meta_store.hashing import HexDecodeError, decode_hex, encode_hex
from dotrain_workspace.meta_store.models import DeployerRecord

from .artifacts import read_artifact_bytecode
from .config import DeployerConfig
from .errors import ErrorPolicy, RainConfigDecodeError, RainConfigSemanticError
from .meta_loader import LoadedMeta, load_meta


logger = logging.getLogger("dotrain_workspace.rainconfig.deployer")


def assemble_deployer(key: str, config: DeployerConfig) -> DeployerRecord:
    """Build the full record for one deployer or raise; never returns a partial record.

    The construction meta is always resolved STRICT, whatever policy the
    surrounding build runs under.
    """
    metas: list[LoadedMeta] = []
    load_meta(config.construction_meta, metas, ErrorPolicy.STRICT)
    if len(metas) != 1:
        raise RainConfigSemanticError(
            "CONSTRUCTION_META_AMBIGUOUS",
            path=config.construction_meta.path,
            detail=f"ambiguous construction meta ({len(metas)} entries)",
        )
    meta_hash, meta_bytes = metas[0]

    expression_deployer = read_artifact_bytecode(config.expression_deployer)
    bytecode = expression_deployer.require_creation("expression deployer")
    deployed = expression_deployer.require_deployed("expression deployer")
    bytecode_meta_hash = expression_deployer_bytecode_envelope(deployed).hash()

    parser_bytecode = read_artifact_bytecode(config.parser).require_deployed("parser")
    store_bytecode = read_artifact_bytecode(config.store).require_deployed("store")
    interpreter_bytecode = read_artifact_bytecode(config.interpreter).require_deployed("interpreter")

    try:
        tx_hash = decode_hex(key)
    except HexDecodeError as exc:
        raise RainConfigDecodeError("DEPLOYER_KEY_INVALID", path=key, detail=exc) from exc

    record = DeployerRecord(
        meta_hash=meta_hash,
        meta_bytes=meta_bytes,
        bytecode=bytecode,
        parser_bytecode=parser_bytecode,
        store_bytecode=store_bytecode,
        interpreter_bytecode=interpreter_bytecode,
        bytecode_meta_hash=bytecode_meta_hash,
        tx_hash=tx_hash,
    )
    logger.debug(
        "rainconfig deployer assembled key=%s bytecode_meta_hash=%s",
        key,
        encode_hex(bytecode_meta_hash),
    )
    return record
