"""Records held by the meta store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .hashing import encode_hex


@dataclass(frozen=True)
class DeployerRecord:
    """Everything needed to reproduce an ExpressionDeployer on a local evm.

    ``bytecode`` is the deployer's creation bytecode; the parser, store and
    interpreter fields hold deployed bytecode. ``bytecode_meta_hash`` is the
    hash of the deployer's deployed bytecode wrapped in a meta envelope and
    is the key the record is stored under.
    """

    meta_hash: bytes
    meta_bytes: bytes
    bytecode: bytes
    parser_bytecode: bytes
    store_bytecode: bytes
    interpreter_bytecode: bytes
    bytecode_meta_hash: bytes
    tx_hash: bytes

    def as_dict(self) -> dict[str, Any]:
        return {
            "meta_hash": encode_hex(self.meta_hash),
            "meta_bytes": encode_hex(self.meta_bytes),
            "bytecode": encode_hex(self.bytecode),
            "parser_bytecode": encode_hex(self.parser_bytecode),
            "store_bytecode": encode_hex(self.store_bytecode),
            "interpreter_bytecode": encode_hex(self.interpreter_bytecode),
            "bytecode_meta_hash": encode_hex(self.bytecode_meta_hash),
            "tx_hash": encode_hex(self.tx_hash),
        }
