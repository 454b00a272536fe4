"""In-memory content-addressed meta store."""

from __future__ import annotations

import logging
from typing import Iterable

from .envelope import MetaEnvelope, dotrain_envelope
from .hashing import encode_hex, keccak256
from .models import DeployerRecord


logger = logging.getLogger("dotrain_workspace.meta_store.store")


class MetaStoreError(RuntimeError):
    pass


class MetaStore:
    """Hash-addressed payload cache plus dotrain, deployer and subgraph tables."""

    def __init__(self) -> None:
        self._cache: dict[bytes, bytes] = {}
        self._dotrains: dict[str, bytes] = {}
        self._deployers: dict[bytes, DeployerRecord] = {}
        self._subgraphs: list[str] = []

    def __len__(self) -> int:
        return len(self._cache)

    @property
    def subgraphs(self) -> tuple[str, ...]:
        return tuple(self._subgraphs)

    def add_subgraphs(self, subgraphs: Iterable[str]) -> None:
        for url in subgraphs:
            if url not in self._subgraphs:
                self._subgraphs.append(url)

    def update_with(self, hash_: bytes, payload: bytes) -> bool:
        """Insert ``payload`` under ``hash_``; returns False when already present."""
        key = bytes(hash_)
        data = bytes(payload)
        if keccak256(data) != key:
            raise MetaStoreError(f"HASH_MISMATCH:{encode_hex(key)}")
        if key in self._cache:
            return False
        self._cache[key] = data
        return True

    def get(self, hash_: bytes) -> bytes | None:
        return self._cache.get(bytes(hash_))

    def set_dotrain(self, text: str, uri: str, keep_old: bool) -> tuple[bytes, bytes | None]:
        """Register dotrain ``text`` under ``uri``.

        Returns the new content hash and the hash previously bound to ``uri``
        (if any). With ``keep_old`` False the previous payload is evicted
        from the cache unless another uri still refers to it.
        """
        envelope = dotrain_envelope(text)
        data = envelope.cbor_encode()
        new_hash = keccak256(data)
        old_hash = self._dotrains.get(uri)
        self._cache.setdefault(new_hash, data)
        self._dotrains[uri] = new_hash
        if old_hash is not None and old_hash != new_hash and not keep_old:
            if old_hash not in self._dotrains.values():
                self._cache.pop(old_hash, None)
        return new_hash, old_hash

    def dotrain_uris(self) -> tuple[str, ...]:
        return tuple(self._dotrains)

    def get_dotrain_hash(self, uri: str) -> bytes | None:
        return self._dotrains.get(uri)

    def get_dotrain_text(self, uri: str) -> str | None:
        hash_ = self._dotrains.get(uri)
        if hash_ is None:
            return None
        data = self._cache.get(hash_)
        if data is None:
            return None
        return MetaEnvelope.cbor_decode(data).payload.decode("utf-8")

    def set_deployer(self, record: DeployerRecord) -> DeployerRecord:
        self._cache.setdefault(bytes(record.meta_hash), bytes(record.meta_bytes))
        previous = self._deployers.get(record.bytecode_meta_hash)
        if previous is not None and previous != record:
            logger.warning(
                "meta store deployer replaced bytecode_meta_hash=%s",
                encode_hex(record.bytecode_meta_hash),
            )
        self._deployers[bytes(record.bytecode_meta_hash)] = record
        return record

    def get_deployer(self, hash_: bytes) -> DeployerRecord | None:
        return self._deployers.get(bytes(hash_))

    def deployer_hashes(self) -> tuple[bytes, ...]:
        return tuple(self._deployers)
