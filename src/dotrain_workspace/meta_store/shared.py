"""Shared-read / exclusive-write ownership of a built meta store."""

from __future__ import annotations

from contextlib import contextmanager
import threading
from typing import Iterator

from .models import DeployerRecord
from .store import MetaStore


class ReadWriteLock:
    """Many concurrent readers or a single writer; waiting writers block new readers."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class MetaStoreReader:
    """Read-only view handed out under the shared lock."""

    def __init__(self, store: MetaStore) -> None:
        self._store = store

    def __len__(self) -> int:
        return len(self._store)

    @property
    def subgraphs(self) -> tuple[str, ...]:
        return self._store.subgraphs

    def get(self, hash_: bytes) -> bytes | None:
        return self._store.get(hash_)

    def dotrain_uris(self) -> tuple[str, ...]:
        return self._store.dotrain_uris()

    def get_dotrain_hash(self, uri: str) -> bytes | None:
        return self._store.get_dotrain_hash(uri)

    def get_dotrain_text(self, uri: str) -> str | None:
        return self._store.get_dotrain_text(uri)

    def get_deployer(self, hash_: bytes) -> DeployerRecord | None:
        return self._store.get_deployer(hash_)

    def deployer_hashes(self) -> tuple[bytes, ...]:
        return self._store.deployer_hashes()


class SharedMetaStore:
    def __init__(self, store: MetaStore | None = None) -> None:
        self._store = store if store is not None else MetaStore()
        self._lock = ReadWriteLock()

    @contextmanager
    def read(self) -> Iterator[MetaStoreReader]:
        with self._lock.read_locked():
            yield MetaStoreReader(self._store)

    @contextmanager
    def write(self) -> Iterator[MetaStore]:
        with self._lock.write_locked():
            yield self._store
