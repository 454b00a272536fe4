"""Content-addressed meta store consumed by the dotrain composer."""

from .envelope import ContentType, KnownMagic, MetaEnvelope
from .hashing import decode_hex, encode_hex, keccak256
from .models import DeployerRecord
from .shared import MetaStoreReader, SharedMetaStore
from .store import MetaStore, MetaStoreError

__all__ = [
    "ContentType",
    "DeployerRecord",
    "KnownMagic",
    "MetaEnvelope",
    "MetaStore",
    "MetaStoreError",
    "MetaStoreReader",
    "SharedMetaStore",
    "decode_hex",
    "encode_hex",
    "keccak256",
]
