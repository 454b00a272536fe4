"""Meta envelope (rain meta document item) with a canonical CBOR form."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any

import cbor2

from .hashing import keccak256


class KnownMagic(IntEnum):
    DOTRAIN_V1 = 0xFFDAC2F2F37BE894
    EXPRESSION_DEPLOYER_V2_BYTECODE_V1 = 0xFFDB988A8CD04D32


class ContentType(str, Enum):
    OCTET_STREAM = "application/octet-stream"


class ContentEncoding(str, Enum):
    DEFLATE = "deflate"


class ContentLanguage(str, Enum):
    EN = "en"


# CBOR map keys of a meta item.
_PAYLOAD = 0
_MAGIC = 1
_CONTENT_TYPE = 2
_CONTENT_ENCODING = 3
_CONTENT_LANGUAGE = 4


class MetaEnvelopeError(ValueError):
    pass


@dataclass(frozen=True)
class MetaEnvelope:
    payload: bytes
    magic: KnownMagic
    content_type: ContentType = ContentType.OCTET_STREAM
    content_encoding: ContentEncoding | None = None
    content_language: ContentLanguage | None = None

    def as_map(self) -> dict[int, Any]:
        item: dict[int, Any] = {
            _PAYLOAD: bytes(self.payload),
            _MAGIC: int(self.magic),
            _CONTENT_TYPE: self.content_type.value,
        }
        if self.content_encoding is not None:
            item[_CONTENT_ENCODING] = self.content_encoding.value
        if self.content_language is not None:
            item[_CONTENT_LANGUAGE] = self.content_language.value
        return item

    def cbor_encode(self) -> bytes:
        return cbor2.dumps(self.as_map(), canonical=True)

    def hash(self) -> bytes:
        return keccak256(self.cbor_encode())

    @classmethod
    def cbor_decode(cls, data: bytes) -> "MetaEnvelope":
        try:
            item = cbor2.loads(data)
        except Exception as exc:
            raise MetaEnvelopeError(f"ENVELOPE_CBOR_INVALID:{exc}") from exc
        if not isinstance(item, dict):
            raise MetaEnvelopeError("ENVELOPE_NOT_A_MAP")
        try:
            return cls(
                payload=bytes(item[_PAYLOAD]),
                magic=KnownMagic(item[_MAGIC]),
                content_type=ContentType(item[_CONTENT_TYPE]),
                content_encoding=_optional(ContentEncoding, item.get(_CONTENT_ENCODING)),
                content_language=_optional(ContentLanguage, item.get(_CONTENT_LANGUAGE)),
            )
        except (KeyError, ValueError, TypeError) as exc:
            raise MetaEnvelopeError(f"ENVELOPE_FIELDS_INVALID:{exc}") from exc


def expression_deployer_bytecode_envelope(deployed_bytecode: bytes) -> MetaEnvelope:
    return MetaEnvelope(
        payload=bytes(deployed_bytecode),
        magic=KnownMagic.EXPRESSION_DEPLOYER_V2_BYTECODE_V1,
        content_type=ContentType.OCTET_STREAM,
    )


def dotrain_envelope(text: str) -> MetaEnvelope:
    return MetaEnvelope(
        payload=text.encode("utf-8"),
        magic=KnownMagic.DOTRAIN_V1,
        content_type=ContentType.OCTET_STREAM,
    )


def _optional(kind: type[Enum], value: Any) -> Any:
    if value is None:
        return None
    return kind(value)
