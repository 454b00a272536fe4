from __future__ import annotations

from pathlib import Path

import pytest

from dotrain_workspace.meta_store.hashing import keccak256
from dotrain_workspace.rainconfig.config import MetaEntry
from dotrain_workspace.rainconfig.errors import (
    ErrorPolicy,
    RainConfigDecodeError,
    RainConfigIoError,
    SkippedItem,
)
from dotrain_workspace.rainconfig.meta_loader import load_meta, load_metas, read_meta_bytes


PAYLOAD = bytes.fromhex("ff0a89c674ee7874a3005820deadbeef")


def test_binary_and_hex_entries_hash_identically(tmp_path: Path) -> None:
    binary = tmp_path / "meta.bin"
    binary.write_bytes(PAYLOAD)
    hex_file = tmp_path / "meta.hex"
    hex_file.write_text("0x" + PAYLOAD.hex() + "\n", encoding="utf-8")

    loaded: list[tuple[bytes, bytes]] = []
    load_meta(MetaEntry.binary_file(binary), loaded, ErrorPolicy.STRICT)
    load_meta(MetaEntry.hex_file(hex_file), loaded, ErrorPolicy.STRICT)

    assert loaded[0] == loaded[1]
    assert loaded[0] == (keccak256(PAYLOAD), PAYLOAD)
    assert len(loaded[0][0]) == 32


def test_hex_without_prefix_is_accepted(tmp_path: Path) -> None:
    hex_file = tmp_path / "meta.hex"
    hex_file.write_text(PAYLOAD.hex().upper(), encoding="utf-8")
    assert read_meta_bytes(MetaEntry.hex_file(hex_file)) == PAYLOAD


def test_invalid_hex_strict_raises_with_path(tmp_path: Path) -> None:
    hex_file = tmp_path / "broken.hex"
    hex_file.write_text("0xzz11", encoding="utf-8")
    with pytest.raises(RainConfigDecodeError) as excinfo:
        load_meta(MetaEntry.hex_file(hex_file), [], ErrorPolicy.STRICT)
    assert excinfo.value.code == "META_HEX_INVALID"
    assert "broken.hex" in str(excinfo.value)


def test_odd_length_hex_is_rejected(tmp_path: Path) -> None:
    hex_file = tmp_path / "odd.hex"
    hex_file.write_text("0xabc", encoding="utf-8")
    with pytest.raises(RainConfigDecodeError):
        read_meta_bytes(MetaEntry.hex_file(hex_file))


def test_missing_binary_strict_raises_io_error(tmp_path: Path) -> None:
    with pytest.raises(RainConfigIoError):
        load_meta(MetaEntry.binary_file(tmp_path / "absent.bin"), [], ErrorPolicy.STRICT)


def test_lenient_skips_only_the_failing_entry(tmp_path: Path) -> None:
    good = tmp_path / "good.bin"
    good.write_bytes(PAYLOAD)
    bad = tmp_path / "bad.hex"
    bad.write_text("not hex", encoding="utf-8")
    skipped: list[SkippedItem] = []

    loaded = load_metas(
        [
            MetaEntry.hex_file(bad),
            MetaEntry.binary_file(tmp_path / "absent.bin"),
            MetaEntry.binary_file(good),
        ],
        ErrorPolicy.LENIENT,
        skipped=skipped,
    )

    assert loaded == [(keccak256(PAYLOAD), PAYLOAD)]
    assert [item.stage for item in skipped] == ["meta", "meta"]
    assert "bad.hex" in skipped[0].item


def test_strict_load_metas_stops_at_first_error(tmp_path: Path) -> None:
    good = tmp_path / "good.bin"
    good.write_bytes(PAYLOAD)
    with pytest.raises(RainConfigIoError):
        load_metas(
            [MetaEntry.binary_file(tmp_path / "absent.bin"), MetaEntry.binary_file(good)],
            ErrorPolicy.STRICT,
        )
