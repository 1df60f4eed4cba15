"""BootstrapStore の鮮度判定と書き込みのテスト。"""

from __future__ import annotations

import os
from pathlib import Path
from types import SimpleNamespace

import pytest

from rdapboot.cache import BootstrapStore, entry_timestamp, parse_document
from rdapboot.enums import CacheStatus, TimestampSource
from rdapboot.errors import BootstrapIOError, BootstrapParseError
from rdapboot.paths import CacheSlot

WEEK = 7 * 24 * 60 * 60
BASE = 1_700_000_000


def _store(tmp_path: Path, now: float) -> BootstrapStore:
    return BootstrapStore(
        root=tmp_path,
        freshness_seconds=WEEK,
        timestamp_source=TimestampSource.MODIFIED,
        clock=lambda: now,
    )


def _write_entry(path: Path, text: str, mtime: int) -> None:
    path.write_text(text, encoding="utf-8")
    os.utime(path, (mtime, mtime))


def test_inspect_missing_slot(tmp_path: Path) -> None:
    store = _store(tmp_path, BASE)

    state = store.inspect(store.slot("dns.json"))

    assert state.status == CacheStatus.MISSING
    assert state.created_at is None
    assert state.age_seconds is None


def test_inspect_window_boundary_is_fresh(tmp_path: Path) -> None:
    _write_entry(tmp_path / "dns.json", "{}", BASE)
    slot = CacheSlot.for_filename(tmp_path, "dns.json")

    at_boundary = _store(tmp_path, BASE + WEEK).inspect(slot)
    past_boundary = _store(tmp_path, BASE + WEEK + 1).inspect(slot)

    assert at_boundary.status == CacheStatus.FRESH
    assert at_boundary.age_seconds == WEEK
    assert past_boundary.status == CacheStatus.STALE


def test_tmp_file_alone_is_not_a_cache_entry(tmp_path: Path) -> None:
    _write_entry(tmp_path / "dns.json.tmp", '{"a": 1}', BASE)
    store = _store(tmp_path, BASE)

    lookup = store.lookup(store.slot("dns.json"))

    assert lookup.hit is False
    assert lookup.state.status == CacheStatus.MISSING
    assert lookup.error is None


def test_lookup_reports_read_error_for_fresh_corrupt_entry(tmp_path: Path) -> None:
    _write_entry(tmp_path / "dns.json", "{", BASE)
    store = _store(tmp_path, BASE + 10)

    lookup = store.lookup(store.slot("dns.json"))

    assert lookup.hit is False
    assert lookup.state.status == CacheStatus.FRESH
    assert isinstance(lookup.error, BootstrapParseError)
    assert lookup.error.origin == "cache"
    assert (tmp_path / "dns.json").read_text(encoding="utf-8") == "{"


def test_lookup_stale_entry_is_not_read(tmp_path: Path) -> None:
    _write_entry(tmp_path / "dns.json", "{", BASE)
    store = _store(tmp_path, BASE + WEEK + 1)

    lookup = store.lookup(store.slot("dns.json"))

    assert lookup.state.status == CacheStatus.STALE
    assert lookup.error is None


def test_lookup_returns_json_null_as_hit(tmp_path: Path) -> None:
    _write_entry(tmp_path / "dns.json", "null", BASE)
    store = _store(tmp_path, BASE)

    lookup = store.lookup(store.slot("dns.json"))

    assert lookup.hit is True
    assert lookup.document is None


def test_read_directory_is_io_error(tmp_path: Path) -> None:
    (tmp_path / "dns.json").mkdir()
    store = _store(tmp_path, BASE)

    with pytest.raises(BootstrapIOError) as excinfo:
        store.read(store.slot("dns.json"))

    assert excinfo.value.context.path == tmp_path / "dns.json"


def test_commit_writes_text_verbatim(tmp_path: Path) -> None:
    store = _store(tmp_path, BASE)
    slot = store.slot("dns.json")
    text = '{\r\n  "description": "日本語"\r\n}'

    store.commit(slot, text)

    assert slot.final_path.read_bytes() == text.encode("utf-8")
    assert not slot.tmp_path.exists()


def test_commit_into_unwritable_root_is_io_error(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    store = BootstrapStore(root=blocker / "cache", freshness_seconds=WEEK)

    with pytest.raises(BootstrapIOError):
        store.commit(store.slot("dns.json"), "{}")


def test_parse_document_wraps_decode_errors() -> None:
    with pytest.raises(BootstrapParseError) as excinfo:
        parse_document("[1,", origin="server_response", source_url="https://example.invalid/x")

    assert excinfo.value.context.source_url == "https://example.invalid/x"


def test_entry_timestamp_prefers_birthtime() -> None:
    st = SimpleNamespace(st_birthtime=5.0, st_mtime=10.0)

    assert entry_timestamp(st, TimestampSource.AUTO) == 5.0  # type: ignore[arg-type]
    assert entry_timestamp(st, TimestampSource.CREATED) == 5.0  # type: ignore[arg-type]
    assert entry_timestamp(st, TimestampSource.MODIFIED) == 10.0  # type: ignore[arg-type]


def test_entry_timestamp_without_birthtime() -> None:
    st = SimpleNamespace(st_mtime=10.0)

    assert entry_timestamp(st, TimestampSource.AUTO) == 10.0  # type: ignore[arg-type]
    assert entry_timestamp(st, TimestampSource.CREATED) is None  # type: ignore[arg-type]
    assert entry_timestamp(st, TimestampSource.MODIFIED) == 10.0  # type: ignore[arg-type]
