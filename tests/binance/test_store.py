#!/usr/bin/env python3
from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import pytest

from futures_dataset.binance.errors import StorageError
from futures_dataset.binance.series import Record
from futures_dataset.binance.store import RecordStore, is_header_line


def rec(ts: int, v: str) -> Record:
    return Record(timestamp=ts, values=(("v", Decimal(v)),))


def test_open_or_create_makes_dirs_and_empty_file(tmp_path: Path):
    store = RecordStore(tmp_path / "nested" / "dir" / "series.csv")
    store.open_or_create()
    assert store.path.exists()
    assert store.path.read_text() == ""

    # Existing content is left alone
    store.path.write_text("timestamp,v\n1,1")
    store.open_or_create()
    assert store.path.read_text() == "timestamp,v\n1,1"


def test_open_or_create_fails_when_dir_is_a_file(tmp_path: Path):
    blocker = tmp_path / "blocker"
    blocker.write_text("x")
    with pytest.raises(StorageError):
        RecordStore(blocker / "series.csv").open_or_create()


def test_load_empty_uses_genesis(tmp_path: Path):
    store = RecordStore(tmp_path / "s.csv")
    store.open_or_create()
    loaded = store.load(genesis=42)
    assert loaded.resume_timestamp == 42
    assert loaded.text == ""
    assert loaded.rows == 0


def test_load_resumes_from_last_line(tmp_path: Path):
    path = tmp_path / "s.csv"
    path.write_text("timestamp,v\n100,1\n200,2\n300,3\n")
    loaded = RecordStore(path).load(genesis=0)
    assert loaded.resume_timestamp == 300
    assert loaded.rows == 3
    assert loaded.text == "timestamp,v\n100,1\n200,2\n300,3"


def test_load_header_only_uses_genesis(tmp_path: Path):
    path = tmp_path / "s.csv"
    path.write_text("timestamp,v")
    assert RecordStore(path).load(genesis=7).resume_timestamp == 7


def test_load_rejects_corrupt_line(tmp_path: Path):
    path = tmp_path / "s.csv"
    path.write_text("timestamp,v\n100,1\n2oo,2")
    with pytest.raises(StorageError):
        RecordStore(path).load(genesis=0)


def test_append_batch_writes_header_and_skips_duplicates(tmp_path: Path):
    store = RecordStore(tmp_path / "s.csv")
    store.open_or_create()
    loaded = store.load(genesis=0)
    text, n = store.append_batch([rec(100, "1"), rec(200, "2"), rec(200, "2"), rec(300, "3")], loaded.text)
    assert n == 3
    assert text == "timestamp,v\n100,1\n200,2\n300,3"

    text2, n2 = store.append_batch([rec(300, "3"), rec(150, "9"), rec(400, "4")], text)
    assert n2 == 1
    assert text2 == text + "\n400,4"


def test_dedup_has_no_substring_false_positives(tmp_path: Path):
    path = tmp_path / "s.csv"
    path.write_text("timestamp,v\n51234,1\n51235,0.123")
    store = RecordStore(path)
    loaded = store.load(genesis=0)
    # 123 appears inside existing lines, 512340 starts with an existing timestamp
    text, n = store.append_batch([rec(512340, "2")], loaded.text)
    assert n == 1
    assert text.splitlines()[-1] == "512340,2"


def test_write_replaces_file_without_leftovers(tmp_path: Path):
    store = RecordStore(tmp_path / "s.csv")
    store.open_or_create()
    store.write("timestamp,v\n1,1")
    assert store.path.read_text() == "timestamp,v\n1,1"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["s.csv"]


def test_is_header_line():
    assert is_header_line("timestamp,funding_rate")
    assert not is_header_line("1568102400000,0.0001")


def test_append_batch_without_load_dedups_against_given_text(tmp_path: Path):
    store = RecordStore(tmp_path / "s.csv")
    existing = "timestamp,v\n100,1\n200,2"
    text, n = store.append_batch([rec(100, "1"), rec(200, "2"), rec(300, "3")], existing)
    assert n == 1
    assert text == existing + "\n300,3"


def test_trailing_blank_lines_are_dropped_before_append(tmp_path: Path):
    path = tmp_path / "s.csv"
    path.write_text("timestamp,v\n100,1\n200,2\n   \n\n")
    store = RecordStore(path)
    loaded = store.load(genesis=0)
    assert loaded.text == "timestamp,v\n100,1\n200,2"
    assert loaded.resume_timestamp == 200

    text, n = store.append_batch([rec(300, "3")], loaded.text)
    store.write(text)
    assert n == 1
    assert path.read_text().splitlines() == ["timestamp,v", "100,1", "200,2", "300,3"]
