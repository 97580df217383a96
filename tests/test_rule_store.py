"""
Tests for loading rule files into a RuleStore.
"""
import pytest

from hba_checker.core.errors import (
    InvalidMethodError,
    LoadError,
    RuleFileIOError,
    UnparseableFileError,
    UnsupportedSyntaxError,
)
from hba_checker.models.rule_entry import CommentEntry, LocalEntry, NetworkEntry
from hba_checker.services.rule_store import RuleStore, load


SAMPLE_HBA = [
    "# TYPE  DATABASE    USER        CIDR-ADDRESS          METHOD",
    "",
    '# "local" is for Unix domain socket connections only',
    "local   all         postgres                          ident sameuser",
    "local   all         all                               ident sameuser",
    "# IPv4 local connections:",
    "host    all         all         127.0.0.1/32          md5",
    "# IPv6 local connections:",
    "host    all         all         ::1/128               md5",
    "hostssl test        nobody      10.0.0.0 255.255.255.0 md5",
]


def test_load_keeps_every_line_in_order(write_hba):
    path = write_hba(*SAMPLE_HBA)
    store = load(path)

    assert isinstance(store, RuleStore)
    assert store.path == path
    assert len(store) == len(SAMPLE_HBA)
    assert [e.raw_line for e in store] == SAMPLE_HBA
    assert [type(e) for e in store.rules] == [
        LocalEntry,
        LocalEntry,
        NetworkEntry,
        NetworkEntry,
        NetworkEntry,
    ]


def test_load_accepts_str_paths(write_hba):
    path = write_hba("local all all trust")
    store = load(str(path))
    assert len(store.rules) == 1


def test_empty_file_gives_empty_store(tmp_path):
    path = tmp_path / "pg_hba.conf"
    path.write_text("", encoding="utf-8")
    store = load(path)
    assert len(store) == 0
    assert store.rules == ()


def test_comment_only_file(write_hba):
    store = load(write_hba("# nothing here", ""))
    assert all(isinstance(e, CommentEntry) for e in store)
    assert store.rules == ()


def test_missing_file(tmp_path):
    path = tmp_path / "missing.conf"
    with pytest.raises(RuleFileIOError) as exc_info:
        load(path)
    assert exc_info.value.path == path
    assert str(path) in str(exc_info.value)
    assert isinstance(exc_info.value.cause, FileNotFoundError)


def test_directory_is_unreadable(tmp_path):
    with pytest.raises(RuleFileIOError):
        load(tmp_path)


def test_undecodable_file(tmp_path):
    path = tmp_path / "pg_hba.conf"
    path.write_bytes(b"local all all trust\n\xff\xfe\n")
    with pytest.raises(RuleFileIOError):
        load(path)


def test_one_bad_line_rejects_the_whole_file(write_hba):
    path = write_hba(
        "local all all trust",
        "host all all 10.0.0.0/8 md5",
        "local all +admins md5",
        "host all all ::1/128 md5",
    )
    with pytest.raises(UnparseableFileError) as exc_info:
        load(path)

    error = exc_info.value
    assert isinstance(error, LoadError)
    assert error.path == path
    assert error.line_number == 3
    assert error.offending_line == "local all +admins md5"
    assert isinstance(error.cause, UnsupportedSyntaxError)
    assert str(path) in str(error)


def test_first_failure_wins(write_hba):
    path = write_hba("local all all bogus", "host all all nonsense md5")
    with pytest.raises(UnparseableFileError) as exc_info:
        load(path)
    assert exc_info.value.line_number == 1
    assert isinstance(exc_info.value.cause, InvalidMethodError)


def test_store_entries_are_immutable(write_hba):
    store = load(write_hba("local all all trust"))
    assert isinstance(store.entries, tuple)
    with pytest.raises(Exception):
        store.entries[0].database = "other"
