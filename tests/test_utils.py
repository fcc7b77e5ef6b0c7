"""Unit tests for utils module."""

from pathlib import Path

import pytest

from sqlcompare.utils import md_anchor, read_schema_text, write_text


def test_read_schema_text_missing_raises(tmp_path: Path) -> None:
    with pytest.raises(SystemExit, match="schema file not found"):
        read_schema_text(tmp_path / "missing.sql")


def test_read_schema_text_directory_raises(tmp_path: Path) -> None:
    with pytest.raises(SystemExit, match="schema file not found"):
        read_schema_text(tmp_path)


def test_write_text_normalizes_newlines(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "file.txt"
    write_text(path, "a\r\nb\rc")
    assert read_schema_text(path) == "a\nb\nc"


def test_md_anchor() -> None:
    assert md_anchor("Hello World!") == "hello-world"
    assert md_anchor("WRONG_COLUMN_TYPE") == "wrong_column_type"
    assert md_anchor("Table list (raw)") == "table-list-raw"
