"""
utils
=====

Small file and text helpers used by the CLI and the report renderers.

This module intentionally contains only low-level helpers that are safe to
import from anywhere (no parsing, no heavy imports).
"""

from __future__ import annotations

import re
from pathlib import Path


def read_schema_text(path: Path) -> str:
    """Read a schema dump as UTF-8 text.

    Parameters
    ----------
    path:
        File path.

    Returns
    -------
    str
        File contents. Undecodable bytes are replaced.

    Raises
    ------
    SystemExit
        If the file does not exist or cannot be read.
    """
    if not path.is_file():
        raise SystemExit(f"ERROR: schema file not found: {path}")
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise SystemExit(f"ERROR: error reading schema file {path}: {exc}") from exc


def write_text(path: Path, content: str) -> None:
    """Write UTF-8 text to *path* with normalized newlines.

    Parameters
    ----------
    path:
        File path to write. Parent directories are created.
    content:
        Text content.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    content = content.replace("\r\n", "\n").replace("\r", "\n")
    path.write_text(content, encoding="utf-8")


def md_anchor(title: str) -> str:
    """Create an approximate GitHub-style markdown anchor from a section title."""
    return re.sub(r"[^a-z0-9_-]+", "-", title.lower()).strip("-")
