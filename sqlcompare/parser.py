"""
parser
======

Tolerant parser for ``CREATE TABLE`` schema dumps.

The input is processed one line at a time:

1. :func:`tokenize` trims the line and splits it on single spaces.
2. :func:`classify_line` decides what the line is (table header, column,
   ``KEY``, ``CONSTRAINT``, ``PRIMARY``/``UNIQUE`` key, trailer...).
3. :func:`parse_schema` folds the classified lines into a read-only
   :data:`~sqlcompare.models.Schema`.

Parsing is best effort. Lines outside a table body are ignored. Lines inside
a table body that are too short for their rule are skipped and logged at
DEBUG level, unless ``strict=True`` is passed, in which case
:class:`~sqlcompare.models.SchemaParseError` is raised.

Example
-------
>>> schema = parse_schema("CREATE TABLE `users` (\\n  `id` INT NOT NULL,\\n) ENGINE=InnoDB;")
>>> schema["users"].columns["id"].other
'NOT NULL'
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Optional, Sequence

from .models import Column, Constraint, Index, Schema, SchemaParseError, Table

logger = logging.getLogger(__name__)

# First tokens that never start a column definition.
SKIP_KEYWORDS = frozenset({"PRIMARY", "KEY", "CONSTRAINT", "UNIQUE", "", "--"})

TABLE_OPTIONS_TOKEN = "ENGINE=InnoDB"

QUOTE_CHARS = '`"'


class LineKind(str, Enum):
    """Role of a single line of schema text."""

    TABLE_HEADER = "TABLE_HEADER"
    TABLE_OPTIONS = "TABLE_OPTIONS"
    TABLE_END = "TABLE_END"
    COLUMN = "COLUMN"
    INDEX = "INDEX"
    CONSTRAINT = "CONSTRAINT"
    KEY_CONSTRAINT = "KEY_CONSTRAINT"
    IGNORED = "IGNORED"


class _MalformedLine(Exception):
    """A table-body line that does not carry enough tokens for its rule."""


def normalize_newlines(text: str) -> str:
    """Return *text* with ``\\r\\n`` and ``\\r`` converted to ``\\n``."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def tokenize(line: str) -> List[str]:
    """Split a line into space-delimited tokens.

    Surrounding spaces are trimmed first. Consecutive spaces are *not*
    collapsed, so ``"a  b"`` yields ``["a", "", "b"]``.
    """
    return line.strip(" ").split(" ")


def unquote(token: str) -> str:
    """Remove identifier quoting (backticks, double quotes)."""
    return token.strip(QUOTE_CHARS)


def strip_identifier(token: str) -> str:
    """Extract a column name from a token such as ``(`name`),``.

    Commas, then opening and closing parentheses, then identifier quotes are
    stripped from both ends.
    """
    return unquote(token.strip(",").strip("(").strip(")"))


def classify_line(tokens: Sequence[str], in_table: bool) -> LineKind:
    """Classify a tokenized line.

    Parameters
    ----------
    tokens:
        Output of :func:`tokenize`.
    in_table:
        Whether a table body is currently open.

    Returns
    -------
    LineKind
        The role of the line. Anything unrecognised is ``IGNORED``.
    """
    first = tokens[0]
    second = tokens[1] if len(tokens) > 1 else None

    if first == "CREATE" and second == "TABLE":
        return LineKind.TABLE_HEADER
    if second == TABLE_OPTIONS_TOKEN:
        return LineKind.TABLE_END if first.startswith(")") else LineKind.TABLE_OPTIONS
    if not in_table:
        return LineKind.IGNORED
    if first.startswith(")"):
        return LineKind.TABLE_END
    if first not in SKIP_KEYWORDS:
        return LineKind.COLUMN
    if first == "KEY":
        return LineKind.INDEX
    if first == "CONSTRAINT":
        return LineKind.CONSTRAINT
    if first in ("PRIMARY", "UNIQUE"):
        return LineKind.KEY_CONSTRAINT
    return LineKind.IGNORED


def parse_table_name(tokens: Sequence[str]) -> str:
    """Return the table name from a ``CREATE TABLE`` header."""
    pos = 2
    if [t.upper() for t in tokens[2:5]] == ["IF", "NOT", "EXISTS"]:
        pos = 5
    if len(tokens) <= pos:
        raise _MalformedLine("table header without a name")
    name = strip_identifier(tokens[pos])
    if not name:
        raise _MalformedLine("table header without a name")
    return name


def parse_column(tokens: Sequence[str]) -> Column:
    """Parse ``name TYPE other...`` into a :class:`Column`."""
    if len(tokens) < 2:
        raise _MalformedLine("column definition without a type")
    name = unquote(tokens[0])
    if not name:
        raise _MalformedLine("column definition without a name")
    return Column(
        name=name,
        type=tokens[1].rstrip(","),
        other=" ".join(tokens[2:]).strip(","),
    )


def parse_index(tokens: Sequence[str]) -> Index:
    """Parse ``KEY name (column),`` into an :class:`Index`."""
    if len(tokens) < 3:
        raise _MalformedLine("index definition without a column")
    return Index(name=unquote(tokens[1]), column=strip_identifier(tokens[2]))


def parse_constraint(tokens: Sequence[str]) -> Constraint:
    """Parse ``CONSTRAINT name KIND KEY (column) other...``."""
    if len(tokens) < 5:
        raise _MalformedLine("constraint definition without a column")
    return Constraint(
        name=unquote(tokens[1]),
        column=strip_identifier(tokens[4]),
        kind=tokens[2],
        other=" ".join(tokens[5:]).strip(","),
    )


def parse_key_constraint(tokens: Sequence[str]) -> Constraint:
    """Parse ``PRIMARY KEY (column),`` or ``UNIQUE KEY [name] (column),``.

    The column comes from the first parenthesised token after the keyword,
    falling back to the third token. A name written before the column list
    becomes the constraint name; otherwise the name is the column name.
    """
    pos: Optional[int] = next(
        (i for i in range(1, len(tokens)) if tokens[i].startswith("(")),
        None,
    )
    if pos is None:
        if len(tokens) < 3:
            raise _MalformedLine("key definition without a column")
        pos = 2
    column = strip_identifier(tokens[pos])
    names = [unquote(t) for t in tokens[2:pos] if unquote(t)]
    name = names[0] if names else column
    return Constraint(name=name, column=column, kind=tokens[0], other="")


@dataclass
class _TableBuilder:
    """Mutable accumulator for the table currently being parsed."""

    name: str
    columns: Dict[str, Column] = field(default_factory=dict)
    indexes: Dict[str, Index] = field(default_factory=dict)
    constraints: Dict[str, Dict[str, Constraint]] = field(default_factory=dict)

    def add_constraint(self, constraint: Constraint) -> None:
        self.constraints.setdefault(constraint.column, {})[constraint.kind] = constraint

    def build(self) -> Table:
        return Table(
            name=self.name,
            columns=MappingProxyType(dict(self.columns)),
            indexes=MappingProxyType(dict(self.indexes)),
            constraints=MappingProxyType(
                {col: MappingProxyType(dict(kinds)) for col, kinds in self.constraints.items()}
            ),
        )


def parse_schema(text: str, strict: bool = False) -> Schema:
    """Parse a schema dump into a read-only mapping of table name to table.

    Parameters
    ----------
    text:
        Full schema text (newline separated ``CREATE TABLE`` statements).
    strict:
        Raise :class:`~sqlcompare.models.SchemaParseError` instead of skipping
        malformed table-body lines.

    Returns
    -------
    Schema
        Tables keyed by name. A repeated table name keeps the last definition.
    """
    tables: Dict[str, Table] = {}
    current: Optional[_TableBuilder] = None

    def commit() -> None:
        if current is not None:
            tables[current.name] = current.build()

    for line_no, raw in enumerate(normalize_newlines(text).split("\n"), start=1):
        tokens = tokenize(raw)
        kind = classify_line(tokens, in_table=current is not None)
        try:
            if kind is LineKind.TABLE_HEADER:
                commit()
                # stays closed if the header has no name
                current = None
                current = _TableBuilder(parse_table_name(tokens))
            elif kind is LineKind.TABLE_END:
                commit()
                current = None
            elif current is None:
                continue
            elif kind is LineKind.COLUMN:
                column = parse_column(tokens)
                current.columns[column.name] = column
            elif kind is LineKind.INDEX:
                index = parse_index(tokens)
                current.indexes[index.column] = index
            elif kind is LineKind.CONSTRAINT:
                current.add_constraint(parse_constraint(tokens))
            elif kind is LineKind.KEY_CONSTRAINT:
                current.add_constraint(parse_key_constraint(tokens))
        except _MalformedLine as exc:
            if strict:
                raise SchemaParseError(line_no, raw, str(exc)) from exc
            logger.debug("Skipping line %d (%s): %r", line_no, exc, raw)

    commit()
    logger.debug("Parsed %d table(s)", len(tables))
    return MappingProxyType(tables)
