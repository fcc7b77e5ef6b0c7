"""
models
======

Data model shared by the parser and the diff engine.

A parsed schema is a read-only mapping of table name to :class:`Table`.
Each table owns three mappings keyed by column name:

- ``columns``: column name -> :class:`Column`
- ``indexes``: column name -> :class:`Index` (one index tracked per column)
- ``constraints``: column name -> constraint kind -> :class:`Constraint`

Discrepancies found by :func:`sqlcompare.diffing.compare` are reported as
:class:`Diff` records classified by :class:`DiffKind`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Tuple


@dataclass(frozen=True)
class Column:
    """A column definition.

    Attributes:
        name: Column name without identifier quoting.
        type: Declared type, e.g. ``INT`` or ``VARCHAR(255)``.
        other: Remainder of the definition (nullability, default, comment...).
    """

    name: str
    type: str
    other: str = ""


@dataclass(frozen=True)
class Index:
    """A ``KEY`` definition, identified by the column it is defined on."""

    name: str
    column: str


@dataclass(frozen=True)
class Constraint:
    """A named constraint or a ``PRIMARY``/``UNIQUE`` key.

    Attributes:
        name: Constraint name (defaults to the column name for keys).
        column: Column the constraint applies to.
        kind: ``FOREIGN`` (or whatever follows the name), ``PRIMARY``, ``UNIQUE``.
        other: Trailing clause, e.g. ``REFERENCES orgs(id)``; empty for keys.
    """

    name: str
    column: str
    kind: str
    other: str = ""


@dataclass(frozen=True)
class Table:
    """A table and everything parsed from its body."""

    name: str
    columns: Mapping[str, Column] = field(default_factory=dict)
    indexes: Mapping[str, Index] = field(default_factory=dict)
    constraints: Mapping[str, Mapping[str, Constraint]] = field(default_factory=dict)

    def constraint(self, column: str, kind: str) -> Constraint | None:
        """Return the constraint of *kind* on *column*, if any."""
        return self.constraints.get(column, {}).get(kind)


Schema = Mapping[str, Table]


class DiffKind(str, Enum):
    """Classification of a discrepancy between two schemas."""

    MISSING_TABLE = "MISSING_TABLE"
    MISSING_COLUMN = "MISSING_COLUMN"
    WRONG_COLUMN_TYPE = "WRONG_COLUMN_TYPE"
    WRONG_COLUMN_OTHER = "WRONG_COLUMN_OTHER"
    MISSING_INDEX = "MISSING_INDEX"
    MISSING_CONSTRAINT = "MISSING_CONSTRAINT"
    WRONG_CONSTRAINT_OTHER = "WRONG_CONSTRAINT_OTHER"

    def __str__(self) -> str:
        return self.value


# Report order. Note MISSING_INDEX comes last, after the constraint kinds.
KIND_ORDER: Tuple[DiffKind, ...] = (
    DiffKind.MISSING_TABLE,
    DiffKind.MISSING_COLUMN,
    DiffKind.WRONG_COLUMN_TYPE,
    DiffKind.WRONG_COLUMN_OTHER,
    DiffKind.MISSING_CONSTRAINT,
    DiffKind.WRONG_CONSTRAINT_OTHER,
    DiffKind.MISSING_INDEX,
)


@dataclass(frozen=True)
class Diff:
    """A single discrepancy.

    Attributes:
        kind: What is wrong.
        target: ``table``, ``table.column`` or ``table.column.kind``.
        a: Value found in the reference schema.
        b: Value found in the compared schema (empty when absent).
    """

    kind: DiffKind
    target: str
    a: str
    b: str = ""


class SchemaParseError(ValueError):
    """Raised in strict mode for a table-body line that cannot be parsed."""

    def __init__(self, line_no: int, line: str, reason: str) -> None:
        super().__init__(f"line {line_no}: {reason}: {line!r}")
        self.line_no = line_no
        self.line = line
        self.reason = reason
