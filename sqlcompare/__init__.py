"""
sqlcompare
==========

Compare two textual ``CREATE TABLE`` schema dumps and report what the second
one is missing or defines differently.

The pieces are meant to be used together via the CLI entry point
(:mod:`sqlcompare.cli`), but the core is importable on its own::

    from sqlcompare import compare, parse_schema

    diffs = compare(parse_schema(text_a), parse_schema(text_b))

- :mod:`sqlcompare.parser`: tolerant line-based schema parser
- :mod:`sqlcompare.diffing`: directional diff engine
- :mod:`sqlcompare.reporting`: text and Markdown renderers
"""

from .diffing import compare, group_by_kind
from .models import (
    KIND_ORDER,
    Column,
    Constraint,
    Diff,
    DiffKind,
    Index,
    Schema,
    SchemaParseError,
    Table,
)
from .parser import parse_schema

__all__ = [
    "KIND_ORDER",
    "Column",
    "Constraint",
    "Diff",
    "DiffKind",
    "Index",
    "Schema",
    "SchemaParseError",
    "Table",
    "compare",
    "group_by_kind",
    "parse_schema",
]
