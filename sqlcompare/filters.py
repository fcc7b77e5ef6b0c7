"""
filters
=======

Table include/exclude patterns.

Patterns support:

- SQL LIKE wildcards: ``%`` and ``_`` (default)
- Regex patterns if you prefix with ``re:``

Matching is case-insensitive unless ``case_sensitive`` is set.

Examples::

    include: ["user%", "order_%"]     (SQL LIKE)
    exclude: ["tmp_%", "re:^zz_.*$"]  (mix LIKE + regex)

"""

from __future__ import annotations

import fnmatch
import re
from types import MappingProxyType
from typing import List, Sequence

from .config import TableFilter
from .models import Schema


def sql_like_to_fnmatch(pattern: str) -> str:
    """Convert SQL LIKE patterns (% and _) to fnmatch syntax (* and ?)."""
    return pattern.replace("%", "*").replace("_", "?")


def matches_pattern(name: str, pattern: str, case_sensitive: bool = False) -> bool:
    """Return True if name matches pattern (LIKE by default, regex via ``re:``)."""
    if pattern.startswith("re:"):
        flags = 0 if case_sensitive else re.IGNORECASE
        return re.search(pattern[3:], name, flags) is not None
    fm = sql_like_to_fnmatch(pattern)
    if case_sensitive:
        return fnmatch.fnmatchcase(name, fm)
    return fnmatch.fnmatchcase(name.lower(), fm.lower())


def filter_tables(
    tables: Sequence[str],
    include: Sequence[str],
    exclude: Sequence[str],
    case_sensitive: bool = False,
) -> List[str]:
    """Filter table names using include/exclude patterns.

    Include patterns keep a table if it matches *any* include pattern.
    Exclude patterns drop a table if it matches *any* exclude pattern.

    Returns
    -------
    list of str
        The kept names, sorted and de-duplicated.
    """
    result = list(tables)
    if include:
        result = [t for t in result if any(matches_pattern(t, p, case_sensitive) for p in include)]
    if exclude:
        result = [t for t in result if not any(matches_pattern(t, p, case_sensitive) for p in exclude)]
    return sorted(set(result))


def filter_schema(schema: Schema, table_filter: TableFilter) -> Schema:
    """Return a view of *schema* restricted to the tables kept by *table_filter*."""
    if not table_filter.include and not table_filter.exclude:
        return schema
    kept = set(
        filter_tables(
            list(schema),
            table_filter.include,
            table_filter.exclude,
            table_filter.case_sensitive,
        )
    )
    return MappingProxyType({name: table for name, table in schema.items() if name in kept})
