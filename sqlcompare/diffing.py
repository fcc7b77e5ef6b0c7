"""
diffing
=======

Directional comparison of two parsed schemas.

:func:`compare` checks that everything in the reference schema *A* also
exists, with the same definition, in the compared schema *B*. Elements that
only exist in *B* are never reported.

The result is grouped by :class:`~sqlcompare.models.DiffKind` following
:data:`~sqlcompare.models.KIND_ORDER`::

    MISSING_TABLE, MISSING_COLUMN, WRONG_COLUMN_TYPE, WRONG_COLUMN_OTHER,
    MISSING_CONSTRAINT, WRONG_CONSTRAINT_OTHER, MISSING_INDEX

"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List

from .models import KIND_ORDER, Diff, DiffKind, Schema, Table

logger = logging.getLogger(__name__)


def _compare_columns(table_a: Table, table_b: Table) -> Iterator[Diff]:
    for column_a in table_a.columns.values():
        column_b = table_b.columns.get(column_a.name)
        if column_b is None:
            yield Diff(DiffKind.MISSING_COLUMN, table_a.name, column_a.name)
            continue

        target = f"{table_a.name}.{column_a.name}"
        if column_a.type != column_b.type:
            yield Diff(DiffKind.WRONG_COLUMN_TYPE, target, column_a.type, column_b.type)
        if column_a.other != column_b.other:
            yield Diff(DiffKind.WRONG_COLUMN_OTHER, target, column_a.other, column_b.other)


def _compare_indexes(table_a: Table, table_b: Table) -> Iterator[Diff]:
    # Presence only: an index with another name on the same column is a match.
    for column, index_a in table_a.indexes.items():
        if column not in table_b.indexes:
            yield Diff(DiffKind.MISSING_INDEX, f"{table_a.name}.{column}", index_a.name)


def _compare_constraints(table_a: Table, table_b: Table) -> Iterator[Diff]:
    for column, kinds in table_a.constraints.items():
        for kind, constraint_a in kinds.items():
            constraint_b = table_b.constraint(column, kind)
            if constraint_b is None:
                yield Diff(DiffKind.MISSING_CONSTRAINT, f"{table_a.name}.{column}", constraint_a.kind)
                continue
            if constraint_a.other != constraint_b.other:
                yield Diff(
                    DiffKind.WRONG_CONSTRAINT_OTHER,
                    f"{table_a.name}.{column}.{constraint_a.kind}",
                    constraint_a.other,
                    constraint_b.other,
                )


def iter_diffs(schema_a: Schema, schema_b: Schema) -> Iterator[Diff]:
    """Yield ungrouped diffs in the iteration order of *schema_a*."""
    for table_a in schema_a.values():
        table_b = schema_b.get(table_a.name)
        if table_b is None:
            yield Diff(DiffKind.MISSING_TABLE, table_a.name, table_a.name)
            continue
        yield from _compare_columns(table_a, table_b)
        yield from _compare_indexes(table_a, table_b)
        yield from _compare_constraints(table_a, table_b)


def group_by_kind(diffs: Iterable[Diff], sort: bool = False) -> List[Diff]:
    """Concatenate *diffs* bucketed by kind in :data:`KIND_ORDER`.

    Parameters
    ----------
    diffs:
        Diffs in any order.
    sort:
        Sort each bucket by ``(target, a)``. Without it, each bucket keeps the
        order in which its diffs were given.

    Returns
    -------
    list of Diff
        Every input diff exactly once.
    """
    buckets: Dict[DiffKind, List[Diff]] = {kind: [] for kind in KIND_ORDER}
    for diff in diffs:
        buckets[diff.kind].append(diff)

    result: List[Diff] = []
    for kind in KIND_ORDER:
        bucket = buckets[kind]
        if sort:
            bucket = sorted(bucket, key=lambda d: (d.target, d.a))
        result.extend(bucket)
    return result


def compare(schema_a: Schema, schema_b: Schema, sort: bool = True) -> List[Diff]:
    """Compare *schema_b* against the reference *schema_a*.

    Parameters
    ----------
    schema_a:
        Reference schema. Every table, column, index and constraint it holds
        is looked up in *schema_b*.
    schema_b:
        Compared schema.
    sort:
        Sort diffs by target inside each kind (deterministic output).

    Returns
    -------
    list of Diff
        Diffs grouped by kind in report order.
    """
    diffs = group_by_kind(iter_diffs(schema_a, schema_b), sort=sort)
    logger.debug("Found %d diff(s) across %d reference table(s)", len(diffs), len(schema_a))
    return diffs


def count_by_kind(diffs: Iterable[Diff]) -> Dict[DiffKind, int]:
    """Return the number of diffs per kind, in report order, including zeros."""
    counts = {kind: 0 for kind in KIND_ORDER}
    for diff in diffs:
        counts[diff.kind] += 1
    return counts
