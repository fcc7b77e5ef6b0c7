"""
reporting
=========

Renderers for diff reports and parsed schemas.

Primary API
-----------
- :func:`render_text`: aligned console table
- :func:`render_markdown`: Markdown report with one section per diff kind
- :func:`render_schema`: dump of parsed tables, for inspecting the parser

"""

from __future__ import annotations

import datetime as dt
from typing import Dict, List, Optional, Sequence

from .diffing import count_by_kind
from .models import KIND_ORDER, Diff, DiffKind, Schema
from .utils import md_anchor


def format_rows(rows: Sequence[Sequence[str]], sep: str = " | ") -> List[str]:
    """Align *rows* into columns joined by *sep*.

    Every column except the last is padded to its widest cell. Trailing
    whitespace is removed from each line.
    """
    if not rows:
        return []
    ncols = max(len(r) for r in rows)
    widths = [0] * ncols
    for row in rows:
        for i, cell in enumerate(row[:-1]):
            widths[i] = max(widths[i], len(cell))

    lines: List[str] = []
    for row in rows:
        cells = [cell.ljust(widths[i]) for i, cell in enumerate(row[:-1])]
        cells.append(row[-1])
        lines.append(sep.join(cells).rstrip())
    return lines


def render_text(diffs: Sequence[Diff], label_a: str, label_b: str) -> str:
    """Render diffs as an aligned ``Type | Target | A | B`` table.

    Parameters
    ----------
    diffs:
        Diffs in report order.
    label_a, label_b:
        Column headers for the reference and compared values, typically the
        schema file paths.

    Returns
    -------
    str
        The report, ending with a newline.
    """
    rows = [["Type", "Target", label_a, label_b]]
    rows.extend([d.kind.value, d.target, d.a, d.b] for d in diffs)
    lines = ["Diffs", ""]
    lines.extend(format_rows(rows))
    if not diffs:
        lines.extend(["", "No differences"])
    return "\n".join(lines) + "\n"


def _md_cell(value: str) -> str:
    return value.replace("|", "\\|") if value else " "


def render_markdown(
    diffs: Sequence[Diff],
    label_a: str,
    label_b: str,
    generated: Optional[dt.datetime] = None,
) -> str:
    """Render diffs as a Markdown report.

    The report has a header with both labels and per-kind counts, a contents
    list, and one section per kind (in report order) holding a table of
    ``Target | A | B`` rows.

    Parameters
    ----------
    diffs:
        Diffs in report order.
    label_a, label_b:
        Names of the reference and compared schemas.
    generated:
        Timestamp shown under the title. Defaults to now.
    """
    now = (generated or dt.datetime.now()).strftime("%Y-%m-%d %H:%M:%S")
    counts = count_by_kind(diffs)
    by_kind: Dict[DiffKind, List[Diff]] = {kind: [] for kind in KIND_ORDER}
    for d in diffs:
        by_kind[d.kind].append(d)

    lines: List[str] = []
    lines.append("# Schema Diff Summary\n\n")
    lines.append(f"_Generated: {now}_\n\n")
    lines.append(f"- A (reference): `{label_a}`\n")
    lines.append(f"- B (compared): `{label_b}`\n")
    lines.append(f"- Total differences: {len(diffs)}\n\n")

    lines.append("## Contents\n")
    for kind in KIND_ORDER:
        lines.append(f"- [{kind.value}](#{md_anchor(kind.value)}) ({counts[kind]})\n")
    lines.append("\n")

    for kind in KIND_ORDER:
        lines.append(f"## {kind.value}\n\n")
        if not by_kind[kind]:
            lines.append("- ✅ No differences\n\n")
            continue
        lines.append(f"| Target | {_md_cell(label_a)} | {_md_cell(label_b)} |\n")
        lines.append("| --- | --- | --- |\n")
        for d in by_kind[kind]:
            lines.append(f"| {_md_cell(d.target)} | {_md_cell(d.a)} | {_md_cell(d.b)} |\n")
        lines.append("\n")

    return "".join(lines)


def render_schema(schema: Schema) -> str:
    """Render parsed tables, one ``column | type | other`` block per table."""
    blocks: List[str] = []
    for table in schema.values():
        lines = [f"Table: {table.name}"]
        lines.extend(format_rows([[c.name, c.type, c.other] for c in table.columns.values()]))
        for column, index in table.indexes.items():
            lines.append(f"  KEY {index.name} ({column})")
        for column, kinds in table.constraints.items():
            for constraint in kinds.values():
                lines.append(f"  {constraint.kind} {constraint.name} ({column}) {constraint.other}".rstrip())
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks) + "\n" if blocks else ""
