"""
cli
===

Compare two ``CREATE TABLE`` schema dumps and print the differences.

Schema A is the reference: the report lists what B is missing or defines
differently. Tables and columns that only exist in B are not reported.

CLI Usage
---------

Basic run::

    sqlcompare prod.sql staging.sql

Markdown report written to a file::

    sqlcompare prod.sql staging.sql --format markdown --out out/SUMMARY.md

Only compare some tables, ignoring column extras::

    sqlcompare prod.sql staging.sql --include "user%" --exclude "tmp_%" --no-column-other

Use a config file (see :mod:`sqlcompare.config`)::

    sqlcompare prod.sql staging.sql --config config.yml

"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, Sequence

from .config import (
    REPORT_FORMATS,
    deep_get,
    load_config,
    read_options,
    read_report_settings,
    read_table_filter,
)
from .diffing import compare
from .filters import filter_schema
from .models import Schema, SchemaParseError
from .parser import parse_schema
from .reporting import render_markdown, render_schema, render_text
from .utils import read_schema_text, write_text

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for :func:`main`."""
    ap = argparse.ArgumentParser(
        prog="sqlcompare",
        description="Report what schema B is missing compared to schema A (CREATE TABLE dumps).",
    )
    ap.add_argument("schema_a", type=Path, help="Reference schema dump (A)")
    ap.add_argument("schema_b", type=Path, help="Compared schema dump (B)")
    ap.add_argument("--config", type=Path, default=None, help="Optional YAML config file")
    ap.add_argument("--format", choices=REPORT_FORMATS, default=None, help="Report format (default: text)")
    ap.add_argument("--out", default=None, help="Write the report to this file instead of stdout")
    ap.add_argument("--label-a", default=None, help="Header for A values (default: path of A)")
    ap.add_argument("--label-b", default=None, help="Header for B values (default: path of B)")

    # include/exclude table filters (repeatable)
    ap.add_argument(
        "--include",
        action="append",
        default=[],
        help="Include table pattern (repeatable). SQL LIKE (%% _) or regex via re:... e.g. --include 'user%%'",
    )
    ap.add_argument(
        "--exclude",
        action="append",
        default=[],
        help="Exclude table pattern (repeatable). SQL LIKE (%% _) or regex via re:... e.g. --exclude 'tmp_%%'",
    )

    # toggles
    ap.add_argument("--no-column-types", action="store_true", help="Do not report column type differences")
    ap.add_argument("--no-column-other", action="store_true", help="Do not report column attribute differences")
    ap.add_argument("--no-indexes", action="store_true", help="Do not report missing indexes")
    ap.add_argument("--no-constraints", action="store_true", help="Do not report constraint differences")
    ap.add_argument("--no-sort", action="store_true", help="Keep source order inside each diff kind")

    ap.add_argument("--strict", action="store_true", help="Fail on malformed lines inside table bodies")
    ap.add_argument("--show-tables", action="store_true", help="Print the parsed tables of both schemas")
    ap.add_argument("--fail-on-diff", action="store_true", help="Exit with status 1 when differences are found")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return ap


def load_schema(path: Path, strict: bool) -> Schema:
    """Read and parse one schema dump, turning parse errors into SystemExit."""
    text = read_schema_text(path)
    try:
        schema = parse_schema(text, strict=strict)
    except SchemaParseError as exc:
        raise SystemExit(f"ERROR: cannot parse {path}: {exc}") from exc
    logger.info("Parsed %d table(s) from %s", len(schema), path)
    return schema


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI entry-point and return the process exit code."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    cfg: Dict[str, Any] = load_config(args.config.resolve()) if args.config else {}
    options = read_options(cfg, args)
    table_filter = read_table_filter(cfg, args)
    report = read_report_settings(cfg, args, str(args.schema_a), str(args.schema_b))
    strict = args.strict or bool(deep_get(cfg, ["strict"], False))

    schema_a = filter_schema(load_schema(args.schema_a, strict), table_filter)
    schema_b = filter_schema(load_schema(args.schema_b, strict), table_filter)

    if args.show_tables:
        print(f"== {report.label_a} ==\n")
        print(render_schema(schema_a))
        print(f"== {report.label_b} ==\n")
        print(render_schema(schema_b))

    enabled = set(options.enabled_kinds())
    diffs = [d for d in compare(schema_a, schema_b, sort=options.sort) if d.kind in enabled]

    if report.format == "markdown":
        content = render_markdown(diffs, report.label_a, report.label_b)
    else:
        content = render_text(diffs, report.label_a, report.label_b)

    if report.out is not None:
        write_text(report.out, content)
        print(f"Found {len(diffs)} difference(s).")
        print(f"Report : {report.out}")
    else:
        print(content, end="")

    if args.fail_on_diff and diffs:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
