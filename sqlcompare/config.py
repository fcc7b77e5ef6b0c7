"""
config
======

Optional YAML configuration, merged with command-line overrides.

Example ``config.yml``::

    options:
      column_types: true
      column_other: true
      indexes: true
      constraints: true
      sort: true

    table_filter:
      include: ["user%"]
      exclude: ["tmp_%", "re:^zz_"]
      case_sensitive: false

    report:
      format: text        # text | markdown
      out: null           # write the report to a file instead of stdout
      label_a: production
      label_b: staging

    strict: false

CLI flags always win over the file: ``--no-*`` switches disable checks and
``--include``/``--exclude`` patterns are appended to the configured ones.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .models import DiffKind

REPORT_FORMATS = ("text", "markdown")


@dataclass(frozen=True)
class Options:
    """Boolean switches controlling which comparisons are reported."""

    column_types: bool = True
    column_other: bool = True
    indexes: bool = True
    constraints: bool = True
    sort: bool = True

    def enabled_kinds(self) -> List[DiffKind]:
        """Return the diff kinds to report. Missing tables/columns always are."""
        kinds = [DiffKind.MISSING_TABLE, DiffKind.MISSING_COLUMN]
        if self.column_types:
            kinds.append(DiffKind.WRONG_COLUMN_TYPE)
        if self.column_other:
            kinds.append(DiffKind.WRONG_COLUMN_OTHER)
        if self.constraints:
            kinds.extend([DiffKind.MISSING_CONSTRAINT, DiffKind.WRONG_CONSTRAINT_OTHER])
        if self.indexes:
            kinds.append(DiffKind.MISSING_INDEX)
        return kinds


@dataclass(frozen=True)
class TableFilter:
    """Include/exclude patterns for table selection."""

    include: List[str] = field(default_factory=list)
    exclude: List[str] = field(default_factory=list)
    case_sensitive: bool = False


@dataclass(frozen=True)
class ReportSettings:
    """How and where the diff report is rendered."""

    format: str = "text"
    out: Optional[Path] = None
    label_a: str = "A"
    label_b: str = "B"


def load_config(path: Path) -> Dict[str, Any]:
    """Load a YAML config file.

    Raises
    ------
    SystemExit
        If the file does not exist or is not a YAML mapping.
    """
    if not path.exists():
        raise SystemExit(f"ERROR: config file not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise SystemExit(f"ERROR: invalid YAML in config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise SystemExit(f"ERROR: config file must contain a mapping: {path}")
    return data


def deep_get(d: Dict[str, Any], keys: List[str], default: Any = None) -> Any:
    """Safely get nested dict value with default."""
    cur: Any = d
    for k in keys:
        if not isinstance(cur, dict) or k not in cur:
            return default
        cur = cur[k]
    return cur


def read_options(cfg: Dict[str, Any], args: argparse.Namespace) -> Options:
    """Build :class:`Options` from config defaults and ``--no-*`` CLI flags."""
    column_types = bool(deep_get(cfg, ["options", "column_types"], True))
    column_other = bool(deep_get(cfg, ["options", "column_other"], True))
    indexes = bool(deep_get(cfg, ["options", "indexes"], True))
    constraints = bool(deep_get(cfg, ["options", "constraints"], True))
    sort = bool(deep_get(cfg, ["options", "sort"], True))

    if getattr(args, "no_column_types", False):
        column_types = False
    if getattr(args, "no_column_other", False):
        column_other = False
    if getattr(args, "no_indexes", False):
        indexes = False
    if getattr(args, "no_constraints", False):
        constraints = False
    if getattr(args, "no_sort", False):
        sort = False

    return Options(
        column_types=column_types,
        column_other=column_other,
        indexes=indexes,
        constraints=constraints,
        sort=sort,
    )


def read_table_filter(cfg: Dict[str, Any], args: argparse.Namespace) -> TableFilter:
    """Build :class:`TableFilter` from config; CLI patterns extend config patterns."""
    cfg_includes = deep_get(cfg, ["table_filter", "include"], []) or []
    cfg_excludes = deep_get(cfg, ["table_filter", "exclude"], []) or []
    case_sensitive = bool(deep_get(cfg, ["table_filter", "case_sensitive"], False))
    return TableFilter(
        include=list(cfg_includes) + list(getattr(args, "include", None) or []),
        exclude=list(cfg_excludes) + list(getattr(args, "exclude", None) or []),
        case_sensitive=case_sensitive,
    )


def pick(val_cli: Optional[str], val_cfg: Optional[str], default: str) -> str:
    """Pick a value from CLI override, then config, then *default*."""
    if val_cli is not None and val_cli != "":
        return val_cli
    return val_cfg or default


def read_report_settings(
    cfg: Dict[str, Any],
    args: argparse.Namespace,
    default_label_a: str,
    default_label_b: str,
) -> ReportSettings:
    """Build :class:`ReportSettings`; labels default to the schema file paths.

    Raises
    ------
    SystemExit
        If the configured format is not one of :data:`REPORT_FORMATS`.
    """
    fmt = pick(getattr(args, "format", None), deep_get(cfg, ["report", "format"]), "text")
    if fmt not in REPORT_FORMATS:
        raise SystemExit(f"ERROR: unsupported report format: {fmt} (expected one of {', '.join(REPORT_FORMATS)})")
    out = pick(getattr(args, "out", None), deep_get(cfg, ["report", "out"]), "")
    return ReportSettings(
        format=fmt,
        out=Path(out) if out else None,
        label_a=pick(getattr(args, "label_a", None), deep_get(cfg, ["report", "label_a"]), default_label_a),
        label_b=pick(getattr(args, "label_b", None), deep_get(cfg, ["report", "label_b"]), default_label_b),
    )
