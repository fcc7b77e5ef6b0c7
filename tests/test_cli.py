"""Unit tests for the command-line entry point."""

from pathlib import Path
from typing import Tuple

import pytest

from sqlcompare.cli import main

SCHEMA_A = """\
CREATE TABLE `users` (
  `id` int NOT NULL,
  `name` varchar(50) DEFAULT NULL,
  PRIMARY KEY (`id`),
  KEY `idx_name` (`name`)
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;

CREATE TABLE `tmp_import` (
  `id` int NOT NULL
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
"""

SCHEMA_B = """\
CREATE TABLE `users` (
  `id` int NOT NULL,
  `name` varchar(50) DEFAULT NULL,
  PRIMARY KEY (`id`)
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
"""


@pytest.fixture
def schema_files(tmp_path: Path) -> Tuple[Path, Path]:
    """Write the two schema dumps and return their paths."""
    a = tmp_path / "a.sql"
    b = tmp_path / "b.sql"
    a.write_text(SCHEMA_A, encoding="utf-8")
    b.write_text(SCHEMA_B, encoding="utf-8")
    return a, b


class TestMain:
    """Tests for main function."""

    def test_text_report(self, schema_files: Tuple[Path, Path], capsys: pytest.CaptureFixture) -> None:
        """Test the default text report lists grouped diffs under file labels."""
        a, b = schema_files
        assert main([str(a), str(b)]) == 0
        out = capsys.readouterr().out
        assert f"| {a} | {b}" in out
        assert out.index("MISSING_TABLE") < out.index("MISSING_INDEX")
        assert "tmp_import" in out
        assert "idx_name" in out

    def test_fail_on_diff(self, schema_files: Tuple[Path, Path]) -> None:
        """Test --fail-on-diff returns 1 only when differences exist."""
        a, b = schema_files
        assert main([str(a), str(b), "--fail-on-diff"]) == 1
        assert main([str(a), str(a), "--fail-on-diff"]) == 0

    def test_filters_and_toggles(self, schema_files: Tuple[Path, Path], capsys: pytest.CaptureFixture) -> None:
        """Test excluded tables and disabled checks are not reported."""
        a, b = schema_files
        assert main([str(a), str(b), "--exclude", "tmp_%", "--no-indexes", "--fail-on-diff"]) == 0
        assert "No differences" in capsys.readouterr().out

    def test_markdown_to_file(self, schema_files: Tuple[Path, Path], tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        """Test --format markdown --out writes the report to disk."""
        a, b = schema_files
        out_path = tmp_path / "out" / "SUMMARY.md"
        assert main([str(a), str(b), "--format", "markdown", "--out", str(out_path), "--label-a", "prod"]) == 0
        content = out_path.read_text(encoding="utf-8")
        assert "# Schema Diff Summary" in content
        assert "| Target | prod |" in content
        assert "Found 2 difference(s)." in capsys.readouterr().out

    def test_config_file(self, schema_files: Tuple[Path, Path], tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        """Test options and filters are read from the YAML config."""
        a, b = schema_files
        cfg = tmp_path / "config.yml"
        cfg.write_text(
            "options:\n  indexes: false\n"
            "table_filter:\n  include: [\"users\"]\n"
            "report:\n  label_a: production\n  label_b: staging\n",
            encoding="utf-8",
        )
        assert main([str(a), str(b), "--config", str(cfg), "--fail-on-diff"]) == 0
        assert "production | staging" in capsys.readouterr().out

    def test_show_tables(self, schema_files: Tuple[Path, Path], capsys: pytest.CaptureFixture) -> None:
        """Test --show-tables prints the parsed tables of both schemas."""
        a, b = schema_files
        main([str(a), str(b), "--show-tables"])
        out = capsys.readouterr().out
        assert "Table: users" in out
        assert "Table: tmp_import" in out

    def test_missing_schema_file(self, schema_files: Tuple[Path, Path], tmp_path: Path) -> None:
        """Test an unreadable path is a fatal error with a message."""
        a, _ = schema_files
        with pytest.raises(SystemExit, match="schema file not found"):
            main([str(a), str(tmp_path / "nope.sql")])

    def test_missing_arguments(self) -> None:
        """Test both schema paths are required."""
        with pytest.raises(SystemExit) as excinfo:
            main(["only_one.sql"])
        assert excinfo.value.code == 2

    def test_strict_mode(self, schema_files: Tuple[Path, Path], tmp_path: Path) -> None:
        """Test --strict turns malformed lines into a fatal error."""
        a, _ = schema_files
        broken = tmp_path / "broken.sql"
        broken.write_text("CREATE TABLE t (\n`lonely`\n);\n", encoding="utf-8")
        assert main([str(a), str(broken)]) == 0
        with pytest.raises(SystemExit, match="cannot parse"):
            main([str(a), str(broken), "--strict"])
