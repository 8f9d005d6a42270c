# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for the comment density CLI."""

import io
import json
import re
from pathlib import Path

from cli.comment_density import run


def _write_file(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _strip_ansi(text: str) -> str:
    return re.sub(r"\x1b\[[0-9;]*m", "", text)


def _build_project(root: Path) -> None:
    _write_file(root / "src" / "a.js", "// 注释\nfoo();\n")
    _write_file(root / "src" / "b.js", "// english\nfoo();\n")
    _write_file(root / "src" / "bad.js", "const = ;\n")


def test_cli_001_requires_path_argument() -> None:
    stdout = io.StringIO()
    stderr = io.StringIO()

    exit_code = run([], stdout=stdout, stderr=stderr)

    assert exit_code == 2


def test_cli_002_fails_when_path_is_missing(tmp_path: Path) -> None:
    stdout = io.StringIO()
    stderr = io.StringIO()

    exit_code = run(["--path", str(tmp_path / "missing")], stdout=stdout, stderr=stderr)

    assert exit_code == 2
    assert "Path does not exist" in stderr.getvalue()


def test_cli_003_rejects_invalid_option_values(tmp_path: Path) -> None:
    stdout = io.StringIO()
    stderr = io.StringIO()

    exit_code = run(
        ["--path", str(tmp_path), "--chinese-prefix-length", "0"],
        stdout=stdout,
        stderr=stderr,
    )

    assert exit_code == 2
    assert "Invalid options" in stderr.getvalue()


def test_cli_004_json_output_lists_files_by_density(tmp_path: Path) -> None:
    _build_project(tmp_path)
    stdout = io.StringIO()
    stderr = io.StringIO()

    exit_code = run(
        ["--path", str(tmp_path), "--format", "json"], stdout=stdout, stderr=stderr
    )

    assert exit_code == 0
    payload = json.loads(_strip_ansi(stdout.getvalue()))
    assert [item["file_path"] for item in payload["files"]] == [
        "src/a.js",
        "src/b.js",
        "src/bad.js",
    ]
    assert payload["files"][0]["density"]["percentage"] == 100.0
    assert payload["files"][1]["density"]["percentage"] == 0.0
    assert payload["errors"] == []
    assert stderr.getvalue() == ""


def test_cli_005_allow_all_languages_counts_english_comments(tmp_path: Path) -> None:
    _build_project(tmp_path)
    stdout = io.StringIO()
    stderr = io.StringIO()

    exit_code = run(
        ["--path", str(tmp_path), "--format", "json", "--allow-all-languages"],
        stdout=stdout,
        stderr=stderr,
    )

    assert exit_code == 0
    payload = json.loads(_strip_ansi(stdout.getvalue()))
    densities = {
        item["file_path"]: item["density"]["percentage"] for item in payload["files"]
    }
    assert densities["src/b.js"] == 100.0


def test_cli_006_show_errors_reports_parse_failures(tmp_path: Path) -> None:
    _build_project(tmp_path)
    stdout = io.StringIO()
    stderr = io.StringIO()

    exit_code = run(
        ["--path", str(tmp_path), "--format", "json", "--show-errors"],
        stdout=stdout,
        stderr=stderr,
    )

    assert exit_code == 0
    payload = json.loads(_strip_ansi(stdout.getvalue()))
    assert [error["file_path"] for error in payload["errors"]] == ["src/bad.js"]
    assert "analyzer_error: src/bad.js" in stderr.getvalue()


def test_cli_007_json_output_file(tmp_path: Path) -> None:
    _build_project(tmp_path / "project")
    output_path = tmp_path / "out" / "report.json"
    stdout = io.StringIO()
    stderr = io.StringIO()

    exit_code = run(
        [
            "--path",
            str(tmp_path / "project"),
            "--format",
            "json",
            "--output",
            str(output_path),
        ],
        stdout=stdout,
        stderr=stderr,
    )

    assert exit_code == 0
    assert stdout.getvalue() == ""
    payload = json.loads(output_path.read_text(encoding="utf-8"))
    assert payload["files"][0]["comment_lengths"][0]["text"] == "注释"


def test_cli_008_table_output_lists_files_and_functions(tmp_path: Path) -> None:
    body = "".join(f"  v{index} = {index};\n" for index in range(2))
    _write_file(tmp_path / "work.js", f"// 工作\nfunction work() {{\n{body}}}\n")
    stdout = io.StringIO()
    stderr = io.StringIO()

    exit_code = run(
        ["--path", str(tmp_path), "--function-line-threshold", "2"],
        stdout=stdout,
        stderr=stderr,
    )

    assert exit_code == 0
    output = _strip_ansi(stdout.getvalue())
    assert "work.js" in output
    assert "50.00%" in output
    assert "work" in output


def test_cli_009_skip_dir_option_replaces_default(tmp_path: Path) -> None:
    _write_file(tmp_path / "vendor" / "v.js", "// 注释\nfoo();\n")
    _write_file(tmp_path / "node_modules" / "n.js", "// 注释\nfoo();\n")
    stdout = io.StringIO()
    stderr = io.StringIO()

    exit_code = run(
        ["--path", str(tmp_path), "--format", "json", "--skip-dir", "vendor"],
        stdout=stdout,
        stderr=stderr,
    )

    assert exit_code == 0
    payload = json.loads(_strip_ansi(stdout.getvalue()))
    assert [item["file_path"] for item in payload["files"]] == ["node_modules/n.js"]
