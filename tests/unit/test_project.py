# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for the project walker and reports."""

from pathlib import Path

import pytest

from cdm.config import AnalysisOptions
from cdm.project import (
    IgnoreMatcher,
    _translate_gitignore_line,
    analyze_project,
    collect_source_files,
    dialect_for_path,
)


def _write_file(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _build_project(root: Path) -> None:
    _write_file(root / ".gitignore", "dist/\n")
    _write_file(root / "src" / "a.js", "// 注释\nfoo();\n")
    _write_file(root / "styles" / "x.css", ".a {\n  color: red;\n}\n")
    _write_file(root / "dist" / "b.js", "// 忽略\nfoo();\n")
    _write_file(root / "node_modules" / "lib" / "c.js", "foo();\n")
    _write_file(root / ".git" / "hooks" / "d.js", "foo();\n")
    _write_file(root / "README.md", "# readme\n")


def test_prj_001_dialect_mapping_by_suffix() -> None:
    assert dialect_for_path(Path("a.tsx")) == "script"
    assert dialect_for_path(Path("a.SCSS")) == "stylesheet"
    assert dialect_for_path(Path("a.htm")) == "markup"
    assert dialect_for_path(Path("a.vue")) == "composite"
    assert dialect_for_path(Path("a.md")) is None


def test_prj_002_walker_skips_ignored_git_and_skip_dirs(tmp_path: Path) -> None:
    _build_project(tmp_path)

    files = collect_source_files(tmp_path, AnalysisOptions())

    assert [path.relative_to(tmp_path).as_posix() for path in files] == [
        "src/a.js",
        "styles/x.css",
    ]


def test_prj_003_nested_gitignore_applies_below_its_directory(tmp_path: Path) -> None:
    _write_file(tmp_path / "pkg" / ".gitignore", "gen.js\n")
    _write_file(tmp_path / "pkg" / "deep" / "gen.js", "foo();\n")
    _write_file(tmp_path / "pkg" / "keep.js", "foo();\n")
    _write_file(tmp_path / "gen.js", "foo();\n")

    files = collect_source_files(tmp_path, AnalysisOptions())

    assert [path.relative_to(tmp_path).as_posix() for path in files] == [
        "gen.js",
        "pkg/keep.js",
    ]


def test_prj_004_translate_gitignore_line_for_nested_base() -> None:
    assert _translate_gitignore_line("gen.js", "pkg") == "/pkg/**/gen.js"
    assert _translate_gitignore_line("/gen.js", "pkg") == "/pkg/gen.js"
    assert _translate_gitignore_line("!a/b", "pkg") == "!/pkg/a/b"
    assert _translate_gitignore_line("# note", "pkg") == "# note"
    assert _translate_gitignore_line("gen.js", "") == "gen.js"


def test_prj_005_ignore_matcher_matches_directories(tmp_path: Path) -> None:
    _write_file(tmp_path / ".gitignore", "build/\n")

    matcher = IgnoreMatcher.from_project_root(tmp_path)

    assert matcher.matches("build", is_dir=True)
    assert not matcher.matches("build", is_dir=False)
    assert not matcher.matches("", is_dir=True)


def test_prj_006_reports_are_sorted_by_descending_density(tmp_path: Path) -> None:
    _build_project(tmp_path)

    report = analyze_project(tmp_path)

    assert [file.file_path for file in report.files] == ["src/a.js", "styles/x.css"]
    assert report.files[0].density.percentage == 100.0
    assert report.files[0].dialect == "script"
    assert report.files[0].logical_line_count == 1
    assert report.files[1].density.percentage == 0.0
    assert report.errors == []


def test_prj_007_report_carries_comment_lengths(tmp_path: Path) -> None:
    _build_project(tmp_path)

    report = analyze_project(tmp_path)

    entries = report.files[0].comment_lengths
    assert [(e.language_tag, e.length, e.text) for e in entries] == [("zh", 2, "注释")]


def test_prj_008_parse_failure_becomes_error_and_zero_report(tmp_path: Path) -> None:
    _write_file(tmp_path / "bad.js", "const = ;\n")
    _write_file(tmp_path / "good.js", "// 好\nfoo();\n")

    report = analyze_project(tmp_path)

    assert [file.file_path for file in report.files] == ["good.js", "bad.js"]
    assert report.files[1].raw_line_count == 0
    assert [error.file_path for error in report.errors] == ["bad.js"]
    assert report.errors[0].message.startswith("script:")


def test_prj_009_single_file_root_is_analyzed(tmp_path: Path) -> None:
    component = tmp_path / "App.vue"
    _write_file(
        component,
        "<template>\n  <!-- 模板 -->\n  <p v-if=\"ok\">x</p>\n</template>\n",
    )

    report = analyze_project(component)

    assert [file.file_path for file in report.files] == ["App.vue"]
    assert report.files[0].dialect == "composite"
    assert report.files[0].density.percentage == 100.0


def test_prj_010_invalid_roots_raise(tmp_path: Path) -> None:
    _write_file(tmp_path / "notes.txt", "x\n")

    with pytest.raises(FileNotFoundError):
        analyze_project(tmp_path / "missing")
    with pytest.raises(ValueError):
        analyze_project(tmp_path / "notes.txt")


def test_prj_011_script_files_report_functions(tmp_path: Path) -> None:
    body = "".join(f"  v{index} = {index};\n" for index in range(2))
    _write_file(tmp_path / "work.ts", f"function work(): void {{\n{body}}}\n")

    report = analyze_project(tmp_path, AnalysisOptions(function_line_threshold=2))

    assert [function.name for function in report.files[0].functions] == ["work"]
