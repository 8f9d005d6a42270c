# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
import pytest

from cdm.config import AnalysisOptions
from cdm.density import compute_density, density_percentage
from cdm.document import analyze_document
from cdm.syntax import ParseFailure

ANY_LANGUAGE = AnalysisOptions(only_allow_chinese=False)


def test_den_001_density_is_capped_at_one_hundred() -> None:
    source = "// 注释一\n// 注释二\n// 注释三\nfoo();\n"

    result = compute_density(source, "script")

    assert result.percentage == 100.0
    assert result.comment_line_total == 3


def test_den_002_zero_basis_yields_zero_and_no_comments() -> None:
    result = compute_density("// 只有注释\n", "script")

    assert result.percentage == 0.0
    assert result.comments == []
    assert result.raw_line_count == 1
    assert result.density_text == "0.00%"


def test_den_003_collocated_comment_adds_one_to_denominator() -> None:
    result = compute_density("doSomething(); // note", "script", ANY_LANGUAGE)

    assert result.complexity_basis == 1
    assert result.collocated_count == 1
    assert result.percentage == 50.0


def test_den_004_basis_switches_to_raw_lines_above_threshold() -> None:
    source = "foo(); // 说明\n\nbar(\n  1,\n  2\n);\n"

    logical = compute_density(source, "script")
    raw = compute_density(source, "script", AnalysisOptions(file_line_threshold=3))

    assert logical.raw_line_count == 5
    assert logical.logical_line_count == 2
    assert logical.complexity_basis == 2
    assert logical.percentage == 33.33
    assert raw.complexity_basis == 5
    assert raw.percentage == 16.67


def test_den_005_chinese_only_policy_filters_english_comments() -> None:
    source = "// english note\nfoo();\n"

    filtered = compute_density(source, "script")
    unfiltered = compute_density(source, "script", ANY_LANGUAGE)

    assert filtered.percentage == 0.0
    assert filtered.comments == []
    assert unfiltered.percentage == 100.0
    assert len(unfiltered.comments) == 1


def test_den_006_markup_uses_physical_lines() -> None:
    source = "<div>\n  <!-- 说明 -->\n  <p>text</p>\n</div>\n"

    result = compute_density(source, "markup")

    assert result.complexity_basis == 4
    assert result.logical_line_count == 0
    assert result.percentage == 25.0


def test_den_007_stylesheet_collocated_comment() -> None:
    source = ".a {\n  color: red; /* 红色 */\n}\n"

    result = compute_density(source, "stylesheet")

    assert result.collocated_count == 1
    assert result.percentage == 25.0


def test_den_008_composite_merges_template_and_script_comments() -> None:
    source = (
        "<template>\n"
        "  <!-- 模板注释 -->\n"
        '  <div v-if="ok">hi</div>\n'
        "</template>\n"
        "<script>\n"
        "const a = 1 // 脚本注释\n"
        "</script>\n"
    )

    result = compute_density(source, "composite")

    assert [c.text.strip() for c in result.comments] == ["模板注释", "脚本注释"]
    assert result.logical_line_count == 2
    assert result.raw_line_count == 7
    assert result.percentage == 66.67


def test_den_009_composite_style_comments_are_merged_after_line_comments() -> None:
    source = (
        "<template>\n"
        "  <p>x</p>\n"
        "</template>\n"
        "<style>\n"
        "/* 样式 */\n"
        ".a { color: red; }\n"
        "</style>\n"
        "<script>\n"
        "const a = 1 // 脚本\n"
        "</script>\n"
    )

    result = compute_density(source, "composite")

    assert [(c.kind, c.text.strip()) for c in result.comments] == [
        ("line", "脚本"),
        ("block", "样式"),
    ]


def test_den_010_script_parse_failure_propagates_from_compute() -> None:
    with pytest.raises(ParseFailure):
        compute_density("const = ;", "script")


def test_den_011_document_boundary_converts_failure_to_zero_result() -> None:
    analysis = analyze_document("const = ;", "script", document_id="bad.js")

    assert analysis.error is not None
    assert analysis.error.startswith("script:")
    assert analysis.density.percentage == 0.0
    assert analysis.density.comments == []
    assert analysis.density.raw_line_count == 0
    assert analysis.functions == []


def test_den_012_document_includes_functions_for_script() -> None:
    body = "".join(f"  v{index} = {index};\n" for index in range(3))
    source = f"function work() {{\n{body}}}\n"

    analysis = analyze_document(
        source, "script", AnalysisOptions(function_line_threshold=3)
    )

    assert analysis.error is None
    assert [f.name for f in analysis.functions] == ["work"]


def test_den_013_document_has_no_functions_for_stylesheet() -> None:
    analysis = analyze_document(".a { color: red; }", "stylesheet")

    assert analysis.error is None
    assert analysis.functions == []


def test_den_014_percentage_helper_rounds_and_caps() -> None:
    assert density_percentage(1, 3, 0) == 33.33
    assert density_percentage(9, 1, 0) == 100.0
    assert density_percentage(5, 0, 2) == 0.0
