# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
from cdm.composite import decompose, find_template_body
from cdm.parsing import parse

COMPONENT = (
    "<template>\n"
    "  <div>{{ a }}</div>\n"
    "</template>\n"
    "<script>\n"
    "const a = 1\n"
    "</script>\n"
    "<style>\n"
    ".a { color: red; }\n"
    "</style>\n"
)


def test_cmp_001_template_masks_script_and_style_keeping_line_count() -> None:
    parts = decompose(COMPONENT)

    assert parts.template.startswith("<template>\n  <div>{{ a }}</div>\n</template>\n")
    assert "<script" not in parts.template
    assert "<style" not in parts.template
    assert parts.template.count("\n") == COMPONENT.count("\n")


def test_cmp_002_script_keeps_original_line_numbers() -> None:
    parts = decompose(COMPONENT)

    assert parts.script.split("\n")[4] == "const a = 1"


def test_cmp_003_style_keeps_original_line_numbers_without_tags() -> None:
    parts = decompose(COMPONENT)

    assert parts.style.split("\n")[7] == ".a { color: red; }"
    assert "<style" not in parts.style


def test_cmp_004_only_last_script_block_is_analyzed() -> None:
    source = (
        "<script>\nconst a = 1\n</script>\n"
        '<script setup lang="ts">\nconst b: number = 2\n</script>\n'
    )

    parts = decompose(source)

    assert "const b" in parts.script
    assert "const a" not in parts.script
    assert parts.script.split("\n")[4] == "const b: number = 2"


def test_cmp_005_component_without_script_or_style() -> None:
    parts = decompose("<template><p>x</p></template>")

    assert parts.script == ""
    assert parts.style == ""
    assert parts.template == "<template><p>x</p></template>"


def test_cmp_006_template_body_is_children_of_template_element() -> None:
    tree = parse(decompose(COMPONENT).template, "template")

    body = find_template_body(tree.root)

    assert [node.name for node in body if node.type == "element"] == ["div"]


def test_cmp_007_missing_template_element_gives_empty_body() -> None:
    tree = parse("<div>x</div>", "markup")

    assert find_template_body(tree.root) == []
