# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Tree-sitter parsing and normalization into ``SyntaxNode`` trees."""

import logging
import re
from functools import lru_cache

import tree_sitter_css
import tree_sitter_html
import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

from cdm.model import Dialect
from cdm.syntax import ParsedTree, ParseFailure, SyntaxNode

logger = logging.getLogger(__name__)

_INTERPOLATION_PATTERN = re.compile(r"#\{.*?\}")

_SCRIPT_TEXT_TYPES: frozenset[str] = frozenset(
    {"comment", "string", "template_string", "jsx_text"}
)
_SCRIPT_RENAMES: dict[str, str] = {"function": "function_expression"}

_STYLE_RULE_TYPES: frozenset[str] = frozenset({"rule_set", "keyframe_block"})
_STYLE_AT_RULE_TYPES: frozenset[str] = frozenset(
    {
        "at_rule",
        "charset_statement",
        "import_statement",
        "keyframes_statement",
        "media_statement",
        "namespace_statement",
        "scope_statement",
        "supports_statement",
    }
)
_STYLE_COMMENT_TYPES: frozenset[str] = frozenset({"comment", "js_comment"})

_MARKUP_ELEMENT_TYPES: frozenset[str] = frozenset(
    {"element", "script_element", "style_element", "template_element"}
)
_MARKUP_TAG_TYPES: frozenset[str] = frozenset(
    {"start_tag", "end_tag", "self_closing_tag"}
)
_MARKUP_TEXT_TYPES: frozenset[str] = frozenset({"text", "raw_text", "entity"})


@lru_cache(maxsize=None)
def _language(grammar: str) -> Language:
    if grammar == "tsx":
        return Language(tree_sitter_typescript.language_tsx())
    if grammar == "css":
        return Language(tree_sitter_css.language())
    return Language(tree_sitter_html.language())


def _parse_bytes(grammar: str, source_bytes: bytes) -> Node:
    parser = Parser()
    parser.language = _language(grammar)
    return parser.parse(source_bytes).root_node


def parse(source: str, dialect: Dialect) -> ParsedTree:
    """Parse source text into a normalized tree for one dialect.

    Args:
        source: Full document text.
        dialect: Source dialect; ``composite`` documents must be decomposed
            first.

    Returns:
        Normalized parsed tree.

    Raises:
        ParseFailure: If the script grammar reports a syntax error or the tree
            is too deep to normalize.
        ValueError: If the dialect cannot be parsed directly.
    """
    if dialect == "script":
        return _parse_script(source)
    if dialect == "stylesheet":
        return _parse_stylesheet(source)
    if dialect in ("markup", "template"):
        return _parse_markup(source, dialect)
    raise ValueError(f"Dialect cannot be parsed directly: {dialect}")


def _parse_script(source: str) -> ParsedTree:
    source_bytes = source.encode("utf-8")
    root = _parse_bytes("tsx", source_bytes)
    if root.has_error:
        raise ParseFailure(
            "script", f"syntax error near line {_first_error_line(root)}"
        )
    normalized = _normalize(_ScriptNormalizer(source_bytes), root, "script")
    return ParsedTree(
        dialect="script", root=normalized, source=source, source_bytes=source_bytes
    )


def _parse_stylesheet(source: str) -> ParsedTree:
    prepared = _INTERPOLATION_PATTERN.sub("", source)
    source_bytes = prepared.encode("utf-8")
    root = _parse_bytes("css", source_bytes)
    if root.has_error:
        logger.debug(
            f"Stylesheet parsed with recovered errors (line={_first_error_line(root)})"
        )
    normalized = _normalize(_StylesheetNormalizer(source_bytes), root, "stylesheet")
    return ParsedTree(
        dialect="stylesheet",
        root=normalized,
        source=prepared,
        source_bytes=source_bytes,
        has_error=root.has_error,
    )


def _parse_markup(source: str, dialect: Dialect) -> ParsedTree:
    source_bytes = source.encode("utf-8")
    root = _parse_bytes("html", source_bytes)
    if root.has_error:
        logger.debug(
            f"Markup parsed with recovered errors (dialect={dialect} line={_first_error_line(root)})"
        )
    normalized = _normalize(_MarkupNormalizer(source_bytes), root, dialect)
    return ParsedTree(
        dialect=dialect,
        root=normalized,
        source=source,
        source_bytes=source_bytes,
        has_error=root.has_error,
    )


def _normalize(normalizer: "_Normalizer", root: Node, dialect: str) -> SyntaxNode:
    try:
        return normalizer.build(root)
    except RecursionError as exc:
        raise ParseFailure(dialect, "syntax tree is too deeply nested") from exc


def _first_error_line(root: Node) -> int:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_error or node.is_missing:
            return node.start_point[0] + 1
        if node.has_error:
            stack.extend(reversed(node.children))
    return 0


def _line_span(node: Node) -> tuple[int, int]:
    """Return 1-based start and end lines of a tree-sitter node.

    A node that ends right after a newline is reported as ending on the line
    holding its last character.
    """
    start_row = node.start_point[0]
    end_row, end_column = node.end_point[0], node.end_point[1]
    if end_column == 0 and end_row > start_row:
        end_row -= 1
    return start_row + 1, end_row + 1


def _iter_named_children(node: Node) -> list[tuple[str | None, Node]]:
    children: list[tuple[str | None, Node]] = []
    cursor = node.walk()
    if not cursor.goto_first_child():
        return children
    while True:
        child = cursor.node
        if child is not None and child.is_named:
            children.append((cursor.field_name, child))
        if not cursor.goto_next_sibling():
            break
    return children


class _Normalizer:
    """Convert a tree-sitter tree into ``SyntaxNode`` objects.

    Subclasses decide which raw nodes are kept, renamed, made transparent
    (replaced by their converted children) or dropped.
    """

    root_type = "root"

    def __init__(self, source_bytes: bytes) -> None:
        self._source_bytes = source_bytes

    def build(self, root: Node) -> SyntaxNode:
        node = self._make(root, self.root_type)
        self._fill(root, node)
        return node

    def _make(
        self, raw: Node, node_type: str, parent: SyntaxNode | None = None
    ) -> SyntaxNode:
        start_line, end_line = _line_span(raw)
        return SyntaxNode(
            type=node_type,
            start_line=start_line,
            end_line=end_line,
            start_byte=raw.start_byte,
            end_byte=raw.end_byte,
            parent=parent,
        )

    def _text(self, raw: Node) -> str:
        return self._source_bytes[raw.start_byte : raw.end_byte].decode(
            "utf-8", errors="replace"
        )

    def _fill(self, raw: Node, node: SyntaxNode) -> None:
        for field_name, raw_child in _iter_named_children(raw):
            converted = self._convert(raw_child, node, field_name)
            node.children.extend(converted)
            if field_name:
                primary = next(
                    (child for child in converted if child.type != "comment"), None
                )
                if primary is not None:
                    node.fields[field_name] = primary

    def _convert(
        self, raw: Node, parent: SyntaxNode, field_name: str | None = None
    ) -> list[SyntaxNode]:
        raise NotImplementedError

    def _hoist(self, raw: Node, parent: SyntaxNode) -> list[SyntaxNode]:
        converted: list[SyntaxNode] = []
        for _, raw_child in _iter_named_children(raw):
            converted.extend(self._convert(raw_child, parent))
        return converted


class _ScriptNormalizer(_Normalizer):
    root_type = "program"

    def _convert(
        self, raw: Node, parent: SyntaxNode, field_name: str | None = None
    ) -> list[SyntaxNode]:
        raw_type = raw.type
        if raw_type == "parenthesized_expression":
            return self._hoist(raw, parent)
        if (
            raw_type == "expression_statement"
            and parent.type == "for_statement"
            and field_name in ("initializer", "condition")
        ):
            return self._hoist(raw, parent)

        node = self._make(raw, _SCRIPT_RENAMES.get(raw_type, raw_type), parent)
        if raw.named_child_count == 0 or raw_type in _SCRIPT_TEXT_TYPES:
            node.text = self._text(raw)
        self._fill(raw, node)
        if raw_type == "for_in_statement":
            self._keep_declaration_kind(raw, node)
        arguments = node.get("arguments")
        if node.type == "call_expression" and arguments is not None:
            if arguments.type == "template_string":
                node.type = "tagged_template_expression"
        return [node]

    def _keep_declaration_kind(self, raw: Node, node: SyntaxNode) -> None:
        # the var/let/const keyword of a for-in/for-of header is an anonymous token
        raw_kind = raw.child_by_field_name("kind")
        if raw_kind is None:
            return
        kind = self._make(raw_kind, "kind", node)
        kind.text = self._text(raw_kind)
        node.fields["kind"] = kind


class _StylesheetNormalizer(_Normalizer):
    root_type = "stylesheet"

    def _convert(
        self, raw: Node, parent: SyntaxNode, field_name: str | None = None
    ) -> list[SyntaxNode]:
        raw_type = raw.type
        if raw_type in _STYLE_COMMENT_TYPES:
            node = self._make(raw, "comment", parent)
            node.text = self._text(raw)
            return [node]
        if raw_type == "declaration":
            return [self._make(raw, "declaration", parent)]
        if raw_type in _STYLE_RULE_TYPES or raw_type in _STYLE_AT_RULE_TYPES:
            node_type = "rule" if raw_type in _STYLE_RULE_TYPES else "atrule"
            node = self._make(raw, node_type, parent)
            for _, raw_child in _iter_named_children(raw):
                if raw_child.type == "block" or raw_child.type in _STYLE_COMMENT_TYPES:
                    node.children.extend(self._convert(raw_child, node))
                elif raw_child.type == "keyframe_block_list":
                    node.children.extend(self._hoist(raw_child, node))
            return [node]
        return self._hoist(raw, parent)


class _MarkupNormalizer(_Normalizer):
    root_type = "document"

    def _convert(
        self, raw: Node, parent: SyntaxNode, field_name: str | None = None
    ) -> list[SyntaxNode]:
        raw_type = raw.type
        if raw_type == "comment":
            node = self._make(raw, "comment", parent)
            node.text = self._text(raw)
            return [node]
        if raw_type in _MARKUP_TEXT_TYPES:
            node = self._make(raw, "text", parent)
            node.text = self._text(raw)
            return [node]
        if raw_type in _MARKUP_ELEMENT_TYPES:
            return [self._convert_element(raw, parent)]
        if raw_type in _MARKUP_TAG_TYPES:
            return []
        node = self._make(raw, raw_type, parent)
        node.children.extend(self._hoist(raw, node))
        return [node]

    def _convert_element(self, raw: Node, parent: SyntaxNode) -> SyntaxNode:
        node = self._make(raw, "element", parent)
        for _, raw_child in _iter_named_children(raw):
            if raw_child.type in ("start_tag", "self_closing_tag"):
                self._read_tag(raw_child, node)
            elif raw_child.type != "end_tag":
                node.children.extend(self._convert(raw_child, node))
        return node

    def _read_tag(self, raw_tag: Node, element: SyntaxNode) -> None:
        for _, raw_child in _iter_named_children(raw_tag):
            if raw_child.type == "tag_name":
                element.name = self._text(raw_child).lower()
            elif raw_child.type == "attribute":
                element.attributes.append(self._convert_attribute(raw_child, element))

    def _convert_attribute(self, raw: Node, element: SyntaxNode) -> SyntaxNode:
        attribute = self._make(raw, "attribute", element)
        for _, raw_child in _iter_named_children(raw):
            if raw_child.type == "attribute_name":
                attribute.name = self._text(raw_child)
            elif raw_child.type in ("attribute_value", "quoted_attribute_value"):
                attribute.text = self._text(raw_child).strip("\"'")
        return attribute
