# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Function isolation and per-function density measurement."""

import logging
import re
from dataclasses import dataclass

from cdm.analyzers import ScriptAnalyzer
from cdm.comments import resolve_collocation
from cdm.config import AnalysisOptions
from cdm.density import density_percentage, select_comments
from cdm.logical_lines import count_script_logical_lines
from cdm.model import FunctionRecord
from cdm.syntax import ParsedTree, ParseFailure, SyntaxNode

logger = logging.getLogger(__name__)

ANONYMOUS = "Anonymous"
ISOLATED_CLASS_NAME = "IsolatedClass"
_FALLBACK_BINDING = "isolatedFunction"

_DECLARATION_TYPES: frozenset[str] = frozenset(
    {"function_declaration", "generator_function_declaration"}
)
_EXPRESSION_TYPES: frozenset[str] = frozenset(
    {"function_expression", "generator_function"}
)
_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_$][\w$]*$")
_RESERVED_WORDS: frozenset[str] = frozenset(
    """
    await break case catch class const continue debugger default delete do else
    enum export extends false finally for function if import in instanceof let
    new null return static super switch this throw true try typeof var void
    while with yield
    """.split()
)


@dataclass(frozen=True)
class _IsolatedUnit:
    name: str
    node: SyntaxNode
    counted_source: str
    isolated_source: str
    wrapper_offset: int


def measure_functions(
    document: ParsedTree | str,
    threshold: int = 15,
    options: AnalysisOptions | None = None,
) -> list[FunctionRecord]:
    """Isolate function-like constructs and measure each one alone.

    Function declarations, function expressions, arrow functions and class
    methods are rebuilt as standalone units, re-parsed and measured. Units
    below ``threshold`` logical lines are discarded.

    Args:
        document: Script source text or an already parsed script tree.
        threshold: Minimum logical line count of a reported function.
        options: Analysis options for the comment language policy.

    Returns:
        Function records in source order.

    Raises:
        ParseFailure: If raw source text cannot be parsed.
    """
    options = options or AnalysisOptions()
    analyzer = ScriptAnalyzer()
    tree = document if isinstance(document, ParsedTree) else analyzer.parse(document)
    records: list[FunctionRecord] = []
    for node in tree.root.iter_descendants():
        unit = _isolate(tree, node)
        if unit is None:
            continue
        record = _measure_unit(analyzer, unit, threshold, options)
        if record is not None:
            records.append(record)
    return records


def _isolate(tree: ParsedTree, node: SyntaxNode) -> _IsolatedUnit | None:
    if node.type in _DECLARATION_TYPES:
        leading = _leading_comments(tree, _export_anchor(node))
        source = leading + tree.slice(node)
        return _IsolatedUnit(_function_name(tree, node), node, source, source, 0)
    if node.type in _EXPRESSION_TYPES and _parent_type(node) == "export_statement":
        # an exported default function stands alone without a binding
        export = node.parent
        source = _leading_comments(tree, export) + tree.slice(export)
        return _IsolatedUnit(_function_name(tree, node), node, source, source, 0)
    if node.type in _EXPRESSION_TYPES:
        name = _function_name(tree, node)
        leading = _leading_comments(tree, _binding_anchor(node))
        source = f"{leading}const {_binding_identifier(name)} = {tree.slice(node)};"
        return _IsolatedUnit(name, node, source, source, 1)
    if node.type == "arrow_function":
        name = _function_name(tree, node)
        arrow = _block_arrow(tree, node)
        leading = _leading_comments(tree, _binding_anchor(node))
        isolated = f"{leading}const {_binding_identifier(name)} = {arrow};"
        return _IsolatedUnit(name, node, arrow, isolated, 0)
    if node.type == "method_definition" and _parent_type(node) == "class_body":
        leading = _leading_comments(tree, node)
        source = f"{leading}class {ISOLATED_CLASS_NAME} {{\n{tree.slice(node)}\n}}"
        return _IsolatedUnit(_function_name(tree, node), node, source, source, 0)
    return None


def _measure_unit(
    analyzer: ScriptAnalyzer,
    unit: _IsolatedUnit,
    threshold: int,
    options: AnalysisOptions,
) -> FunctionRecord | None:
    try:
        counted_tree = analyzer.parse(unit.counted_source)
        isolated_tree = (
            counted_tree
            if unit.isolated_source == unit.counted_source
            else analyzer.parse(unit.isolated_source)
        )
    except ParseFailure as exc:
        logger.debug(
            f"Dropping function that failed to re-parse (name={unit.name} line={unit.node.start_line} error={exc})"
        )
        return None

    measured = count_script_logical_lines(counted_tree.root)
    if measured < threshold:
        return None
    logical_line_count = measured - unit.wrapper_offset

    comments = resolve_collocation(
        analyzer.classify_comments(isolated_tree),
        analyzer.extract_lines(isolated_tree),
    )
    comments = select_comments(comments, options)
    collocated_count = sum(1 for comment in comments if comment.collocated)
    comment_total = sum(comment.line_count for comment in comments)
    density = density_percentage(comment_total, logical_line_count, collocated_count)
    return FunctionRecord(
        name=unit.name,
        logical_line_count=logical_line_count,
        start_line=unit.node.start_line,
        end_line=unit.node.end_line,
        isolated_source=unit.isolated_source,
        comments=comments if density > 0 else [],
        density=density,
    )


def _parent_type(node: SyntaxNode | None) -> str:
    if node is None or node.parent is None:
        return ""
    return node.parent.type


def _function_name(tree: ParsedTree, node: SyntaxNode) -> str:
    """Resolve a display name for a function-like construct.

    The construct's own identifier wins, then the variable, property, field
    or assignment target it is bound to.
    """
    own_name = node.get("name")
    if own_name is not None:
        return tree.slice(own_name)
    parent = node.parent
    if parent is None:
        return ANONYMOUS
    if parent.type == "variable_declarator":
        target = parent.get("name")
    elif parent.type == "pair":
        target = parent.get("key")
    elif parent.type == "public_field_definition":
        target = parent.get("name") or parent.get("property")
    elif parent.type == "assignment_expression":
        target = parent.get("left")
        if target is not None and target.type == "member_expression":
            target = target.get("property")
    else:
        target = None
    if target is None or target.type not in (
        "identifier",
        "property_identifier",
        "private_property_identifier",
        "string",
        "number",
    ):
        return ANONYMOUS
    return tree.slice(target).strip("\"'")


def _binding_identifier(name: str) -> str:
    if _IDENTIFIER_PATTERN.match(name) and name not in _RESERVED_WORDS:
        return name
    return _FALLBACK_BINDING


def _export_anchor(node: SyntaxNode) -> SyntaxNode:
    if node.parent is not None and node.parent.type == "export_statement":
        return node.parent
    return node


def _binding_anchor(node: SyntaxNode) -> SyntaxNode:
    """Return the statement-level node that carries a function's docs.

    Documentation of a bound function expression sits before its grandparent,
    for example the declaration that holds the declarator.
    """
    parent = node.parent
    if parent is None:
        return node
    if parent.type in ("variable_declarator", "assignment_expression"):
        anchor = parent.parent or parent
    else:
        anchor = parent
    return _export_anchor(anchor)


def _leading_comments(tree: ParsedTree, anchor: SyntaxNode) -> str:
    container = anchor.parent
    if container is None:
        return ""
    siblings = container.children
    index = next(
        (position for position, child in enumerate(siblings) if child is anchor), None
    )
    if index is None:
        return ""
    leading: list[SyntaxNode] = []
    for sibling in reversed(siblings[:index]):
        if sibling.type != "comment":
            break
        leading.append(sibling)
    return "".join(f"{tree.slice(comment)}\n" for comment in reversed(leading))


def _block_arrow(tree: ParsedTree, node: SyntaxNode) -> str:
    """Return arrow function text whose body is always a statement block.

    An expression body becomes an explicit ``return`` inside a block so it is
    counted like the equivalent block-bodied arrow.
    """
    text = tree.slice(node)
    body = node.get("body")
    if body is None or body.type == "statement_block":
        return text
    arrow_end = tree.source_bytes.rfind(b"=>", node.start_byte, body.start_byte)
    if arrow_end < 0:
        return text
    split = arrow_end + 2 - node.start_byte
    encoded = text.encode("utf-8")
    head = encoded[:split].decode("utf-8")
    expression = encoded[split:].decode("utf-8").strip()
    return f"{head} {{\n  return {expression};\n}}"
