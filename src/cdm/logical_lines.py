# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Logical line (LLOC) counting for script and template trees."""

import logging

from cdm.composite import find_template_body
from cdm.model import Dialect
from cdm.parsing import parse
from cdm.syntax import ParsedTree, SyntaxNode

logger = logging.getLogger(__name__)

SCRIPT_LLOC_WEIGHTS: dict[str, int] = {
    "break_statement": 1,
    "catch_clause": 1,
    "continue_statement": 1,
    "do_statement": 2,
    "for_statement": 1,
    "return_statement": 1,
    "switch_case": 1,
    "switch_default": 1,
    "switch_statement": 1,
    "throw_statement": 1,
    "try_statement": 1,
    "variable_declarator": 1,
    "while_statement": 1,
    "with_statement": 1,
    "assignment_pattern": 1,
    "object_assignment_pattern": 1,
    "tagged_template_expression": 1,
    "pair": 1,
    "pair_pattern": 1,
    "shorthand_property_identifier": 1,
    "shorthand_property_identifier_pattern": 1,
}

TEMPLATE_DIRECTIVES: frozenset[str] = frozenset(
    {"v-if", "v-else-if", "v-else", "v-for", "v-show"}
)


def script_node_weight(node: SyntaxNode) -> int:
    """Return the logical line weight of one script node.

    Args:
        node: Normalized script node with its parent link set.

    Returns:
        Weight contributed by the node alone.
    """
    node_type = node.type
    parent_type = node.parent.type if node.parent is not None else ""
    if node_type in ("assignment_expression", "augmented_assignment_expression"):
        if node.parent is None:
            return 0
        return 0 if parent_type == "expression_statement" else 1
    if node_type == "call_expression":
        return 0 if parent_type in ("expression_statement", "yield_expression") else 1
    if node_type == "expression_statement":
        expression = node.first_named_child()
        if expression is None:
            return 0
        return 0 if expression.type == "arrow_function" else 1
    if node_type == "for_in_statement":
        # a declared loop variable counts as its declarator
        return 2 if node.get("kind") is not None else 1
    if node_type == "if_statement":
        return 2 if node.get("alternative") is not None else 1
    if node_type == "new_expression":
        constructor = node.get("constructor")
        if constructor is None:
            return 0
        return 1 if constructor.type == "function_expression" else 0
    if node_type == "yield_expression":
        return 0 if parent_type == "expression_statement" else 1
    if node_type == "method_definition":
        # object literal methods only; class methods carry no weight
        return 1 if parent_type == "object" else 0
    if node_type in ("required_parameter", "optional_parameter"):
        return 1 if node.get("value") is not None else 0
    return SCRIPT_LLOC_WEIGHTS.get(node_type, 0)


def count_script_logical_lines(root: SyntaxNode) -> int:
    return sum(script_node_weight(node) for node in root.iter_descendants())


def is_template_directive(attribute: SyntaxNode) -> bool:
    name = (attribute.name or "").split(":", 1)[0].split(".", 1)[0]
    return name in TEMPLATE_DIRECTIVES


def count_template_logical_lines(nodes: list[SyntaxNode]) -> int:
    """Count conditional and loop directives on template elements.

    Args:
        nodes: Template body nodes.

    Returns:
        One logical line per ``v-if``/``v-else-if``/``v-else``/``v-for``/
        ``v-show`` attribute.
    """
    total = 0
    for top in nodes:
        for node in (top, *top.iter_descendants()):
            if node.type != "element":
                continue
            total += sum(
                1 for attribute in node.attributes if is_template_directive(attribute)
            )
    return total


def count_logical_lines(document: ParsedTree | str, dialect: Dialect) -> int:
    """Count logical lines for a script or template document.

    Args:
        document: Raw source text or an already parsed tree.
        dialect: ``script`` or ``template``.

    Returns:
        Logical line count.

    Raises:
        ParseFailure: If raw script text cannot be parsed.
        ValueError: If logical lines do not apply to the dialect.
    """
    tree = document if isinstance(document, ParsedTree) else parse(document, dialect)
    if dialect == "script":
        return count_script_logical_lines(tree.root)
    if dialect == "template":
        return count_template_logical_lines(find_template_body(tree.root))
    raise ValueError(f"Logical lines do not apply to dialect: {dialect}")
