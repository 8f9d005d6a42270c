# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Normalized syntax tree shared by every dialect."""

from collections.abc import Iterator
from dataclasses import dataclass, field

from cdm.model import Dialect


class ParseFailure(RuntimeError):
    """Represent a source document that cannot be parsed for its dialect."""

    def __init__(self, dialect: str, message: str) -> None:
        super().__init__(f"{dialect}: {message}")
        self.dialect = dialect


@dataclass(eq=False)
class SyntaxNode:
    """Represent one node of a normalized tree.

    Attributes:
        type: Node type tag.
        start_line: Start line (1-based).
        end_line: Line of the last character (1-based).
        start_byte: Start offset into the UTF-8 source.
        end_byte: End offset into the UTF-8 source.
        text: Source text for leaves, comments and text nodes.
        name: Tag name for markup elements, attribute name for attributes.
        children: Ordered child nodes.
        fields: Named children, keyed by grammar field name.
        attributes: Start-tag attributes of markup elements.
        parent: Enclosing node, ``None`` for the root.
    """

    type: str
    start_line: int
    end_line: int
    start_byte: int = 0
    end_byte: int = 0
    text: str | None = None
    name: str | None = None
    children: list["SyntaxNode"] = field(default_factory=list)
    fields: dict[str, "SyntaxNode"] = field(default_factory=dict)
    attributes: list["SyntaxNode"] = field(default_factory=list)
    parent: "SyntaxNode | None" = field(default=None, repr=False)

    def get(self, field_name: str) -> "SyntaxNode | None":
        return self.fields.get(field_name)

    def iter_descendants(self) -> Iterator["SyntaxNode"]:
        """Yield every descendant in pre-order, excluding the node itself."""
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def first_named_child(
        self, excluded: frozenset[str] = frozenset({"comment"})
    ) -> "SyntaxNode | None":
        for child in self.children:
            if child.type not in excluded:
                return child
        return None


@dataclass(frozen=True)
class ParsedTree:
    """Represent one parsed and normalized document."""

    dialect: Dialect
    root: SyntaxNode
    source: str
    source_bytes: bytes = b""
    has_error: bool = False

    def slice(self, node: SyntaxNode) -> str:
        """Return the exact source text spanned by ``node``."""
        return self.source_bytes[node.start_byte : node.end_byte].decode("utf-8")
