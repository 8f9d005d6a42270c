# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Stylesheet (CSS/SCSS/Sass/LESS) structural analyzer."""

import logging

from cdm.comments import build_comment, split_c_style_comment
from cdm.model import CommentRecord, Dialect
from cdm.parsing import parse
from cdm.syntax import ParsedTree

logger = logging.getLogger(__name__)

_CODE_NODE_TYPES: frozenset[str] = frozenset({"rule", "declaration"})


class StylesheetAnalyzer:
    """Extract code lines and comments from stylesheet sources."""

    dialect: Dialect = "stylesheet"

    def parse(self, source: str) -> ParsedTree:
        return parse(source, "stylesheet")

    def extract_lines(self, tree: ParsedTree) -> set[int]:
        """Collect start and end lines of rules and declarations.

        Args:
            tree: Parsed stylesheet tree.

        Returns:
            Code-bearing line numbers.
        """
        lines: set[int] = set()
        for node in tree.root.iter_descendants():
            if node.type in _CODE_NODE_TYPES:
                lines.add(node.start_line)
                lines.add(node.end_line)
        return lines

    def classify_comments(self, tree: ParsedTree) -> list[CommentRecord]:
        """Collect top-level comments and comments one level inside rule bodies.

        Comments inside rules nested in another rule or at-rule are not
        collected.

        Args:
            tree: Parsed stylesheet tree.

        Returns:
            Comment records in source order.
        """
        comments: list[CommentRecord] = []
        candidates = [
            node
            for top in tree.root.children
            for node in (top, *top.children)
        ]
        for node in candidates:
            if node.type != "comment":
                continue
            body, kind = split_c_style_comment(node.text or "")
            comments.append(build_comment(body, node.start_line, node.end_line, kind))
        return comments

    def count_logical_lines(self, tree: ParsedTree) -> int | None:
        return None
