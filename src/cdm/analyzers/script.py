# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Script (JS/JSX/TS/TSX) structural analyzer."""

import logging

from cdm.comments import build_comment, split_c_style_comment
from cdm.logical_lines import count_script_logical_lines
from cdm.model import CommentRecord, Dialect
from cdm.parsing import parse
from cdm.syntax import ParsedTree

logger = logging.getLogger(__name__)


class ScriptAnalyzer:
    """Extract code lines, comments and logical lines from script sources."""

    dialect: Dialect = "script"

    def parse(self, source: str) -> ParsedTree:
        return parse(source, "script")

    def extract_lines(self, tree: ParsedTree) -> set[int]:
        """Collect start and end lines of every non-comment node.

        Marking the closing line of multi-line constructs lets a comment placed
        after a closing brace count as sharing its line with code.

        Args:
            tree: Parsed script tree.

        Returns:
            Code-bearing line numbers.
        """
        lines: set[int] = set()
        for node in tree.root.iter_descendants():
            if node.type == "comment":
                continue
            lines.add(node.start_line)
            lines.add(node.end_line)
        return lines

    def classify_comments(self, tree: ParsedTree) -> list[CommentRecord]:
        comments: list[CommentRecord] = []
        seen_offsets: set[int] = set()
        for node in tree.root.iter_descendants():
            if node.type != "comment" or node.start_byte in seen_offsets:
                continue
            seen_offsets.add(node.start_byte)
            body, kind = split_c_style_comment(node.text or "")
            comments.append(build_comment(body, node.start_line, node.end_line, kind))
        return comments

    def count_logical_lines(self, tree: ParsedTree) -> int | None:
        return count_script_logical_lines(tree.root)
