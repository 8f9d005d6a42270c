# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Markup (HTML) structural analyzer."""

import logging
from collections.abc import Iterable

from cdm.comments import build_comment, split_markup_comment
from cdm.model import CommentRecord, Dialect
from cdm.parsing import parse
from cdm.syntax import ParsedTree, SyntaxNode

logger = logging.getLogger(__name__)


def _text_line(node: SyntaxNode) -> int | None:
    text = node.text or ""
    if not text.strip():
        return None
    # text after a tag's line break starts on the next line
    return node.start_line + 1 if text.startswith("\n") else node.start_line


def collect_markup_lines(nodes: Iterable[SyntaxNode]) -> set[int]:
    """Collect code-bearing lines from markup nodes and their descendants.

    Elements contribute their start and end lines, text nodes only the line of
    their first visible character; whitespace-only text and comments are
    skipped.

    Args:
        nodes: Top-level nodes to walk.

    Returns:
        Code-bearing line numbers.
    """
    lines: set[int] = set()
    for top in nodes:
        for node in (top, *top.iter_descendants()):
            if node.type == "comment":
                continue
            if node.type == "text":
                text_line = _text_line(node)
                if text_line is not None:
                    lines.add(text_line)
                continue
            lines.add(node.start_line)
            lines.add(node.end_line)
    return lines


def collect_markup_comments(nodes: Iterable[SyntaxNode]) -> list[CommentRecord]:
    comments: list[CommentRecord] = []
    for top in nodes:
        for node in (top, *top.iter_descendants()):
            if node.type != "comment":
                continue
            body, kind = split_markup_comment(node.text or "")
            comments.append(build_comment(body, node.start_line, node.end_line, kind))
    return comments


class MarkupAnalyzer:
    """Extract code lines and comments from HTML documents."""

    dialect: Dialect = "markup"

    def parse(self, source: str) -> ParsedTree:
        return parse(source, "markup")

    def extract_lines(self, tree: ParsedTree) -> set[int]:
        return collect_markup_lines(tree.root.children)

    def classify_comments(self, tree: ParsedTree) -> list[CommentRecord]:
        return collect_markup_comments(tree.root.children)

    def count_logical_lines(self, tree: ParsedTree) -> int | None:
        return None
