# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Comment record construction, language filtering and collocation."""

import logging
import re
from collections.abc import Iterable
from dataclasses import replace

from cdm.model import CommentKind, CommentRecord

logger = logging.getLogger(__name__)

_CHINESE_CHARACTER_PATTERN = re.compile(r"[\u4e00-\u9fa5]")


def meaningful_block_lines(text: str) -> list[str]:
    """Drop blank and decoration-only lines from a block comment body.

    Args:
        text: Block comment body without its delimiters.

    Returns:
        Surviving lines, untrimmed.
    """
    lines: list[str] = []
    for line in text.split("\n"):
        stripped = line.strip()
        if stripped and stripped != "*":
            lines.append(line)
    return lines


def build_comment(
    text: str, start_line: int, end_line: int, kind: CommentKind
) -> CommentRecord:
    """Build one comment record from a delimiter-free body.

    Args:
        text: Comment body without delimiters.
        start_line: First source line of the comment.
        end_line: Last source line of the comment.
        kind: Comment kind.

    Returns:
        Comment record with ``collocated`` unset.
    """
    end_line = max(end_line, start_line)
    if kind == "block":
        lines = meaningful_block_lines(text)
        return CommentRecord(
            start_line=start_line,
            end_line=end_line,
            line_count=len(lines),
            kind="block",
            text="\n".join(lines),
        )
    return CommentRecord(
        start_line=start_line,
        end_line=end_line,
        line_count=end_line - start_line + 1,
        kind="line",
        text=text,
    )


def split_c_style_comment(raw: str) -> tuple[str, CommentKind]:
    """Split a ``//`` or ``/* */`` comment into its body and kind."""
    if raw.startswith("//"):
        return raw[2:], "line"
    body = raw[2:] if raw.startswith("/*") else raw
    if body.endswith("*/"):
        body = body[:-2]
    return body, "block"


def split_markup_comment(raw: str) -> tuple[str, CommentKind]:
    """Split an HTML comment into its body and kind.

    Comments spanning several lines are block comments, others line comments.
    """
    body = raw[4:] if raw.startswith("<!--") else raw
    if body.endswith("-->"):
        body = body[:-3]
    return body, "block" if "\n" in body else "line"


def resolve_collocation(
    comments: Iterable[CommentRecord], code_lines: set[int]
) -> list[CommentRecord]:
    """Flag comments whose start line also carries code.

    Args:
        comments: Comment records to resolve.
        code_lines: Code-bearing line numbers of the same document.

    Returns:
        New records with ``collocated`` set.
    """
    return [
        replace(comment, collocated=comment.start_line in code_lines)
        for comment in comments
    ]


def has_chinese_prefix(comment: CommentRecord, prefix_length: int) -> bool:
    """Check whether the leading characters of a comment contain Chinese.

    Args:
        comment: Comment record.
        prefix_length: Number of leading characters inspected after trimming.

    Returns:
        True when at least one CJK ideograph appears in the prefix.
    """
    prefix = comment.text.strip()[:prefix_length]
    return _CHINESE_CHARACTER_PATTERN.search(prefix) is not None


def count_physical_lines(source: str) -> int:
    """Count lines that are not empty strings."""
    return sum(1 for line in source.split("\n") if line)
