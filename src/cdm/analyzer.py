# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Dialect analyzer interface, selection and error DTOs."""

from dataclasses import dataclass
from typing import Protocol

from cdm.analyzers import (
    MarkupAnalyzer,
    ScriptAnalyzer,
    StylesheetAnalyzer,
    TemplateAnalyzer,
)
from cdm.model import CommentRecord, Dialect
from cdm.syntax import ParsedTree


@dataclass(frozen=True)
class AnalyzerError:
    """Represent an analyzer error for one file."""

    file_path: str
    message: str


class DialectAnalyzer(Protocol):
    """Dialect-specific structural strategy contract."""

    dialect: Dialect

    def parse(self, source: str) -> ParsedTree:
        """Parse source text into a normalized tree."""

    def extract_lines(self, tree: ParsedTree) -> set[int]:
        """Return the code-bearing line numbers of a document."""

    def classify_comments(self, tree: ParsedTree) -> list[CommentRecord]:
        """Return normalized comment records in source order."""

    def count_logical_lines(self, tree: ParsedTree) -> int | None:
        """Return the logical line count, ``None`` where it does not apply."""


def analyzer_for(dialect: Dialect) -> DialectAnalyzer:
    """Return the structural strategy for a dialect.

    Args:
        dialect: Source dialect other than ``composite``.

    Returns:
        Analyzer instance for the dialect.

    Raises:
        ValueError: If the dialect has no single-tree strategy.
    """
    if dialect == "script":
        return ScriptAnalyzer()
    if dialect == "stylesheet":
        return StylesheetAnalyzer()
    if dialect == "markup":
        return MarkupAnalyzer()
    if dialect == "template":
        return TemplateAnalyzer()
    raise ValueError(f"No structural analyzer for dialect: {dialect}")


def extract_lines(tree: ParsedTree) -> set[int]:
    return analyzer_for(tree.dialect).extract_lines(tree)


def classify_comments(
    document: ParsedTree | str, dialect: Dialect
) -> list[CommentRecord]:
    """Classify the comments of raw text or a parsed tree.

    Args:
        document: Raw source text or an already parsed tree.
        dialect: Source dialect other than ``composite``.

    Returns:
        Comment records with ``collocated`` unset.

    Raises:
        ParseFailure: If raw text cannot be parsed.
    """
    analyzer = analyzer_for(dialect)
    tree = document if isinstance(document, ParsedTree) else analyzer.parse(document)
    return analyzer.classify_comments(tree)
