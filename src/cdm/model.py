# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Domain models for comment density artifacts."""

from dataclasses import dataclass, field
from typing import Literal

Dialect = Literal["script", "stylesheet", "markup", "template", "composite"]
CommentKind = Literal["line", "block"]
LanguageTag = Literal["zh", "en", "mixed"]

SCRIPT_BEARING_DIALECTS: frozenset[str] = frozenset({"script", "composite"})


@dataclass(frozen=True)
class CommentRecord:
    """Represent one normalized comment.

    Attributes:
        start_line: First source line of the comment (1-based).
        end_line: Last source line of the comment (1-based).
        line_count: Number of meaningful comment lines. For block comments this
            is the count after blank and decoration-only lines are dropped.
        kind: ``line`` or ``block``.
        text: Comment body without delimiters; block bodies keep only the
            surviving lines, joined by newlines.
        collocated: Whether the comment shares its start line with code.
    """

    start_line: int
    end_line: int
    line_count: int
    kind: CommentKind
    text: str
    collocated: bool = False


@dataclass(frozen=True)
class DensityResult:
    """Represent the comment density of one analyzed document.

    Attributes:
        percentage: Density in the closed range ``[0, 100]``, two decimals.
        comments: Comments counted toward the density.
        raw_line_count: Physical non-empty line count.
        logical_line_count: Logical line count, ``0`` where it does not apply.
        comment_line_total: Sum of ``line_count`` over ``comments``.
        complexity_basis: Denominator basis chosen for the document.
        collocated_count: Comments sharing a line with code.
    """

    percentage: float
    comments: list[CommentRecord]
    raw_line_count: int
    logical_line_count: int
    comment_line_total: int
    complexity_basis: int = 0
    collocated_count: int = 0

    @property
    def density_text(self) -> str:
        return f"{self.percentage:.2f}%"

    @classmethod
    def empty(cls) -> "DensityResult":
        return cls(
            percentage=0.0,
            comments=[],
            raw_line_count=0,
            logical_line_count=0,
            comment_line_total=0,
        )


@dataclass(frozen=True)
class FunctionRecord:
    """Represent one function-like construct that met the size threshold.

    Attributes:
        name: Display name, ``Anonymous`` when no binding is found.
        logical_line_count: Logical lines of the isolated construct.
        start_line: Start line in the analyzed document.
        end_line: End line in the analyzed document.
        isolated_source: Regenerated standalone unit for the construct.
        comments: Comments of the isolated unit. Positions are relative to
            ``isolated_source``.
        density: Comment density of the isolated unit.
    """

    name: str
    logical_line_count: int
    start_line: int
    end_line: int
    isolated_source: str
    comments: list[CommentRecord] = field(default_factory=list)
    density: float = 0.0


@dataclass(frozen=True)
class LanguageLengthRecord:
    """Represent the language and length of one comment line."""

    language_tag: LanguageTag
    length: int


@dataclass(frozen=True)
class DocumentAnalysis:
    """Represent the outcome of analyzing one document.

    Attributes:
        density: Density result; zero-valued when ``error`` is set.
        functions: Function records for script-bearing documents.
        error: Failure message, ``None`` on success.
    """

    density: DensityResult
    functions: list[FunctionRecord] = field(default_factory=list)
    error: str | None = None
