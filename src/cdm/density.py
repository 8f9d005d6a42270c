# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Per-document comment density calculation."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from cdm.analyzer import analyzer_for
from cdm.comments import count_physical_lines, has_chinese_prefix, resolve_collocation
from cdm.composite import decompose
from cdm.config import AnalysisOptions
from cdm.model import CommentRecord, Dialect, DensityResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Measurement:
    comments: list[CommentRecord]
    logical_line_count: int | None


def density_percentage(comment_total: int, basis: int, collocated_count: int) -> float:
    """Return the capped density percentage for one basis.

    Args:
        comment_total: Sum of counted comment lines.
        basis: Complexity basis, logical or physical lines.
        collocated_count: Counted comments sharing their start line with code.

    Returns:
        Percentage in ``[0, 100]`` rounded to two decimals; ``0.0`` when the
        basis is zero.
    """
    if basis <= 0:
        return 0.0
    ratio = comment_total / (basis + collocated_count) * 100
    return round(min(ratio, 100.0), 2)


def select_comments(
    comments: Iterable[CommentRecord], options: AnalysisOptions
) -> list[CommentRecord]:
    """Apply the comment language policy.

    Args:
        comments: Candidate comments.
        options: Analysis options holding the Chinese-only policy.

    Returns:
        Comments counted toward a density.
    """
    if not options.only_allow_chinese:
        return list(comments)
    return [
        comment
        for comment in comments
        if has_chinese_prefix(comment, options.chinese_prefix_check_length)
    ]


def compute_density(
    source: str, dialect: Dialect, options: AnalysisOptions | None = None
) -> DensityResult:
    """Compute the comment density of one document.

    The complexity basis is the logical line count for dialects that support
    it when the document has at most ``file_line_threshold`` physical lines,
    and the physical line count otherwise.

    Args:
        source: Full document text.
        dialect: Source dialect.
        options: Analysis options, defaults when omitted.

    Returns:
        Density result for the document.

    Raises:
        ParseFailure: If the document or one of its script parts cannot be
            parsed.
    """
    options = options or AnalysisOptions()
    raw_line_count = count_physical_lines(source)
    if dialect == "composite":
        measurement = _measure_composite(source)
    else:
        measurement = _measure(source, dialect)

    logical_line_count = measurement.logical_line_count
    if logical_line_count is not None and raw_line_count <= options.file_line_threshold:
        basis = logical_line_count
    else:
        basis = raw_line_count

    comments = select_comments(measurement.comments, options)
    collocated_count = sum(1 for comment in comments if comment.collocated)
    comment_total = sum(comment.line_count for comment in comments)
    percentage = density_percentage(comment_total, basis, collocated_count)
    if percentage == 0:
        comments, comment_total, collocated_count = [], 0, 0

    return DensityResult(
        percentage=percentage,
        comments=comments,
        raw_line_count=raw_line_count,
        logical_line_count=logical_line_count or 0,
        comment_line_total=comment_total,
        complexity_basis=basis,
        collocated_count=collocated_count,
    )


def _measure(source: str, dialect: Dialect) -> _Measurement:
    analyzer = analyzer_for(dialect)
    tree = analyzer.parse(source)
    comments = resolve_collocation(
        analyzer.classify_comments(tree), analyzer.extract_lines(tree)
    )
    return _Measurement(
        comments=comments, logical_line_count=analyzer.count_logical_lines(tree)
    )


def _measure_composite(source: str) -> _Measurement:
    parts = decompose(source)
    measurements = [_measure(parts.template, "template")]
    if parts.script.strip():
        measurements.append(_measure(parts.script, "script"))
    if parts.style.strip():
        measurements.append(_measure(parts.style, "stylesheet"))

    merged = [c for m in measurements for c in m.comments if c.kind == "line"]
    merged.extend(c for m in measurements for c in m.comments if c.kind == "block")
    logical_line_count = sum(m.logical_line_count or 0 for m in measurements)
    logger.debug(
        f"Decomposed component (parts={len(measurements)} comments={len(merged)} lloc={logical_line_count})"
    )
    return _Measurement(comments=merged, logical_line_count=logical_line_count)
