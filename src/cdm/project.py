# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Project walking, ignore rules and per-file reports."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import pathspec

from cdm.analyzer import AnalyzerError
from cdm.config import AnalysisOptions
from cdm.document import analyze_document
from cdm.language import CommentLengthEntry, comment_length_entries
from cdm.model import DensityResult, Dialect, FunctionRecord

logger = logging.getLogger(__name__)

DIALECT_BY_SUFFIX: dict[str, Dialect] = {
    ".js": "script",
    ".jsx": "script",
    ".mjs": "script",
    ".cjs": "script",
    ".ts": "script",
    ".tsx": "script",
    ".css": "stylesheet",
    ".scss": "stylesheet",
    ".sass": "stylesheet",
    ".less": "stylesheet",
    ".html": "markup",
    ".htm": "markup",
    ".vue": "composite",
}


@dataclass(frozen=True)
class FileReport:
    """Represent the analysis report of one file."""

    file_path: str
    dialect: Dialect
    density: DensityResult
    raw_line_count: int
    logical_line_count: int
    comment_lengths: list[CommentLengthEntry] = field(default_factory=list)
    functions: list[FunctionRecord] = field(default_factory=list)


@dataclass(frozen=True)
class ProjectReport:
    """Represent file reports sorted by descending density plus errors."""

    files: list[FileReport]
    errors: list[AnalyzerError]


class IgnoreMatcher:
    """Match project paths against .gitignore patterns."""

    def __init__(self, spec: pathspec.GitIgnoreSpec) -> None:
        self._spec = spec

    @classmethod
    def from_project_root(cls, root: Path) -> "IgnoreMatcher":
        """Build matcher from root and nested .gitignore files.

        Args:
            root: Project root directory.

        Returns:
            Configured ignore matcher.

        Raises:
            OSError: If .gitignore files cannot be read.
            UnicodeDecodeError: If .gitignore files contain invalid UTF-8.
        """
        patterns: list[str] = []
        for ignore_path in sorted(root.rglob(".gitignore")):
            base = ignore_path.parent.relative_to(root).as_posix()
            if base == ".":
                base = ""
            for line in ignore_path.read_text(encoding="utf-8").splitlines():
                patterns.append(_translate_gitignore_line(line=line, base=base))
        return cls(spec=pathspec.GitIgnoreSpec.from_lines(patterns))

    def matches(self, relative_path: str, is_dir: bool) -> bool:
        """Check whether a project-relative path is ignored.

        Args:
            relative_path: Project-relative POSIX path.
            is_dir: Whether the path is a directory.

        Returns:
            True when the path should be skipped.
        """
        normalized = relative_path.replace(os.sep, "/").strip("/")
        if not normalized:
            return False
        if self._spec.match_file(normalized):
            return True
        return is_dir and self._spec.match_file(f"{normalized}/")


def dialect_for_path(path: Path) -> Dialect | None:
    return DIALECT_BY_SUFFIX.get(path.suffix.lower())


def collect_source_files(root: Path, options: AnalysisOptions) -> list[Path]:
    """Collect analyzable files beneath a root directory.

    ``.git``, configured skip directories and ignored paths are pruned; only
    files with a known dialect are returned.

    Args:
        root: Project root directory.
        options: Analysis options holding the skip directories.

    Returns:
        Sorted file paths.

    Raises:
        OSError: If .gitignore files cannot be read.
    """
    matcher = IgnoreMatcher.from_project_root(root)
    skipped = {".git", *options.skip_dirs}
    files: list[Path] = []
    queue: list[Path] = [root]
    while queue:
        current = queue.pop(0)
        for child in sorted(current.iterdir(), key=lambda item: item.name):
            relative = child.relative_to(root).as_posix()
            is_dir = child.is_dir()
            if is_dir and child.name in skipped:
                logger.debug(f"Skipping directory (path={relative})")
                continue
            if matcher.matches(relative_path=relative, is_dir=is_dir):
                continue
            if is_dir:
                queue.append(child)
            elif dialect_for_path(child) is not None:
                files.append(child)
    return sorted(files)


def analyze_file(
    file_path: Path, dialect: Dialect, options: AnalysisOptions, display_path: str
) -> tuple[FileReport, AnalyzerError | None]:
    """Analyze one file and build its report.

    Args:
        file_path: File to read.
        dialect: Dialect of the file.
        options: Analysis options.
        display_path: Path shown in reports and errors.

    Returns:
        The file report and an error when reading or parsing failed.
    """
    try:
        source = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning(
            f"Skipping file due to read failure (file_path={display_path} error={exc})"
        )
        return (
            _build_report(display_path, dialect, DensityResult.empty(), []),
            AnalyzerError(file_path=display_path, message=str(exc)),
        )

    analysis = analyze_document(source, dialect, options, document_id=display_path)
    report = _build_report(display_path, dialect, analysis.density, analysis.functions)
    if analysis.error is not None:
        return report, AnalyzerError(file_path=display_path, message=analysis.error)
    return report, None


def analyze_project(
    root: Path, options: AnalysisOptions | None = None
) -> ProjectReport:
    """Analyze every supported file beneath a directory, or one file.

    Args:
        root: Project directory or a single source file.
        options: Analysis options, defaults when omitted.

    Returns:
        Project report with files sorted by descending density.

    Raises:
        FileNotFoundError: If ``root`` does not exist.
        ValueError: If ``root`` is a file of an unsupported type.
        OSError: If .gitignore files cannot be read.
    """
    options = options or AnalysisOptions()
    if not root.exists():
        raise FileNotFoundError(f"Path does not exist: {root}")

    if root.is_file():
        dialect = dialect_for_path(root)
        if dialect is None:
            raise ValueError(f"Unsupported file type: {root}")
        targets = [(root, dialect, root.name)]
    else:
        targets = [
            (path, dialect_for_path(path), path.relative_to(root).as_posix())
            for path in collect_source_files(root, options)
        ]

    reports: list[FileReport] = []
    errors: list[AnalyzerError] = []
    for path, dialect, display_path in targets:
        report, error = analyze_file(path, dialect, options, display_path)
        reports.append(report)
        if error is not None:
            errors.append(error)

    reports.sort(key=lambda report: (-report.density.percentage, report.file_path))
    logger.info(
        f"Project analysis completed (files={len(reports)} errors={len(errors)})"
    )
    return ProjectReport(files=reports, errors=errors)


def _build_report(
    file_path: str,
    dialect: Dialect,
    density: DensityResult,
    functions: list[FunctionRecord],
) -> FileReport:
    return FileReport(
        file_path=file_path,
        dialect=dialect,
        density=density,
        raw_line_count=density.raw_line_count,
        logical_line_count=density.logical_line_count,
        comment_lengths=[
            entry
            for comment in density.comments
            for entry in comment_length_entries(comment)
        ],
        functions=functions,
    )


def _translate_gitignore_line(line: str, base: str) -> str:
    """Translate one nested .gitignore line to a root-relative pattern.

    Patterns without an inner slash match at any depth below their
    .gitignore, so they are prefixed with ``base/**/``.

    Args:
        line: Original .gitignore line.
        base: Parent directory relative to project root.

    Returns:
        Root-relative pattern line.
    """
    if not base or not line.strip() or line.lstrip().startswith("#"):
        return line
    if line.startswith(r"\!") or line.startswith(r"\#"):
        return line
    is_negation = line.startswith("!")
    pattern = line[1:] if is_negation else line
    anchored = "/" in pattern.rstrip("/")
    normalized = pattern.lstrip("/")
    prefix = f"/{base}/" if anchored else f"/{base}/**/"
    translated = f"{prefix}{normalized}"
    return f"!{translated}" if is_negation else translated
