# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Command line interface for the comment density meter."""

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, TextIO

from rich.console import Console
from rich.logging import RichHandler
from rich.style import Style
from rich.table import Table

from cdm.analyzer import AnalyzerError
from cdm.config import AnalysisOptions
from cdm.project import FileReport, ProjectReport, analyze_project

logger = logging.getLogger(__name__)

TABLE_COLUMN_RATIOS: dict[str, int] = {
    "file_path": 5,
    "dialect": 1,
    "density": 1,
    "raw_lines": 1,
    "logical_lines": 1,
    "comments": 1,
}


def configure_logging(level: int = logging.INFO) -> None:
    """Configure application logging with Rich handler.

    Args:
        level: Logging severity threshold.
    """
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser.

    Returns:
        Configured argument parser instance.
    """
    defaults = AnalysisOptions()
    parser = argparse.ArgumentParser(prog="cdm")
    parser.add_argument("--path", required=True, help="Directory or file to analyze.")
    parser.add_argument(
        "--format",
        choices=("table", "json"),
        default="table",
        help="Output format.",
    )
    parser.add_argument(
        "--output",
        required=False,
        help="Optional output file path for raw JSON when --format json is used.",
    )
    parser.add_argument(
        "--allow-all-languages",
        action="store_true",
        help="Count comments in any language, not only Chinese ones.",
    )
    parser.add_argument(
        "--chinese-prefix-length",
        type=int,
        default=defaults.chinese_prefix_check_length,
        help="Leading comment characters inspected by the Chinese filter.",
    )
    parser.add_argument(
        "--file-line-threshold",
        type=int,
        default=defaults.file_line_threshold,
        help="Largest line count for which logical lines are the basis.",
    )
    parser.add_argument(
        "--function-line-threshold",
        type=int,
        default=defaults.function_line_threshold,
        help="Minimum logical lines of a reported function.",
    )
    parser.add_argument(
        "--skip-dir",
        action="append",
        default=None,
        help="Directory name to skip; may be repeated.",
    )
    parser.add_argument(
        "--show-errors",
        action="store_true",
        help="Report files that failed to read or parse.",
    )
    return parser


def run(argv: list[str], stdout: TextIO, stderr: TextIO) -> int:
    """Run the density command.

    Args:
        argv: CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit:
        logger.warning(f"Argument parsing failed (argv={argv})")
        return 2

    try:
        options = AnalysisOptions.from_mapping(
            {
                "only_allow_chinese": not args.allow_all_languages,
                "chinese_prefix_check_length": args.chinese_prefix_length,
                "file_line_threshold": args.file_line_threshold,
                "function_line_threshold": args.function_line_threshold,
                "skip_dirs": args.skip_dir,
            }
        )
    except ValueError as exc:
        logger.warning(f"Invalid analysis options (error={exc})")
        stderr.write(f"Invalid options: {exc}\n")
        return 2

    root_path = Path(args.path)
    try:
        report = analyze_project(root_path, options)
    except FileNotFoundError:
        logger.warning(f"Path does not exist (path={root_path})")
        stderr.write(f"Path does not exist: {root_path}\n")
        return 2
    except ValueError as exc:
        logger.warning(f"Unsupported path (path={root_path} error={exc})")
        stderr.write(f"{exc}\n")
        return 2
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning(f"Failed to read .gitignore files (error={exc})")
        stderr.write(f"Failed to read .gitignore files: {exc}\n")
        return 2

    errors = report.errors if args.show_errors else []
    if args.show_errors:
        _write_errors(errors=errors, stderr=stderr)
    if args.format == "json":
        payload = _json_payload(report=report, errors=errors)
        if args.output:
            try:
                _write_json_file(payload=payload, output_path=Path(args.output))
            except OSError as exc:
                logger.warning(
                    f"Failed to write JSON output file (output_path={args.output} error={exc})"
                )
                stderr.write(f"Failed to write JSON output file: {args.output}\n")
                return 2
        else:
            _write_json(payload=payload, stdout=stdout)
    else:
        _write_table(files=report.files, stdout=stdout)
    return 0


def _write_errors(errors: list[AnalyzerError], stderr: TextIO) -> None:
    for error in errors:
        stderr.write(f"analyzer_error: {error.file_path}: {error.message}\n")


def _json_payload(report: ProjectReport, errors: list[AnalyzerError]) -> dict[str, Any]:
    return {
        "files": [asdict(file_report) for file_report in report.files],
        "errors": [asdict(error) for error in errors],
    }


def _write_json(payload: dict[str, Any], stdout: TextIO) -> None:
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    console.print(
        json.dumps(payload, indent=2, ensure_ascii=False),
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


def _write_json_file(payload: dict[str, Any], output_path: Path) -> None:
    """Write raw JSON payload to an output file.

    Args:
        payload: Report payload.
        output_path: Target file path.

    Raises:
        OSError: If directory creation or file writing fails.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8"
    )


def _write_table(files: list[FileReport], stdout: TextIO) -> None:
    """Write file densities and reported functions as tables.

    Args:
        files: File reports sorted by descending density.
        stdout: Standard output stream.
    """
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    table = Table(show_header=True, expand=True)
    for column, ratio in TABLE_COLUMN_RATIOS.items():
        justify = "left" if column in ("file_path", "dialect") else "right"
        min_width = None if column == "file_path" else max(len(column), 9)
        table.add_column(
            column, ratio=ratio, justify=justify, min_width=min_width, overflow="fold"
        )
    for file_report in files:
        table.add_row(
            file_report.file_path,
            file_report.dialect,
            file_report.density.density_text,
            str(file_report.raw_line_count),
            str(file_report.logical_line_count),
            str(len(file_report.density.comments)),
        )
    console.print(table)

    for file_report in files:
        if not file_report.functions:
            continue
        console.rule(file_report.file_path, style=Style(color="cyan"), characters="-")
        functions_table = Table(show_header=True, expand=True)
        functions_table.add_column("name", ratio=4, overflow="fold")
        functions_table.add_column("lines", ratio=2, justify="right", min_width=9)
        functions_table.add_column(
            "logical_lines", ratio=1, justify="right", min_width=13
        )
        functions_table.add_column("density", ratio=1, justify="right", min_width=8)
        for function in file_report.functions:
            functions_table.add_row(
                function.name,
                f"{function.start_line}-{function.end_line}",
                str(function.logical_line_count),
                f"{function.density:.2f}%",
            )
        console.print(functions_table)


def main() -> None:
    """Run the CLI application and exit."""
    configure_logging()
    exit_code = run(sys.argv[1:], stdout=sys.stdout, stderr=sys.stderr)
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
