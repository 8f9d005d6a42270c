# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Per-document analysis boundary."""

import logging

from cdm.composite import decompose
from cdm.config import AnalysisOptions
from cdm.density import compute_density
from cdm.functions import measure_functions
from cdm.model import (
    SCRIPT_BEARING_DIALECTS,
    DensityResult,
    Dialect,
    DocumentAnalysis,
    FunctionRecord,
)
from cdm.syntax import ParseFailure

logger = logging.getLogger(__name__)


def analyze_document(
    source: str,
    dialect: Dialect,
    options: AnalysisOptions | None = None,
    document_id: str = "<memory>",
) -> DocumentAnalysis:
    """Analyze one document and convert parse failures into a zero result.

    Args:
        source: Full document text.
        dialect: Source dialect.
        options: Analysis options, defaults when omitted.
        document_id: Identity used in log messages, usually a file path.

    Returns:
        Density and function records, or a zero-valued result carrying the
        failure message.
    """
    options = options or AnalysisOptions()
    try:
        density = compute_density(source, dialect, options)
        functions: list[FunctionRecord] = []
        if dialect in SCRIPT_BEARING_DIALECTS:
            script = source if dialect == "script" else decompose(source).script
            functions = measure_functions(
                script, options.function_line_threshold, options
            )
    except ParseFailure as exc:
        logger.warning(
            f"Failed to analyze document (file_path={document_id} error={exc})"
        )
        return DocumentAnalysis(density=DensityResult.empty(), error=str(exc))
    return DocumentAnalysis(density=density, functions=functions)
