# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Dialect analyzers for the comment density meter."""

from cdm.analyzers.markup import MarkupAnalyzer
from cdm.analyzers.script import ScriptAnalyzer
from cdm.analyzers.stylesheet import StylesheetAnalyzer
from cdm.analyzers.template import TemplateAnalyzer

__all__ = ["MarkupAnalyzer", "ScriptAnalyzer", "StylesheetAnalyzer", "TemplateAnalyzer"]
