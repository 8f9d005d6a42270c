# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Component template structural analyzer."""

import logging

from cdm.analyzers.markup import collect_markup_comments, collect_markup_lines
from cdm.composite import find_template_body
from cdm.logical_lines import count_template_logical_lines
from cdm.model import CommentRecord, Dialect
from cdm.parsing import parse
from cdm.syntax import ParsedTree

logger = logging.getLogger(__name__)


class TemplateAnalyzer:
    """Analyze the body of a component's top-level ``<template>`` element."""

    dialect: Dialect = "template"

    def parse(self, source: str) -> ParsedTree:
        return parse(source, "template")

    def extract_lines(self, tree: ParsedTree) -> set[int]:
        return collect_markup_lines(find_template_body(tree.root))

    def classify_comments(self, tree: ParsedTree) -> list[CommentRecord]:
        return collect_markup_comments(find_template_body(tree.root))

    def count_logical_lines(self, tree: ParsedTree) -> int | None:
        return count_template_logical_lines(find_template_body(tree.root))
