# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Single-file component decomposition into template, script and style."""

import logging
import re
from dataclasses import dataclass

from cdm.syntax import SyntaxNode

logger = logging.getLogger(__name__)

_SCRIPT_BLOCK_PATTERN = re.compile(
    r"<script\b[^>]*>([\s\S]*?)</script\s*>", re.IGNORECASE
)
_SCRIPT_OPEN_PATTERN = re.compile(r"<script\b", re.IGNORECASE)
_STYLE_BLOCK_PATTERN = re.compile(
    r"<style\b[^>]*>([\s\S]*?)</style\s*>", re.IGNORECASE
)


@dataclass(frozen=True)
class ComponentParts:
    """Represent the three sub-documents of one component file.

    Every sub-document keeps the line numbering of the original file: regions
    that belong to another sub-document are replaced by their newlines only.

    Attributes:
        template: Source without the trailing script segment and style blocks.
        script: Content of the last script block.
        style: Contents of every style block, tags stripped.
    """

    template: str
    script: str
    style: str


def decompose(source: str) -> ComponentParts:
    """Split a component file into template, script and style sub-documents.

    Only the last script block is kept when several exist.

    Args:
        source: Full component source text.

    Returns:
        Line-aligned sub-documents.
    """
    return ComponentParts(
        template=_extract_template(source),
        script=_extract_script(source),
        style=_extract_style(source),
    )


def _newlines_only(text: str) -> str:
    return "\n" * text.count("\n")


def _extract_template(source: str) -> str:
    script_openings = list(_SCRIPT_OPEN_PATTERN.finditer(source))
    template = source
    if script_openings:
        cut = script_openings[-1].start()
        template = source[:cut] + _newlines_only(source[cut:])
    return _STYLE_BLOCK_PATTERN.sub(
        lambda match: _newlines_only(match.group(0)), template
    )


def _extract_script(source: str) -> str:
    matches = list(_SCRIPT_BLOCK_PATTERN.finditer(source))
    if not matches:
        return ""
    if len(matches) > 1:
        logger.debug(
            f"Multiple script blocks found; analyzing the last one (count={len(matches)})"
        )
    last = matches[-1]
    return "\n" * source.count("\n", 0, last.start(1)) + last.group(1)


def _extract_style(source: str) -> str:
    pieces: list[str] = []
    cursor = 0
    for match in _STYLE_BLOCK_PATTERN.finditer(source):
        pieces.append("\n" * source.count("\n", cursor, match.start(1)))
        pieces.append(match.group(1))
        cursor = match.end(1)
    return "".join(pieces)


def find_template_body(root: SyntaxNode) -> list[SyntaxNode]:
    """Return the child nodes of the top-level ``<template>`` element.

    Args:
        root: Normalized markup document root.

    Returns:
        Template body nodes, empty when the document has no template element.
    """
    for node in root.children:
        if node.type == "element" and node.name == "template":
            return node.children
    return []
