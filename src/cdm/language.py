# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Comment language detection and length measurement."""

import re
from dataclasses import dataclass

from cdm.model import CommentKind, CommentRecord, LanguageLengthRecord, LanguageTag

_CHINESE_CLASS = r"\u4e00-\u9fa51-9.\\()（）=:：{}\[\]，,。_+*\-?!！、<>\"“'‘"

_ALL_CHINESE_PATTERN = re.compile(rf"^[{_CHINESE_CLASS}]+$")
_CHINESE_RUN_PATTERN = re.compile(rf"[{_CHINESE_CLASS}]+")
_ALL_ENGLISH_PATTERN = re.compile(r"^[a-zA-Z\s]+$")
_ENGLISH_WORD_PATTERN = re.compile(r"[a-zA-Z]+")


@dataclass(frozen=True)
class CommentLengthEntry:
    """Represent the language and length of one reported comment line."""

    language_tag: LanguageTag
    length: int
    start_line: int
    end_line: int
    kind: CommentKind
    text: str


def measure_comment_text(text: str) -> LanguageLengthRecord:
    """Classify one comment line by language and measure its length.

    Pure Chinese text (ideographs, digits and punctuation) is measured in
    characters, pure English text in words. Mixed text adds the character
    count of its Chinese runs to the number of English words.

    Args:
        text: Comment line text.

    Returns:
        Language tag and length.
    """
    stripped = text.strip()
    if _ALL_CHINESE_PATTERN.match(stripped):
        return LanguageLengthRecord(language_tag="zh", length=len(stripped))
    if _ALL_ENGLISH_PATTERN.match(stripped):
        return LanguageLengthRecord(language_tag="en", length=len(stripped.split()))
    chinese_length = sum(len(run) for run in _CHINESE_RUN_PATTERN.findall(stripped))
    english_length = len(_ENGLISH_WORD_PATTERN.findall(stripped))
    return LanguageLengthRecord(
        language_tag="mixed", length=chinese_length + english_length
    )


def _strip_decoration(line: str) -> str:
    return line.strip().lstrip("*").strip()


def comment_length_entries(comment: CommentRecord) -> list[CommentLengthEntry]:
    """Expand a comment into per-line language and length entries.

    Block comments yield one entry per surviving line with leading ``*``
    decoration removed; line comments yield a single entry.

    Args:
        comment: Comment record counted toward a density.

    Returns:
        Length entries in line order.
    """
    if comment.kind == "block":
        lines = [_strip_decoration(line) for line in comment.text.split("\n")]
    else:
        lines = [comment.text.strip()]
    entries: list[CommentLengthEntry] = []
    for line in lines:
        measured = measure_comment_text(line)
        entries.append(
            CommentLengthEntry(
                language_tag=measured.language_tag,
                length=measured.length,
                start_line=comment.start_line,
                end_line=comment.end_line,
                kind=comment.kind,
                text=line,
            )
        )
    return entries
