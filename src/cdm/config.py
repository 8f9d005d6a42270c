# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Analysis options and their defaults."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

_OPTION_ALIASES: dict[str, str] = {
    "onlyAllowChinese": "only_allow_chinese",
    "onlyAllowZh": "only_allow_chinese",
    "chinesePrefixCheckLength": "chinese_prefix_check_length",
    "zhPreNum": "chinese_prefix_check_length",
    "fileLineThreshold": "file_line_threshold",
    "functionLineThreshold": "function_line_threshold",
    "fnLineThreshold": "function_line_threshold",
    "skipDir": "skip_dirs",
}


@dataclass(frozen=True)
class AnalysisOptions:
    """Describe the options recognized by the density pipeline.

    Attributes:
        only_allow_chinese: Count only comments whose leading characters
            contain a Chinese ideograph.
        chinese_prefix_check_length: Number of leading comment characters
            inspected by the Chinese filter.
        file_line_threshold: Largest physical line count for which logical
            lines are used as the density basis.
        function_line_threshold: Minimum logical lines for a function to be
            reported.
        skip_dirs: Directory names skipped by the project walker.
    """

    only_allow_chinese: bool = True
    chinese_prefix_check_length: int = 3
    file_line_threshold: int = 500
    function_line_threshold: int = 15
    skip_dirs: tuple[str, ...] = ("node_modules",)

    def __post_init__(self) -> None:
        if self.chinese_prefix_check_length <= 0:
            raise ValueError("chinese_prefix_check_length must be > 0")
        if self.file_line_threshold < 0:
            raise ValueError("file_line_threshold must be >= 0")
        if self.function_line_threshold < 0:
            raise ValueError("function_line_threshold must be >= 0")

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any] | None) -> "AnalysisOptions":
        """Build options from a mapping, falling back to defaults.

        Both snake_case names and the camelCase names used by JavaScript configs
        are accepted. Unknown keys are ignored.

        Args:
            values: Option values, possibly partial or ``None``.

        Returns:
            Options with every missing value set to its default.

        Raises:
            ValueError: If a provided threshold is out of range.
        """
        known = set(cls.__dataclass_fields__)
        resolved: dict[str, Any] = {}
        for key, value in (values or {}).items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in known:
                logger.debug(f"Ignoring unknown analysis option (option={key})")
                continue
            if value is None:
                continue
            resolved[name] = tuple(value) if name == "skip_dirs" else value
        return cls(**resolved)
