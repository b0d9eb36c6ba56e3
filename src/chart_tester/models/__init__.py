"""Data models for chart-tester."""

from __future__ import annotations

import enum


class PipelineMode(enum.Enum):
    LINT = "lint"
    INSTALL = "install"
    LINT_AND_INSTALL = "lint-and-install"


class OutputFormat(enum.Enum):
    TABLE = "table"
    JSON = "json"
    YAML = "yaml"
