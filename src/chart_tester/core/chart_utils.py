"""Chart directory discovery and Chart.yaml parsing."""

from __future__ import annotations

import glob
import logging
import os
import posixpath
from pathlib import Path
from typing import Callable

import yaml

from chart_tester.errors import ChartLookupError, ChartTesterError
from chart_tester.models.chart import ChartMetadata

logger = logging.getLogger(__name__)

CHART_YAML = "Chart.yaml"
VALUES_YAML = "values.yaml"

_YamlLoader = getattr(yaml, "CSafeLoader", yaml.SafeLoader)


def normalize_chart_path(path: str) -> str:
    """Normalise a chart path so that equal directories compare equal."""
    return posixpath.normpath(path.replace(os.sep, "/"))


def parse_chart_yaml(content: str | bytes) -> ChartMetadata:
    """Parse the raw contents of a Chart.yaml file."""
    try:
        data = yaml.load(content, Loader=_YamlLoader)
    except yaml.YAMLError as e:
        raise ChartTesterError(f"Could not parse Chart.yaml: {e}") from e
    if data is not None and not isinstance(data, dict):
        raise ChartTesterError("Could not parse Chart.yaml: not a mapping")
    return ChartMetadata.from_dict(data)


def find_values_files_for_ci(chart: str) -> list[str]:
    """Return the files matching ``<chart>/ci/*-values.yaml``, sorted."""
    return sorted(glob.glob(posixpath.join(chart, "ci", "*-values.yaml")))


def effective_values_files(values_files: list[str]) -> list[str | None]:
    """Values files to test with; ``None`` stands for the chart defaults."""
    if not values_files:
        return [None]
    return list(values_files)


class ChartUtils:
    """Reads chart manifests from the working copy."""

    def is_chart_dir(self, directory: str) -> bool:
        return Path(directory, CHART_YAML).is_file()

    def lookup_chart_dir(self, chart_dirs: list[str], directory: str) -> str:
        """Walk upward from ``directory`` until a chart root is found.

        The search stops at the configured chart parent directories.
        """
        roots = {normalize_chart_path(d) for d in chart_dirs}
        current = normalize_chart_path(directory)
        while current not in (".", "/", "") and current not in roots:
            if self.is_chart_dir(current):
                return current
            current = posixpath.dirname(current) or "."
        raise ChartLookupError(f"No chart directory found for '{directory}'")

    def read_chart_yaml(self, directory: str) -> ChartMetadata:
        path = Path(directory, CHART_YAML)
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ChartTesterError(f"Could not read {path}: {e}") from e
        return parse_chart_yaml(content)


class DirectoryLister:
    def list_child_dirs(self, parent_dir: str, test: Callable[[str], bool]) -> list[str]:
        """List direct child directories of ``parent_dir`` that pass ``test``."""
        try:
            entries = sorted(os.listdir(parent_dir))
        except OSError as e:
            raise ChartTesterError(f"Error reading directory '{parent_dir}': {e}") from e

        dirs: list[str] = []
        for entry in entries:
            child = posixpath.join(normalize_chart_path(parent_dir), entry)
            if os.path.isdir(child) and test(child):
                dirs.append(child)
        return dirs
