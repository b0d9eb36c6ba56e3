"""Version increment and breaking-change checks against the target branch."""

from __future__ import annotations

import logging
import posixpath

from chart_tester.config.settings import Configuration
from chart_tester.core.chart_utils import CHART_YAML, parse_chart_yaml
from chart_tester.core.interfaces import ChartReader, GitClient
from chart_tester.errors import ChartTesterError, NoPreviousRevisionError, ProcessError, VersionError
from chart_tester.utils.version_compare import breaking_change_allowed, compare_versions

logger = logging.getLogger(__name__)


class VersionGate:
    """Compares a chart's version on the target branch with the working copy."""

    def __init__(self, config: Configuration, git: GitClient, chart_utils: ChartReader):
        self.config = config
        self.git = git
        self.chart_utils = chart_utils

    def get_old_chart_version(self, chart: str) -> str | None:
        """Version of the chart on the target branch, or None for a new chart."""
        cfg = self.config
        chart_yaml_file = posixpath.join(chart, CHART_YAML)
        if not self.git.file_exists_on_branch(chart_yaml_file, cfg.remote, cfg.target_branch):
            logger.info("Unable to find chart on %s. New chart detected.", cfg.target_branch)
            return None

        try:
            contents = self.git.show(chart_yaml_file, cfg.remote, cfg.target_branch)
        except ProcessError as e:
            raise ChartTesterError(f"Error reading old Chart.yaml: {e}") from e

        try:
            chart_yaml = parse_chart_yaml(contents)
        except ChartTesterError as e:
            raise ChartTesterError(f"Error reading old chart version: {e}") from e
        return chart_yaml.version

    def get_new_chart_version(self, chart: str) -> str:
        """Version from the currently checked out Chart.yaml."""
        try:
            return self.chart_utils.read_chart_yaml(chart).version
        except ChartTesterError as e:
            raise ChartTesterError(f"Error reading new chart version: {e}") from e

    def check_version_increment(self, chart: str) -> None:
        """Raise VersionError unless the working copy version is greater than the old one."""
        logger.info("Checking chart '%s' for a version bump...", chart)

        old_version = self.get_old_chart_version(chart)
        if old_version is None:
            return
        logger.info("Old chart version: %s", old_version)

        new_version = self.get_new_chart_version(chart)
        logger.info("New chart version: %s", new_version)

        if compare_versions(old_version, new_version) >= 0:
            raise VersionError("Chart version not ok. Needs a version bump!")

        logger.info("Chart version ok.")

    def check_breaking_change_allowed(self, chart: str) -> tuple[bool, NoPreviousRevisionError | None]:
        """Decide whether upgrade testing from the previous revision may be skipped.

        Returns ``(True, NoPreviousRevisionError)`` for a chart that does not
        exist on the target branch; the error is informational. Malformed
        versions raise VersionError.
        """
        old_version = self.get_old_chart_version(chart)
        if old_version is None:
            return True, NoPreviousRevisionError("chart has no previous revision")

        new_version = self.get_new_chart_version(chart)
        return breaking_change_allowed(old_version, new_version), None
