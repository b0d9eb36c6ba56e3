"""Resolution of the set of chart directories to process."""

from __future__ import annotations

import logging
import posixpath

from chart_tester.config.settings import Configuration
from chart_tester.core.chart_utils import normalize_chart_path
from chart_tester.core.interfaces import ChartReader, DirectoryListerClient, GitClient
from chart_tester.errors import ChartLookupError, ChartTesterError

logger = logging.getLogger(__name__)


class ChartSelector:
    """Picks charts by explicit list, full scan, or changes since the merge base."""

    def __init__(
        self,
        config: Configuration,
        git: GitClient,
        chart_utils: ChartReader,
        directory_lister: DirectoryListerClient,
    ):
        self.config = config
        self.git = git
        self.chart_utils = chart_utils
        self.directory_lister = directory_lister

    def select(self) -> list[str]:
        cfg = self.config
        if cfg.process_all_charts:
            return self.read_all_chart_directories()
        if cfg.charts:
            return list(cfg.charts)
        return self.compute_changed_chart_directories()

    def compute_merge_base(self) -> str:
        try:
            self.git.validate_repository()
        except ChartTesterError as e:
            raise ChartTesterError("Must be in a git repository") from e
        return self.git.merge_base(f"{self.config.remote}/{self.config.target_branch}", "HEAD")

    def compute_changed_chart_directories(self) -> list[str]:
        """Charts under the configured chart dirs with changes since the merge base."""
        cfg = self.config
        merge_base = self.compute_merge_base()

        try:
            changed_files = self.git.list_changed_files_in_dirs(merge_base, *cfg.chart_dirs)
        except ChartTesterError as e:
            raise ChartTesterError(f"Error creating diff: {e}") from e

        changed_chart_dirs: list[str] = []
        for file in changed_files:
            path_elements = normalize_chart_path(file).split("/", 2)
            if len(path_elements) < 2 or path_elements[1] in cfg.excluded_charts:
                continue
            directory = posixpath.dirname(normalize_chart_path(file))
            try:
                chart_dir = self.chart_utils.lookup_chart_dir(cfg.chart_dirs, directory)
            except ChartLookupError:
                logger.info("Directory '%s' is no chart directory. Skipping...", directory)
                continue
            if chart_dir not in changed_chart_dirs:
                changed_chart_dirs.append(chart_dir)

        return changed_chart_dirs

    def read_all_chart_directories(self) -> list[str]:
        """All charts in the configured chart dirs except excluded ones."""
        cfg = self.config

        def is_testable_chart(directory: str) -> bool:
            try:
                self.chart_utils.lookup_chart_dir(cfg.chart_dirs, directory)
            except ChartLookupError:
                return False
            return posixpath.basename(directory) not in cfg.excluded_charts

        chart_dirs: list[str] = []
        for parent in cfg.chart_dirs:
            try:
                chart_dirs.extend(self.directory_lister.list_child_dirs(parent, is_testable_chart))
            except ChartTesterError as e:
                raise ChartTesterError(f"Error reading chart directories: {e}") from e
        return chart_dirs
