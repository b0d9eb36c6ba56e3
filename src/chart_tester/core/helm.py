"""Helm operations backed by the helm command-line client."""

from __future__ import annotations

import logging
import shutil

from chart_tester.core.process import ProcessExecutor
from chart_tester.errors import ChartTesterError, ProcessError

logger = logging.getLogger(__name__)


class Helm:
    """Wraps the helm calls used by the lint, install and upgrade pipelines.

    ``extra_args`` are appended to every install and upgrade call.
    """

    def __init__(self, executor: ProcessExecutor, extra_args: list[str] | None = None):
        self.executor = executor
        self.extra_args = list(extra_args or [])

    def init(self) -> None:
        """Verify the helm client is usable; Helm 3 needs no client-side setup."""
        if shutil.which("helm") is None:
            raise ChartTesterError("Required executable 'helm' not found in PATH")
        self.executor.run_process_and_capture_output("helm", "version", "--short")

    def add_repo(self, name: str, url: str, extra_args: list[str] | None = None) -> None:
        self.executor.run_process("helm", "repo", "add", name, url, *(extra_args or []))

    def build_dependencies(self, chart: str) -> None:
        self.executor.run_process("helm", "dependency", "build", chart)

    def lint_with_values(self, chart: str, values_file: str | None) -> None:
        self.executor.run_process("helm", "lint", chart, *_values_args(values_file))

    def install_with_values(
        self, chart: str, values_file: str | None, namespace: str, release: str,
    ) -> None:
        self.executor.run_process(
            "helm", "install", release, chart,
            "--namespace", namespace,
            "--create-namespace",
            "--wait",
            *_values_args(values_file),
            *self.extra_args,
        )

    def upgrade(self, chart: str, namespace: str, release: str) -> None:
        self.executor.run_process(
            "helm", "upgrade", release, chart,
            "--namespace", namespace,
            "--reuse-values",
            "--wait",
            *self.extra_args,
        )

    def test(self, namespace: str, release: str, *, cleanup: bool = False) -> None:
        """Run ``helm test``.

        Test pods are removed by their hook delete policies and with the
        release, so ``cleanup`` only decides whether their logs are dumped:
        logs are printed for the final test of a release, not intermediate ones.
        """
        args = ["helm", "test", release, "--namespace", namespace]
        if not cleanup:
            args.append("--logs")
        self.executor.run_process(*args)

    def delete_release(self, namespace: str, release: str) -> None:
        """Uninstall a release; failures are logged, never raised."""
        logger.info("Deleting release '%s'...", release)
        try:
            self.executor.run_process("helm", "uninstall", release, "--namespace", namespace, "--wait")
        except ProcessError as e:
            logger.warning("Error deleting Helm release '%s': %s", release, e)


def _values_args(values_file: str | None) -> list[str]:
    if values_file:
        return ["--values", values_file]
    return []
