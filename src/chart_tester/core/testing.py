"""Lint, install and upgrade testing of charts."""

from __future__ import annotations

import contextlib
import logging
import posixpath

from chart_tester.config.settings import Configuration
from chart_tester.core.account_validator import AccountValidator
from chart_tester.core.chart_selector import ChartSelector
from chart_tester.core.chart_utils import (
    CHART_YAML,
    VALUES_YAML,
    ChartUtils,
    DirectoryLister,
    effective_values_files,
    find_values_files_for_ci,
)
from chart_tester.core.diagnostics import delimiter, print_pod_details_and_logs
from chart_tester.core.git import Git
from chart_tester.core.helm import Helm
from chart_tester.core.install_identity import generate_install_identity, install_scope
from chart_tester.core.interfaces import (
    AccountValidatorClient,
    ChartReader,
    DirectoryListerClient,
    GitClient,
    HelmClient,
    KubectlClient,
    YamlLinter,
)
from chart_tester.core.k8s_client import K8sClient
from chart_tester.core.linter import Linter
from chart_tester.core.process import ProcessExecutor
from chart_tester.core.version_gate import VersionGate
from chart_tester.core.worktree import PreviousRevisionWorktree, previous_revision_worktree
from chart_tester.errors import ChartProcessingError, ChartTesterError, MaintainerError
from chart_tester.models import PipelineMode
from chart_tester.models.install import InstallIdentity
from chart_tester.models.result import TestResult, TestResults

logger = logging.getLogger(__name__)


class Testing:
    """Drives chart selection and the lint/install/upgrade pipelines.

    Charts are processed strictly one at a time.
    """

    __test__ = False

    def __init__(
        self,
        config: Configuration,
        helm: HelmClient,
        kubectl: KubectlClient,
        git: GitClient,
        linter: YamlLinter,
        account_validator: AccountValidatorClient,
        directory_lister: DirectoryListerClient,
        chart_utils: ChartReader,
    ):
        self.config = config
        self.helm = helm
        self.kubectl = kubectl
        self.git = git
        self.linter = linter
        self.account_validator = account_validator
        self.directory_lister = directory_lister
        self.chart_utils = chart_utils
        self.selector = ChartSelector(config, git, chart_utils, directory_lister)
        self.version_gate = VersionGate(config, git, chart_utils)

    @classmethod
    def from_config(cls, config: Configuration) -> Testing:
        """Build a Testing instance backed by the real command-line tools."""
        executor = ProcessExecutor(debug=config.debug)
        return cls(
            config=config,
            helm=Helm(executor, config.helm_extra_args_list),
            kubectl=K8sClient(context=config.kube_context),
            git=Git(executor),
            linter=Linter(executor),
            account_validator=AccountValidator(),
            directory_lister=DirectoryLister(),
            chart_utils=ChartUtils(),
        )

    # -- entry points ---------------------------------------------------

    def lint_charts(self) -> list[TestResult]:
        """Lint charts (changed, all, specific) depending on the configuration."""
        return self.process_charts(PipelineMode.LINT)

    def install_charts(self) -> list[TestResult]:
        """Install charts (changed, all, specific) depending on the configuration."""
        return self.process_charts(PipelineMode.INSTALL)

    def lint_and_install_charts(self) -> list[TestResult]:
        """Lint and then install charts depending on the configuration."""
        return self.process_charts(PipelineMode.LINT_AND_INSTALL)

    def find_charts_to_be_processed(self) -> list[str]:
        return self.selector.select()

    def process_charts(self, mode: PipelineMode) -> list[TestResult]:
        """Run ``mode`` for every selected chart.

        Returns the per-chart results. Raises ChartProcessingError carrying
        the same results if any chart failed, and ChartTesterError for
        failures that abort the whole run.
        """
        try:
            charts = self.find_charts_to_be_processed()
        except ChartTesterError as e:
            raise ChartTesterError(f"Error identifying charts to process: {e}") from e
        if not charts:
            logger.info("No chart changes detected.")
            return []

        logger.info(
            "%s\n Charts to be processed:\n%s\n%s\n%s",
            delimiter("-"), delimiter("-"), "\n".join(f" {c}" for c in charts), delimiter("-"),
        )

        try:
            self.helm.init()
        except ChartTesterError as e:
            raise ChartTesterError(f"Error initializing Helm: {e}") from e
        self.add_repositories()

        results = TestResults()
        with contextlib.ExitStack() as stack:
            worktree: PreviousRevisionWorktree | None = None
            if self.config.upgrade:
                try:
                    merge_base = self.selector.compute_merge_base()
                except ChartTesterError as e:
                    raise ChartTesterError(f"Error identifying merge base: {e}") from e
                worktree = stack.enter_context(previous_revision_worktree(self.git, merge_base))
                self._build_previous_revision_dependencies(worktree, charts)

            for chart in charts:
                values_files = find_values_files_for_ci(chart)
                try:
                    self.helm.build_dependencies(chart)
                except ChartTesterError as e:
                    raise ChartTesterError(f"Error building dependencies for chart '{chart}': {e}") from e

                results.add(self._run_pipeline(mode, chart, values_files, worktree))

        if not results.overall_success:
            raise ChartProcessingError(results.results)
        return results.results

    def add_repositories(self) -> None:
        repo_args = self.config.parsed_helm_repo_extra_args()
        registered: set[tuple[str, str]] = set()
        for name, url in self.config.parsed_chart_repos():
            if (name, url) in registered:
                continue
            try:
                self.helm.add_repo(name, url, repo_args.get(name, []))
            except ChartTesterError as e:
                raise ChartTesterError(f"Error adding repo: {name}={url}: {e}") from e
            registered.add((name, url))

    def _build_previous_revision_dependencies(
        self, worktree: PreviousRevisionWorktree, charts: list[str],
    ) -> None:
        for chart in charts:
            try:
                self.helm.build_dependencies(worktree.path_for(chart))
            except ChartTesterError as e:
                logger.warning(
                    "Error building dependencies for previous revision of chart '%s': %s", chart, e,
                )

    def _run_pipeline(
        self,
        mode: PipelineMode,
        chart: str,
        values_files: list[str],
        worktree: PreviousRevisionWorktree | None,
    ) -> TestResult:
        if mode is PipelineMode.LINT:
            return self.lint_chart(chart, values_files)
        if mode is PipelineMode.INSTALL:
            return self.install_chart(chart, values_files, worktree)
        return self.lint_and_install_chart(chart, values_files, worktree)

    # -- lint -----------------------------------------------------------

    def lint_chart(self, chart: str, values_files: list[str]) -> TestResult:
        """Lint the specified chart."""
        logger.info("Linting chart '%s'", chart)
        try:
            self._lint(chart, values_files)
        except Exception as e:
            return TestResult(chart=chart, error=e)
        return TestResult(chart=chart)

    def _lint(self, chart: str, values_files: list[str]) -> None:
        cfg = self.config
        if cfg.check_version_increment:
            self.version_gate.check_version_increment(chart)

        chart_yaml = posixpath.join(chart, CHART_YAML)
        values_yaml = posixpath.join(chart, VALUES_YAML)

        if cfg.validate_chart_schema:
            self.linter.yamale(chart_yaml, cfg.chart_yaml_schema)

        if cfg.validate_yaml:
            for yaml_file in [chart_yaml, values_yaml, *values_files]:
                self.linter.yamllint(yaml_file, cfg.lint_conf)

        if cfg.validate_maintainers:
            self.validate_maintainers(chart)

        for values_file in effective_values_files(values_files):
            if values_file:
                logger.info("Linting chart with values file '%s'...", values_file)
            self.helm.lint_with_values(chart, values_file)

    def validate_maintainers(self, chart: str) -> None:
        """Maintainer names must be valid accounts; deprecated charts must have none."""
        logger.info("Validating maintainers...")
        chart_yaml = self.chart_utils.read_chart_yaml(chart)

        if chart_yaml.deprecated:
            if chart_yaml.maintainers:
                raise MaintainerError("Deprecated chart must not have maintainers")
            return

        if not chart_yaml.maintainers:
            raise MaintainerError("Chart doesn't have maintainers")

        repo_url = self.git.get_url_for_remote(self.config.remote)
        for maintainer in chart_yaml.maintainers:
            self.account_validator.validate(repo_url, maintainer.name)

    # -- install & upgrade ----------------------------------------------

    def install_chart(
        self,
        chart: str,
        values_files: list[str],
        worktree: PreviousRevisionWorktree | None = None,
    ) -> TestResult:
        """Install the chart into a fresh namespace, test it and tear it down.

        With upgrade testing enabled the chart is first upgrade-tested from its
        previous revision and onto itself.
        """
        if self.config.upgrade:
            result = self.upgrade_chart(chart, worktree)
            if result.error is not None:
                return result
            try:
                self._do_upgrade(chart, chart, old_chart_must_pass=True)
            except Exception as e:
                return TestResult(chart=chart, error=e)

        try:
            self._do_install(chart)
        except Exception as e:
            return TestResult(chart=chart, error=e)
        return TestResult(chart=chart)

    def upgrade_chart(self, chart: str, worktree: PreviousRevisionWorktree | None) -> TestResult:
        """Test in-place upgrade of the chart from its previous revision.

        Skipped when the new version is a breaking change according to SemVer.
        A previous revision that fails to install or test is ignored.
        """
        try:
            allowed, info = self.version_gate.check_breaking_change_allowed(chart)
        except Exception as e:
            logger.error("Error comparing chart versions for '%s'", chart)
            return TestResult(chart=chart, error=e)

        if allowed:
            if info is not None:
                logger.info("Skipping upgrade test of '%s' because: %s", chart, info)
            else:
                logger.info("Skipping upgrade test of '%s' because of a breaking version change", chart)
            return TestResult(chart=chart)

        if worktree is None:
            return TestResult(
                chart=chart,
                error=ChartTesterError("Upgrade testing requires a checkout of the previous revision"),
            )

        try:
            self._do_upgrade(worktree.path_for(chart), chart, old_chart_must_pass=False)
        except Exception as e:
            return TestResult(chart=chart, error=e)
        return TestResult(chart=chart)

    def lint_and_install_chart(
        self,
        chart: str,
        values_files: list[str],
        worktree: PreviousRevisionWorktree | None = None,
    ) -> TestResult:
        result = self.lint_chart(chart, values_files)
        if result.error is not None:
            return result
        return self.install_chart(chart, values_files, worktree)

    def _do_install(self, chart: str) -> None:
        logger.info("Installing chart '%s'...", chart)
        for values_file in effective_values_files(find_values_files_for_ci(chart)):
            if values_file:
                logger.info("Installing chart with values file '%s'...", values_file)
            with self._install_scope(chart) as identity:
                self.helm.install_with_values(chart, values_file, identity.namespace, identity.release)
                self._test_release(identity, cleanup_helm_tests=False)

    def _do_upgrade(self, old_chart: str, new_chart: str, old_chart_must_pass: bool) -> None:
        logger.info(
            "Testing upgrades of chart '%s' relative to previous revision '%s'...", new_chart, old_chart,
        )
        for values_file in effective_values_files(find_values_files_for_ci(old_chart)):
            if values_file:
                logger.info("Installing chart '%s' with values file '%s'...", old_chart, values_file)
            with self._install_scope(old_chart) as identity:
                try:
                    self.helm.install_with_values(old_chart, values_file, identity.namespace, identity.release)
                except Exception as e:
                    if old_chart_must_pass:
                        raise
                    logger.warning(
                        "Upgrade testing for release '%s' skipped because of previous revision "
                        "installation error: %s", identity.release, e,
                    )
                    continue

                try:
                    self._test_release(identity, cleanup_helm_tests=True)
                except Exception as e:
                    if old_chart_must_pass:
                        raise
                    logger.warning(
                        "Upgrade testing for release '%s' skipped because of previous revision "
                        "testing error: %s", identity.release, e,
                    )
                    continue

                self.helm.upgrade(new_chart, identity.namespace, identity.release)
                self._test_release(identity, cleanup_helm_tests=False)

    def _test_release(self, identity: InstallIdentity, cleanup_helm_tests: bool) -> None:
        self.kubectl.wait_for_deployments(identity.namespace, identity.selector)
        self.helm.test(identity.namespace, identity.release, cleanup=cleanup_helm_tests)

    def _install_scope(self, chart: str) -> contextlib.AbstractContextManager[InstallIdentity]:
        identity = generate_install_identity(
            chart,
            self.config.build_id,
            namespace=self.config.namespace,
            release_label=self.config.release_label,
        )
        return install_scope(identity, self.helm, self.kubectl, collect_diagnostics=self._print_diagnostics)

    def _print_diagnostics(self, identity: InstallIdentity) -> None:
        print_pod_details_and_logs(self.kubectl, identity.namespace, identity.selector)
