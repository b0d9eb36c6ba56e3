"""Collaborator contracts used by the testing engine.

The engine depends only on these protocols; the concrete git, helm,
Kubernetes and linter backends are injected by ``Testing.from_config``.
Failing operations raise a ``ChartTesterError`` subclass.
"""

from __future__ import annotations

from typing import Callable, Protocol

from chart_tester.models.chart import ChartMetadata


class GitClient(Protocol):
    def file_exists_on_branch(self, file: str, remote: str, branch: str) -> bool: ...

    def show(self, file: str, remote: str, branch: str) -> str: ...

    def add_working_tree(self, path: str, ref: str) -> None: ...

    def remove_working_tree(self, path: str) -> None: ...

    def merge_base(self, commit1: str, commit2: str) -> str: ...

    def list_changed_files_in_dirs(self, commit: str, *dirs: str) -> list[str]: ...

    def get_url_for_remote(self, remote: str) -> str: ...

    def validate_repository(self) -> None: ...


class HelmClient(Protocol):
    def init(self) -> None: ...

    def add_repo(self, name: str, url: str, extra_args: list[str] | None = None) -> None: ...

    def build_dependencies(self, chart: str) -> None: ...

    def lint_with_values(self, chart: str, values_file: str | None) -> None: ...

    def install_with_values(
        self, chart: str, values_file: str | None, namespace: str, release: str,
    ) -> None: ...

    def upgrade(self, chart: str, namespace: str, release: str) -> None: ...

    def test(self, namespace: str, release: str, *, cleanup: bool = False) -> None: ...

    def delete_release(self, namespace: str, release: str) -> None: ...


class KubectlClient(Protocol):
    def delete_namespace(self, namespace: str) -> None: ...

    def wait_for_deployments(self, namespace: str, selector: str) -> None: ...

    def get_pods(self, namespace: str, selector: str) -> list[str]: ...

    def describe_pod(self, namespace: str, pod: str) -> str: ...

    def logs(self, namespace: str, pod: str, container: str) -> str: ...

    def get_init_containers(self, namespace: str, pod: str) -> list[str]: ...

    def get_containers(self, namespace: str, pod: str) -> list[str]: ...


class YamlLinter(Protocol):
    def yamllint(self, yaml_file: str, config_file: str) -> None: ...

    def yamale(self, yaml_file: str, schema_file: str) -> None: ...


class AccountValidatorClient(Protocol):
    def validate(self, repo_url: str, account: str) -> None: ...


class DirectoryListerClient(Protocol):
    def list_child_dirs(self, parent_dir: str, test: Callable[[str], bool]) -> list[str]: ...


class ChartReader(Protocol):
    def lookup_chart_dir(self, chart_dirs: list[str], directory: str) -> str: ...

    def read_chart_yaml(self, directory: str) -> ChartMetadata: ...
