"""In-memory collaborators and chart builders shared by the tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Any, Callable

from chart_tester.errors import AccountValidationError, ProcessError

ErrorRule = Exception | Callable[..., Exception | None]


class _Recorder:
    """Records calls and raises configured errors per method name.

    ``errors`` maps a method name to an exception, or to a callable receiving
    the call arguments and returning an exception (or None to succeed).
    """

    def __init__(self, errors: dict[str, ErrorRule] | None = None):
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.errors: dict[str, ErrorRule] = dict(errors or {})

    def _record(self, method: str, *args: Any) -> None:
        self.calls.append((method, args))
        rule = self.errors.get(method)
        if rule is None:
            return
        error = rule if isinstance(rule, Exception) else rule(*args)
        if error is not None:
            raise error

    def called(self, method: str) -> list[tuple[Any, ...]]:
        return [args for name, args in self.calls if name == method]

    @property
    def methods(self) -> list[str]:
        return [name for name, _ in self.calls]


class FakeHelm(_Recorder):
    def init(self) -> None:
        self._record("init")

    def add_repo(self, name: str, url: str, extra_args: list[str] | None = None) -> None:
        self._record("add_repo", name, url, list(extra_args or []))

    def build_dependencies(self, chart: str) -> None:
        self._record("build_dependencies", chart)

    def lint_with_values(self, chart: str, values_file: str | None) -> None:
        self._record("lint_with_values", chart, values_file)

    def install_with_values(self, chart: str, values_file: str | None, namespace: str, release: str) -> None:
        self._record("install_with_values", chart, values_file, namespace, release)

    def upgrade(self, chart: str, namespace: str, release: str) -> None:
        self._record("upgrade", chart, namespace, release)

    def test(self, namespace: str, release: str, *, cleanup: bool = False) -> None:
        self._record("test", namespace, release, cleanup)

    def delete_release(self, namespace: str, release: str) -> None:
        self.calls.append(("delete_release", (namespace, release)))


class FakeKubectl(_Recorder):
    def __init__(self, errors: dict[str, ErrorRule] | None = None, pods: list[str] | None = None):
        super().__init__(errors)
        self.pods = list(pods or [])

    def delete_namespace(self, namespace: str) -> None:
        self.calls.append(("delete_namespace", (namespace,)))

    def wait_for_deployments(self, namespace: str, selector: str) -> None:
        self._record("wait_for_deployments", namespace, selector)

    def get_pods(self, namespace: str, selector: str) -> list[str]:
        self._record("get_pods", namespace, selector)
        return list(self.pods)

    def describe_pod(self, namespace: str, pod: str) -> str:
        self._record("describe_pod", namespace, pod)
        return f"description of {pod}"

    def logs(self, namespace: str, pod: str, container: str) -> str:
        self._record("logs", namespace, pod, container)
        return f"logs of {pod}/{container}"

    def get_init_containers(self, namespace: str, pod: str) -> list[str]:
        self._record("get_init_containers", namespace, pod)
        return []

    def get_containers(self, namespace: str, pod: str) -> list[str]:
        self._record("get_containers", namespace, pod)
        return ["main"]


class FakeGit(_Recorder):
    def __init__(
        self,
        errors: dict[str, ErrorRule] | None = None,
        branch_files: dict[str, str] | None = None,
        changed_files: list[str] | None = None,
        merge_base: str = "abc123",
        remote_url: str = "https://github.com/example/charts.git",
    ):
        super().__init__(errors)
        self.branch_files = dict(branch_files or {})
        self.changed_files = list(changed_files or [])
        self.merge_base_value = merge_base
        self.remote_url = remote_url

    def file_exists_on_branch(self, file: str, remote: str, branch: str) -> bool:
        self.calls.append(("file_exists_on_branch", (file, remote, branch)))
        return file in self.branch_files

    def show(self, file: str, remote: str, branch: str) -> str:
        self._record("show", file, remote, branch)
        return self.branch_files[file]

    def add_working_tree(self, path: str, ref: str) -> None:
        self._record("add_working_tree", path, ref)

    def remove_working_tree(self, path: str) -> None:
        self._record("remove_working_tree", path)

    def merge_base(self, commit1: str, commit2: str) -> str:
        self._record("merge_base", commit1, commit2)
        return self.merge_base_value

    def list_changed_files_in_dirs(self, commit: str, *dirs: str) -> list[str]:
        self._record("list_changed_files_in_dirs", commit, *dirs)
        return list(self.changed_files)

    def get_url_for_remote(self, remote: str) -> str:
        self._record("get_url_for_remote", remote)
        return self.remote_url

    def validate_repository(self) -> None:
        self._record("validate_repository")


class FakeLinter(_Recorder):
    def yamllint(self, yaml_file: str, config_file: str) -> None:
        self._record("yamllint", yaml_file, config_file)

    def yamale(self, yaml_file: str, schema_file: str) -> None:
        self._record("yamale", yaml_file, schema_file)


class FakeAccountValidator:
    def __init__(self, invalid: set[str] | None = None):
        self.invalid = set(invalid or ())
        self.validated: list[tuple[str, str]] = []

    def validate(self, repo_url: str, account: str) -> None:
        self.validated.append((repo_url, account))
        if account in self.invalid:
            raise AccountValidationError(f"Failed validating maintainer '{account}'")


def process_error(*args: Any) -> ProcessError:
    return ProcessError(["helm", *map(str, args)], 1, "boom")


def write_chart(
    root: Path,
    chart: str,
    version: str = "1.0.0",
    maintainers: list[str] | None = None,
    deprecated: bool = False,
    values_files: list[str] | None = None,
) -> Path:
    """Create a minimal chart directory under ``root``."""
    chart_dir = root / chart
    chart_dir.mkdir(parents=True, exist_ok=True)
    names = ["alice"] if maintainers is None else maintainers
    lines = [
        "apiVersion: v2",
        f"name: {Path(chart).name}",
        f"version: {version}",
    ]
    if deprecated:
        lines.append("deprecated: true")
    if names:
        lines.append("maintainers:")
        lines.extend(f"  - name: {n}" for n in names)
    (chart_dir / "Chart.yaml").write_text("\n".join(lines) + "\n")
    (chart_dir / "values.yaml").write_text("replicaCount: 1\n")
    for name in values_files or []:
        ci = chart_dir / "ci"
        ci.mkdir(exist_ok=True)
        (ci / name).write_text("replicaCount: 2\n")
    return chart_dir


def chart_yaml(version: str) -> str:
    return textwrap.dedent(f"""\
        apiVersion: v2
        name: foo
        version: {version}
    """)
