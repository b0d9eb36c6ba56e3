"""Tests for the git, helm and linter command wrappers."""

from __future__ import annotations

import subprocess

import pytest

from chart_tester.core import helm as helm_module
from chart_tester.core.git import Git
from chart_tester.core.helm import Helm
from chart_tester.core.linter import Linter
from chart_tester.core.process import ProcessExecutor
from chart_tester.errors import ChartTesterError, ProcessError


class TestProcessExecutor:
    def test_capture_returns_stripped_stdout(self, mock_subprocess_run) -> None:
        mock_subprocess_run.stdout = "  abc123\n"

        assert ProcessExecutor().run_process_and_capture_output("git", "merge-base", "a", "b") == "abc123"
        assert mock_subprocess_run.calls == [("git", "merge-base", "a", "b")]

    def test_non_zero_exit_raises(self, mock_subprocess_run) -> None:
        mock_subprocess_run.returncode = 2

        with pytest.raises(ProcessError) as exc_info:
            ProcessExecutor().run_process_and_capture_output("helm", "lint", "charts/foo")

        assert exc_info.value.returncode == 2
        assert exc_info.value.output == "failure"
        assert "helm lint charts/foo" in str(exc_info.value)

    def test_run_process_raises_on_failure(self, mock_subprocess_run) -> None:
        mock_subprocess_run.returncode = 1

        with pytest.raises(ProcessError):
            ProcessExecutor().run_process("helm", "lint")

    def test_missing_executable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def fake_run(cmd, **kwargs):
            raise FileNotFoundError(cmd[0])

        monkeypatch.setattr(subprocess, "run", fake_run)

        with pytest.raises(ProcessError) as exc_info:
            ProcessExecutor().run_process("yamale")

        assert exc_info.value.returncode == 127

    def test_timeout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def fake_run(cmd, **kwargs):
            raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

        monkeypatch.setattr(subprocess, "run", fake_run)

        with pytest.raises(ProcessError, match="timed out after 5s"):
            ProcessExecutor(timeout=5).run_process_and_capture_output("helm", "install")


class TestGit:
    def test_file_exists_on_branch(self, mock_subprocess_run) -> None:
        git = Git(ProcessExecutor())

        assert git.file_exists_on_branch("charts/foo/Chart.yaml", "origin", "main") is True
        assert mock_subprocess_run.calls == [("git", "cat-file", "-e", "origin/main:charts/foo/Chart.yaml")]

    def test_missing_file_on_branch(self, mock_subprocess_run) -> None:
        mock_subprocess_run.returncode = 128

        assert Git(ProcessExecutor()).file_exists_on_branch("Chart.yaml", "origin", "main") is False

    def test_list_changed_files(self, mock_subprocess_run) -> None:
        mock_subprocess_run.stdout = "charts/foo/Chart.yaml\ncharts/bar/values.yaml\n"

        files = Git(ProcessExecutor()).list_changed_files_in_dirs("abc", "charts", "stable")

        assert files == ["charts/foo/Chart.yaml", "charts/bar/values.yaml"]
        assert mock_subprocess_run.calls == [
            ("git", "diff", "--find-renames", "--name-only", "abc", "--", "charts", "stable"),
        ]

    def test_no_changed_files(self, mock_subprocess_run) -> None:
        assert Git(ProcessExecutor()).list_changed_files_in_dirs("abc", "charts") == []

    def test_worktree_commands(self, mock_subprocess_run) -> None:
        git = Git(ProcessExecutor())

        git.add_working_tree("ct_previous_revision", "abc")
        git.remove_working_tree("ct_previous_revision")

        assert mock_subprocess_run.calls == [
            ("git", "worktree", "add", "--detach", "ct_previous_revision", "abc"),
            ("git", "worktree", "remove", "--force", "ct_previous_revision"),
        ]

    def test_validate_repository_outside_repo(self, mock_subprocess_run) -> None:
        mock_subprocess_run.returncode = 128

        with pytest.raises(ChartTesterError, match="Must be in a git repository"):
            Git(ProcessExecutor()).validate_repository()


class TestHelm:
    def test_install_with_values_and_extra_args(self, mock_subprocess_run) -> None:
        helm = Helm(ProcessExecutor(), ["--timeout", "600s"])

        helm.install_with_values("charts/foo", "charts/foo/ci/a-values.yaml", "foo-ns", "foo-rel")

        assert mock_subprocess_run.calls == [(
            "helm", "install", "foo-rel", "charts/foo",
            "--namespace", "foo-ns", "--create-namespace", "--wait",
            "--values", "charts/foo/ci/a-values.yaml",
            "--timeout", "600s",
        )]

    def test_install_with_chart_defaults(self, mock_subprocess_run) -> None:
        Helm(ProcessExecutor()).install_with_values("charts/foo", None, "ns", "rel")

        assert "--values" not in mock_subprocess_run.calls[0]

    def test_upgrade_reuses_values(self, mock_subprocess_run) -> None:
        Helm(ProcessExecutor()).upgrade("charts/foo", "ns", "rel")

        assert mock_subprocess_run.calls == [
            ("helm", "upgrade", "rel", "charts/foo", "--namespace", "ns", "--reuse-values", "--wait"),
        ]

    def test_logs_only_for_final_test(self, mock_subprocess_run) -> None:
        helm = Helm(ProcessExecutor())

        helm.test("ns", "rel", cleanup=True)
        helm.test("ns", "rel")

        assert mock_subprocess_run.calls == [
            ("helm", "test", "rel", "--namespace", "ns"),
            ("helm", "test", "rel", "--namespace", "ns", "--logs"),
        ]

    def test_lint_and_repo_commands(self, mock_subprocess_run) -> None:
        helm = Helm(ProcessExecutor())

        helm.add_repo("stable", "https://charts.example", ["--username", "u"])
        helm.build_dependencies("charts/foo")
        helm.lint_with_values("charts/foo", "v.yaml")

        assert mock_subprocess_run.calls == [
            ("helm", "repo", "add", "stable", "https://charts.example", "--username", "u"),
            ("helm", "dependency", "build", "charts/foo"),
            ("helm", "lint", "charts/foo", "--values", "v.yaml"),
        ]

    def test_delete_release_failure_is_not_raised(self, mock_subprocess_run) -> None:
        mock_subprocess_run.returncode = 1

        Helm(ProcessExecutor()).delete_release("ns", "rel")

        assert mock_subprocess_run.calls == [("helm", "uninstall", "rel", "--namespace", "ns", "--wait")]

    def test_init_requires_helm_on_path(self, monkeypatch: pytest.MonkeyPatch, mock_subprocess_run) -> None:
        monkeypatch.setattr(helm_module.shutil, "which", lambda name: None)

        with pytest.raises(ChartTesterError, match="'helm' not found"):
            Helm(ProcessExecutor()).init()

        assert mock_subprocess_run.calls == []

    def test_init_checks_version(self, monkeypatch: pytest.MonkeyPatch, mock_subprocess_run) -> None:
        monkeypatch.setattr(helm_module.shutil, "which", lambda name: "/usr/bin/helm")

        Helm(ProcessExecutor()).init()

        assert mock_subprocess_run.calls == [("helm", "version", "--short")]


def test_linter_commands(mock_subprocess_run) -> None:
    linter = Linter(ProcessExecutor())

    linter.yamllint("charts/foo/values.yaml", "lintconf.yaml")
    linter.yamale("charts/foo/Chart.yaml", "chart_schema.yaml")

    assert mock_subprocess_run.calls == [
        ("yamllint", "--config-file", "lintconf.yaml", "charts/foo/values.yaml"),
        ("yamale", "--schema", "chart_schema.yaml", "charts/foo/Chart.yaml"),
    ]
