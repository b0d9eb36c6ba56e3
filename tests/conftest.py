"""Pytest fixtures for chart-tester tests."""

from __future__ import annotations

import dataclasses
import subprocess
from pathlib import Path
from typing import Any, Callable

import pytest
from helpers import FakeAccountValidator, FakeGit, FakeHelm, FakeKubectl, FakeLinter

from chart_tester.config.settings import Configuration
from chart_tester.core.chart_utils import ChartUtils, DirectoryLister
from chart_tester.core.testing import Testing


@pytest.fixture
def repo_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """An empty working directory that tests run in."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@dataclasses.dataclass
class TestingHarness:
    __test__ = False

    testing: Testing
    helm: FakeHelm
    kubectl: FakeKubectl
    git: FakeGit
    linter: FakeLinter
    account_validator: FakeAccountValidator


@pytest.fixture
def make_testing() -> Callable[..., TestingHarness]:
    """Factory building a Testing instance wired to in-memory collaborators."""

    def _make(
        config: Configuration | None = None,
        helm: FakeHelm | None = None,
        kubectl: FakeKubectl | None = None,
        git: FakeGit | None = None,
        linter: FakeLinter | None = None,
        account_validator: FakeAccountValidator | None = None,
        **config_values: Any,
    ) -> TestingHarness:
        if config is None:
            defaults: dict[str, Any] = {
                "lint_conf": "lintconf.yaml",
                "chart_yaml_schema": "chart_schema.yaml",
            }
            defaults.update(config_values)
            config = Configuration(**defaults)
        harness = TestingHarness(
            testing=None,  # type: ignore[arg-type]
            helm=helm or FakeHelm(),
            kubectl=kubectl or FakeKubectl(),
            git=git or FakeGit(),
            linter=linter or FakeLinter(),
            account_validator=account_validator or FakeAccountValidator(),
        )
        harness.testing = Testing(
            config=config,
            helm=harness.helm,
            kubectl=harness.kubectl,
            git=harness.git,
            linter=harness.linter,
            account_validator=harness.account_validator,
            directory_lister=DirectoryLister(),
            chart_utils=ChartUtils(),
        )
        return harness

    return _make


@dataclasses.dataclass(slots=True)
class MockSubprocessCapture:
    """Captured data from mocked subprocess.run calls."""

    calls: list[tuple[str, ...]]
    stdout: str = ""
    returncode: int = 0


@pytest.fixture
def mock_subprocess_run(monkeypatch: pytest.MonkeyPatch) -> MockSubprocessCapture:
    """Replace subprocess.run, capturing argv and returning a configurable result."""
    capture = MockSubprocessCapture(calls=[])

    def fake_run(cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        capture.calls.append(tuple(cmd))
        return subprocess.CompletedProcess(
            cmd, capture.returncode, stdout=capture.stdout, stderr="failure" if capture.returncode else "",
        )

    monkeypatch.setattr(subprocess, "run", fake_run)
    return capture
