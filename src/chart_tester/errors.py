"""Exception hierarchy for chart-tester."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from chart_tester.models.result import TestResult


class ChartTesterError(Exception):
    """Base exception for all chart-tester errors."""


class ProcessError(ChartTesterError):
    """An external command exited with a non-zero status."""

    def __init__(self, command: Sequence[str], returncode: int, output: str = ""):
        self.command = list(command)
        self.returncode = returncode
        self.output = output
        msg = f"Error running command '{' '.join(self.command)}' (exit code {returncode})"
        if output:
            msg += f": {output}"
        super().__init__(msg)


class ChartLookupError(ChartTesterError):
    """No chart root directory could be found for a path."""


class VersionError(ChartTesterError):
    """A chart version is malformed or was not incremented."""


class NoPreviousRevisionError(ChartTesterError):
    """The chart does not exist on the target branch.

    Informational only: callers must not treat it as a test failure.
    """


class MaintainerError(ChartTesterError):
    """The maintainers declared in Chart.yaml are invalid."""


class AccountValidationError(ChartTesterError):
    """A maintainer name is not a valid account on the repository host."""


class ChartProcessingError(ChartTesterError):
    """At least one chart failed; carries the full result list."""

    def __init__(self, results: list[TestResult]):
        self.results = results
        failed = sum(1 for r in results if r.error is not None)
        super().__init__(f"Error processing charts ({failed} of {len(results)} failed)")
