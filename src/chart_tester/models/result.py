"""Test result models."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TestResult:
    """Outcome of testing a single chart."""

    __test__ = False

    chart: str
    error: Exception | None = None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass
class TestResults:
    """Ordered per-chart results plus an incrementally maintained success flag."""

    __test__ = False

    overall_success: bool = True
    results: list[TestResult] = field(default_factory=list)

    def add(self, result: TestResult) -> None:
        if result.error is not None:
            self.overall_success = False
        self.results.append(result)
