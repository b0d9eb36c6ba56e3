"""Rich table builders for each command."""

from __future__ import annotations

from rich.markup import escape
from rich.table import Table

from chart_tester.models.result import TestResult
from chart_tester.output.themes import styled_result


def results_table(results: list[TestResult]) -> Table:
    table = Table(title="Test Results", expand=True)
    table.add_column("", width=3, no_wrap=True)
    table.add_column("Chart", style="magenta", no_wrap=True)
    table.add_column("Error", style="red", max_width=80)

    for r in results:
        table.add_row(
            styled_result(r.success),
            r.chart,
            escape(str(r.error)) if r.error is not None else "",
        )
    return table
