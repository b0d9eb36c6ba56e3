"""Table / JSON / YAML output dispatch."""

from __future__ import annotations

import json
from typing import Any

import yaml
from rich.console import Console

from chart_tester.models import OutputFormat
from chart_tester.models.result import TestResult

console = Console()


def _result_to_dict(r: TestResult) -> dict[str, Any]:
    return {
        "chart": r.chart,
        "success": r.success,
        "error": str(r.error) if r.error is not None else None,
    }


def output_results(results: list[TestResult], fmt: OutputFormat) -> None:
    if fmt is OutputFormat.JSON:
        data = [_result_to_dict(r) for r in results]
        console.print_json(json.dumps(data, indent=2))
    elif fmt is OutputFormat.YAML:
        data = [_result_to_dict(r) for r in results]
        console.print(yaml.dump(data, default_flow_style=False, sort_keys=False))
    elif not results:
        console.print("[dim]No chart changes detected.[/dim]")
    else:
        from chart_tester.output.tables import results_table
        console.print(results_table(results))


def output_charts(charts: list[str], fmt: OutputFormat) -> None:
    if fmt is OutputFormat.JSON:
        console.print_json(json.dumps(charts))
    elif fmt is OutputFormat.YAML:
        console.print(yaml.dump(charts, default_flow_style=False))
    else:
        for chart in charts:
            console.print(chart, highlight=False)
