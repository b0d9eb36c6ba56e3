"""Glue between CLI commands and the testing engine."""

from __future__ import annotations

import logging
from typing import Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from chart_tester.config.settings import Configuration, load_configuration
from chart_tester.core.testing import Testing
from chart_tester.errors import ChartProcessingError, ChartTesterError
from chart_tester.models import OutputFormat, PipelineMode
from chart_tester.output.formatters import output_charts, output_results

console = Console(stderr=True)

_LIST_OPTIONS = ("charts", "chart_dirs", "excluded_charts", "chart_repos", "helm_repo_extra_args")
_DONE_MESSAGES = {
    PipelineMode.LINT: "linted",
    PipelineMode.INSTALL: "installed and tested",
    PipelineMode.LINT_AND_INSTALL: "linted and installed",
}


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=False)],
        force=True,
    )
    # The Kubernetes client and httpx are chatty at DEBUG.
    for name in ("kubernetes", "urllib3", "httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)


def parse_output(output: str) -> OutputFormat:
    try:
        return OutputFormat(output)
    except ValueError:
        raise typer.BadParameter(f"Unsupported output format '{output}'", param_hint="--output")


def _split_lists(overrides: dict[str, Any]) -> dict[str, Any]:
    """Accept repeated and comma-separated values for list options."""
    result = dict(overrides)
    for name in _LIST_OPTIONS:
        values = result.get(name)
        if values:
            result[name] = [v.strip() for value in values for v in value.split(",") if v.strip()]
    return result


def load_config_or_exit(config_file: Optional[str], overrides: dict[str, Any]) -> Configuration:
    configure_logging(bool(overrides.get("debug")))
    try:
        config = load_configuration(config_file, _split_lists(overrides))
    except ChartTesterError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)
    if config.debug:
        configure_logging(True)
    return config


def run_pipeline(
    mode: PipelineMode,
    config_file: Optional[str],
    output: str,
    overrides: dict[str, Any],
) -> None:
    """Run ``mode`` and print results; exits with code 1 if any chart failed."""
    fmt = parse_output(output)
    config = load_config_or_exit(config_file, overrides)
    testing = Testing.from_config(config)

    try:
        results = testing.process_charts(mode)
    except ChartProcessingError as e:
        output_results(e.results, fmt)
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)
    except ChartTesterError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    output_results(results, fmt)
    if results:
        console.print(f"[green]All charts {_DONE_MESSAGES[mode]} successfully[/green]")


def list_changed(config_file: Optional[str], output: str, overrides: dict[str, Any]) -> None:
    fmt = parse_output(output)
    config = load_config_or_exit(config_file, overrides)
    testing = Testing.from_config(config)
    try:
        charts = testing.selector.compute_changed_chart_directories()
    except ChartTesterError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)
    output_charts(charts, fmt)
