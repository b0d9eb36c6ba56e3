"""ct lint - Lint charts."""

from __future__ import annotations

from typing import Optional

import typer

from chart_tester.cli import options as opt
from chart_tester.cli.runner import run_pipeline
from chart_tester.models import PipelineMode

app = typer.Typer()


@app.callback(invoke_without_command=True)
def lint(
    config: Optional[str] = opt.ConfigOption,
    output: str = opt.OutputOption,
    debug: Optional[bool] = opt.DebugOption,
    remote: Optional[str] = opt.RemoteOption,
    target_branch: Optional[str] = opt.TargetBranchOption,
    charts: Optional[list[str]] = opt.ChartsOption,
    all_charts: Optional[bool] = opt.AllOption,
    chart_dirs: Optional[list[str]] = opt.ChartDirsOption,
    excluded_charts: Optional[list[str]] = opt.ExcludedChartsOption,
    chart_repos: Optional[list[str]] = opt.ChartReposOption,
    helm_repo_extra_args: Optional[list[str]] = opt.HelmRepoExtraArgsOption,
    check_version_increment: Optional[bool] = opt.CheckVersionIncrementOption,
    validate_maintainers: Optional[bool] = opt.ValidateMaintainersOption,
    validate_chart_schema: Optional[bool] = opt.ValidateChartSchemaOption,
    validate_yaml: Optional[bool] = opt.ValidateYamlOption,
    lint_conf: Optional[str] = opt.LintConfOption,
    chart_yaml_schema: Optional[str] = opt.ChartYamlSchemaOption,
) -> None:
    """Lint and validate charts (changed, all, or specific)."""
    run_pipeline(
        PipelineMode.LINT,
        config,
        output,
        {
            "debug": debug,
            "remote": remote,
            "target_branch": target_branch,
            "charts": charts,
            "process_all_charts": all_charts,
            "chart_dirs": chart_dirs,
            "excluded_charts": excluded_charts,
            "chart_repos": chart_repos,
            "helm_repo_extra_args": helm_repo_extra_args,
            "check_version_increment": check_version_increment,
            "validate_maintainers": validate_maintainers,
            "validate_chart_schema": validate_chart_schema,
            "validate_yaml": validate_yaml,
            "lint_conf": lint_conf,
            "chart_yaml_schema": chart_yaml_schema,
        },
    )
