"""ct install - Install and test charts."""

from __future__ import annotations

from typing import Optional

import typer

from chart_tester.cli import options as opt
from chart_tester.cli.runner import run_pipeline
from chart_tester.models import PipelineMode

app = typer.Typer()


@app.callback(invoke_without_command=True)
def install(
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
    build_id: Optional[str] = opt.BuildIdOption,
    namespace: Optional[str] = opt.NamespaceOption,
    release_label: Optional[str] = opt.ReleaseLabelOption,
    upgrade: Optional[bool] = opt.UpgradeOption,
    helm_extra_args: Optional[str] = opt.HelmExtraArgsOption,
    context: Optional[str] = opt.ContextOption,
) -> None:
    """Install charts into fresh namespaces, run helm test, and clean up."""
    run_pipeline(
        PipelineMode.INSTALL,
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
            "build_id": build_id,
            "namespace": namespace,
            "release_label": release_label,
            "upgrade": upgrade,
            "helm_extra_args": helm_extra_args,
            "kube_context": context,
        },
    )
