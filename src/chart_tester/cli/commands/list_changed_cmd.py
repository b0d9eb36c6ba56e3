"""ct list-changed - Print the charts that changed since the target branch."""

from __future__ import annotations

from typing import Optional

import typer

from chart_tester.cli import options as opt
from chart_tester.cli.runner import list_changed

app = typer.Typer()


@app.callback(invoke_without_command=True)
def list_changed_charts(
    config: Optional[str] = opt.ConfigOption,
    output: str = opt.OutputOption,
    debug: Optional[bool] = opt.DebugOption,
    remote: Optional[str] = opt.RemoteOption,
    target_branch: Optional[str] = opt.TargetBranchOption,
    chart_dirs: Optional[list[str]] = opt.ChartDirsOption,
    excluded_charts: Optional[list[str]] = opt.ExcludedChartsOption,
) -> None:
    """List changed charts without testing them."""
    list_changed(
        config,
        output,
        {
            "debug": debug,
            "remote": remote,
            "target_branch": target_branch,
            "chart_dirs": chart_dirs,
            "excluded_charts": excluded_charts,
        },
    )
