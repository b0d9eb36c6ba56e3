"""Shared CLI options."""

from __future__ import annotations

import typer

ConfigOption = typer.Option(None, "--config", help="Config file (default: ct.yaml in ., ~/.ct or /etc/ct)")
OutputOption = typer.Option("table", "--output", "-o", help="Output format: table, json, yaml")
DebugOption = typer.Option(None, "--debug/--no-debug", help="Print commands and debug output")

# Chart selection
RemoteOption = typer.Option(None, "--remote", help="Git remote used to identify changed charts (default: origin)")
TargetBranchOption = typer.Option(
    None, "--target-branch", help="Branch changes are computed against (default: master)",
)
ChartsOption = typer.Option(None, "--charts", help="Charts to process, bypassing change detection (repeatable or comma-separated)")
AllOption = typer.Option(None, "--all/--changed", help="Process all charts instead of changed ones")
ChartDirsOption = typer.Option(None, "--chart-dirs", help="Directories containing charts (default: charts)")
ExcludedChartsOption = typer.Option(None, "--excluded-charts", help="Charts excluded from processing")

# Repositories
ChartReposOption = typer.Option(None, "--chart-repos", help="Chart repositories to add, as name=url")
HelmRepoExtraArgsOption = typer.Option(
    None, "--helm-repo-extra-args", help="Extra arguments for 'helm repo add', as name=args",
)

# Lint
CheckVersionIncrementOption = typer.Option(
    None, "--check-version-increment/--no-check-version-increment", help="Require a chart version bump",
)
ValidateMaintainersOption = typer.Option(
    None, "--validate-maintainers/--no-validate-maintainers", help="Validate maintainer accounts",
)
ValidateChartSchemaOption = typer.Option(
    None, "--validate-chart-schema/--no-validate-chart-schema", help="Validate Chart.yaml against the schema",
)
ValidateYamlOption = typer.Option(None, "--validate-yaml/--no-validate-yaml", help="Run yamllint on chart YAML files")
LintConfOption = typer.Option(None, "--lint-conf", help="yamllint configuration file")
ChartYamlSchemaOption = typer.Option(None, "--chart-yaml-schema", help="yamale schema for Chart.yaml")

# Install
BuildIdOption = typer.Option(None, "--build-id", help="CI build id, appended to generated namespaces")
NamespaceOption = typer.Option(None, "--namespace", "-n", help="Install into this namespace instead of generated ones")
ReleaseLabelOption = typer.Option(
    None, "--release-label", help="Label selecting a release's resources in a shared namespace",
)
UpgradeOption = typer.Option(None, "--upgrade/--no-upgrade", help="Test in-place upgrades from the previous revision")
HelmExtraArgsOption = typer.Option(None, "--helm-extra-args", help="Extra arguments for 'helm install' and 'helm upgrade'")
ContextOption = typer.Option(None, "--context", help="Kubernetes context name")
