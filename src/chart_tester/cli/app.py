"""Root Typer application, mounts sub-commands."""

from __future__ import annotations

import typer

app = typer.Typer(
    name="ct",
    help="Chart Tester - Lint and test Helm charts changed in a git repository.",
    no_args_is_help=True,
)


def _register_commands() -> None:
    from chart_tester.cli.commands.lint_cmd import app as lint_app
    from chart_tester.cli.commands.install_cmd import app as install_app
    from chart_tester.cli.commands.lint_and_install_cmd import app as lint_and_install_app
    from chart_tester.cli.commands.list_changed_cmd import app as list_changed_app

    app.add_typer(lint_app, name="lint", help="Lint and validate charts")
    app.add_typer(install_app, name="install", help="Install and test charts")
    app.add_typer(lint_and_install_app, name="lint-and-install", help="Lint, install and test charts")
    app.add_typer(list_changed_app, name="list-changed", help="List changed charts")


_register_commands()


def main() -> None:
    app()
