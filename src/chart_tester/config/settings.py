"""Application configuration and defaults."""

from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

from chart_tester.errors import ChartTesterError

logger = logging.getLogger(__name__)

ENV_PREFIX = "CT_"
CONFIG_FILE_NAMES = ("ct.yaml", "ct.yml")
DEFAULT_LINT_CONF = "lintconf.yaml"
DEFAULT_CHART_SCHEMA = "chart_schema.yaml"


def config_search_dirs() -> list[Path]:
    """Directories searched for ct.yaml, lintconf.yaml and chart_schema.yaml."""
    dirs = [Path.cwd()]
    config_home = os.environ.get("CT_CONFIG_DIR", "")
    if config_home:
        dirs.append(Path(config_home))
    dirs.append(Path.home() / ".ct")
    dirs.append(Path("/etc/ct"))
    return dirs


def find_config_file(*names: str) -> Path | None:
    for directory in config_search_dirs():
        for name in names:
            candidate = directory / name
            if candidate.is_file():
                return candidate
    return None


def _default_lint_conf() -> str:
    found = find_config_file(DEFAULT_LINT_CONF)
    return str(found) if found else DEFAULT_LINT_CONF


def _default_chart_schema() -> str:
    found = find_config_file(DEFAULT_CHART_SCHEMA)
    return str(found) if found else DEFAULT_CHART_SCHEMA


@dataclass
class Configuration:
    remote: str = "origin"
    target_branch: str = "master"
    build_id: str = ""
    lint_conf: str = field(default_factory=_default_lint_conf)
    chart_yaml_schema: str = field(default_factory=_default_chart_schema)
    validate_maintainers: bool = True
    validate_chart_schema: bool = True
    validate_yaml: bool = True
    check_version_increment: bool = True
    process_all_charts: bool = False
    charts: list[str] = field(default_factory=list)
    chart_repos: list[str] = field(default_factory=list)  # "name=url"
    helm_repo_extra_args: list[str] = field(default_factory=list)  # "name=args"
    helm_extra_args: str = ""
    excluded_charts: list[str] = field(default_factory=list)
    chart_dirs: list[str] = field(default_factory=lambda: ["charts"])
    namespace: str = ""
    release_label: str = "app.kubernetes.io/instance"
    upgrade: bool = False
    debug: bool = False
    kube_context: str | None = None

    @property
    def helm_extra_args_list(self) -> list[str]:
        return self.helm_extra_args.split()

    def parsed_chart_repos(self) -> list[tuple[str, str]]:
        """Return ``(name, url)`` pairs from ``chart_repos``."""
        return [_split_pair(repo, "chart repo") for repo in self.chart_repos]

    def parsed_helm_repo_extra_args(self) -> dict[str, list[str]]:
        """Return ``{repo name: extra args}`` from ``helm_repo_extra_args``."""
        result: dict[str, list[str]] = {}
        for entry in self.helm_repo_extra_args:
            name, args = _split_pair(entry, "helm repo extra args")
            result[name] = args.split()
        return result


def _split_pair(value: str, what: str) -> tuple[str, str]:
    name, sep, rest = value.partition("=")
    if not sep or not name:
        raise ChartTesterError(f"Invalid {what} '{value}', expected 'name=value'")
    return name.strip(), rest.strip()


_FIELDS = {f.name: f for f in dataclasses.fields(Configuration)}


def _is_list_field(name: str) -> bool:
    return str(_FIELDS[name].type).startswith("list")


def _is_bool_field(name: str) -> bool:
    return str(_FIELDS[name].type) == "bool"


def _coerce(name: str, value: Any) -> Any:
    if _is_list_field(name):
        if isinstance(value, str):
            return [v.strip() for v in value.split(",") if v.strip()]
        return [str(v) for v in value]
    if _is_bool_field(name):
        if isinstance(value, str):
            return value.strip().lower() in ("true", "1", "yes", "on")
        return bool(value)
    return str(value)


def _from_file(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ChartTesterError(f"Error reading config file '{path}': {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ChartTesterError(f"Config file '{path}' must contain a mapping")

    values: dict[str, Any] = {}
    for key, value in data.items():
        name = str(key).replace("-", "_")
        if name not in _FIELDS:
            logger.warning("Ignoring unknown config key '%s' in %s", key, path)
            continue
        if value is None:
            continue
        values[name] = _coerce(name, value)
    return values


def _from_env(environ: Mapping[str, str]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for name in _FIELDS:
        env_name = ENV_PREFIX + name.upper()
        if env_name in environ:
            values[name] = _coerce(name, environ[env_name])
    return values


def load_configuration(
    config_file: str | Path | None = None,
    overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> Configuration:
    """Build the configuration snapshot for one run.

    Precedence, lowest first: defaults, config file, ``CT_*`` environment
    variables, explicit overrides (CLI options). ``None`` overrides are ignored.
    """
    if config_file is not None:
        path: Path | None = Path(config_file)
        if not path.is_file():
            raise ChartTesterError(f"Config file '{config_file}' not found")
    else:
        path = find_config_file(*CONFIG_FILE_NAMES)

    values: dict[str, Any] = {}
    if path is not None:
        logger.info("Using config file: %s", path)
        values.update(_from_file(path))
    values.update(_from_env(os.environ if environ is None else environ))
    for name, value in (overrides or {}).items():
        if value is None:
            continue
        if name not in _FIELDS:
            raise ChartTesterError(f"Unknown configuration option '{name}'")
        values[name] = _coerce(name, value)

    return Configuration(**values)
