"""YAML style and schema linting backed by yamllint and yamale."""

from __future__ import annotations

import logging

from chart_tester.core.process import ProcessExecutor

logger = logging.getLogger(__name__)


class Linter:
    def __init__(self, executor: ProcessExecutor):
        self.executor = executor

    def yamllint(self, yaml_file: str, config_file: str) -> None:
        logger.info("Linting '%s'...", yaml_file)
        self.executor.run_process("yamllint", "--config-file", config_file, yaml_file)

    def yamale(self, yaml_file: str, schema_file: str) -> None:
        logger.info("Validating %s against schema %s", yaml_file, schema_file)
        self.executor.run_process("yamale", "--schema", schema_file, yaml_file)
