"""Execution of external command-line tools."""

from __future__ import annotations

import logging
import subprocess
from typing import Sequence

from chart_tester.errors import ProcessError

logger = logging.getLogger(__name__)

# Upper bound for a single tool invocation (seconds). Helm installs with
# --wait can legitimately take several minutes.
DEFAULT_TIMEOUT = 1800


class ProcessExecutor:
    """Runs commands without a shell and turns failures into ProcessError."""

    def __init__(self, debug: bool = False, timeout: int = DEFAULT_TIMEOUT):
        self.debug = debug
        self.timeout = timeout

    def run_process(self, executable: str, *args: str) -> None:
        """Run a command, streaming its output to the console."""
        cmd = [executable, *args]
        self._log_command(cmd)
        try:
            result = subprocess.run(cmd, check=False, timeout=self.timeout)
        except FileNotFoundError as e:
            raise ProcessError(cmd, 127, f"executable '{executable}' not found") from e
        except subprocess.TimeoutExpired as e:
            raise ProcessError(cmd, -1, f"timed out after {self.timeout}s") from e
        if result.returncode != 0:
            raise ProcessError(cmd, result.returncode)

    def run_process_and_capture_output(self, executable: str, *args: str) -> str:
        """Run a command and return its stripped stdout."""
        cmd = [executable, *args]
        self._log_command(cmd)
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=False,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise ProcessError(cmd, 127, f"executable '{executable}' not found") from e
        except subprocess.TimeoutExpired as e:
            raise ProcessError(cmd, -1, f"timed out after {self.timeout}s") from e

        stdout = result.stdout.strip() if result.stdout else ""
        stderr = result.stderr.strip() if result.stderr else ""
        if self.debug and stderr:
            logger.debug("stderr of '%s':\n%s", " ".join(cmd), stderr)
        if result.returncode != 0:
            raise ProcessError(cmd, result.returncode, stderr or stdout)
        return stdout

    def _log_command(self, cmd: Sequence[str]) -> None:
        if self.debug:
            logger.info(">>> %s", " ".join(cmd))
        else:
            logger.debug(">>> %s", " ".join(cmd))
