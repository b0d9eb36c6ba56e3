"""Best-effort pod diagnostics collected before a test release is deleted."""

from __future__ import annotations

import logging
from typing import Callable

from chart_tester.core.interfaces import KubectlClient
from chart_tester.errors import ChartTesterError

logger = logging.getLogger(__name__)

_DELIMITER_WIDTH = 100


def delimiter(char: str) -> str:
    return char * _DELIMITER_WIDTH


def print_pod_details_and_logs(kubectl: KubectlClient, namespace: str, selector: str) -> None:
    """Log the description and container logs of every pod of a release.

    Failures are logged and swallowed so they never mask a pipeline error.
    """
    try:
        pods = kubectl.get_pods(namespace, selector)
    except ChartTesterError as e:
        logger.warning("Error printing logs: %s", e)
        return

    logger.info(delimiter("="))
    for pod in pods:
        _print_details(pod, "Description of pod", "~", lambda _: kubectl.describe_pod(namespace, pod), [pod])

        try:
            init_containers = kubectl.get_init_containers(namespace, pod)
        except ChartTesterError as e:
            logger.warning("Error printing logs: %s", e)
            return
        _print_details(
            pod, "Logs of init container", "-",
            lambda container: kubectl.logs(namespace, pod, container), init_containers,
        )

        try:
            containers = kubectl.get_containers(namespace, pod)
        except ChartTesterError as e:
            logger.warning("Error printing logs: %s", e)
            return
        _print_details(
            pod, "Logs of container", "-",
            lambda container: kubectl.logs(namespace, pod, container), containers,
        )
    logger.info(delimiter("="))


def _print_details(
    pod: str,
    text: str,
    delimiter_char: str,
    fetch: Callable[[str], str],
    items: list[str],
) -> None:
    for item in items:
        item = item.strip("'")
        try:
            details = fetch(item)
        except ChartTesterError as e:
            logger.warning("Error printing details: %s", e)
            return
        logger.info(
            "%s\n==> %s %s (%s)\n%s\n%s\n%s\n<== %s %s (%s)\n%s",
            delimiter(delimiter_char), text, pod, item, delimiter(delimiter_char),
            details.rstrip(),
            delimiter(delimiter_char), text, pod, item, delimiter(delimiter_char),
        )
