"""Generation and teardown of per-attempt install identities."""

from __future__ import annotations

import contextlib
import logging
import posixpath
import random
import string
from typing import Callable, Iterator

from chart_tester.core.interfaces import HelmClient, KubectlClient
from chart_tester.models.install import InstallIdentity

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 63
_SUFFIX_LENGTH = 10


def random_suffix(length: int = _SUFFIX_LENGTH) -> str:
    return "".join(random.choices(string.ascii_lowercase, k=length))


def truncate_left(value: str, max_length: int = MAX_NAME_LENGTH) -> str:
    """Keep the last ``max_length`` characters so the unique suffix survives."""
    if len(value) <= max_length:
        return value
    return value[len(value) - max_length:]


def create_install_params(chart: str, build_id: str, suffix: str | None = None) -> tuple[str, str]:
    """Return ``(release, namespace)`` names for installing ``chart``."""
    suffix = suffix or random_suffix()
    release = posixpath.basename(posixpath.normpath(chart))
    namespace = release
    if build_id:
        namespace = f"{namespace}-{build_id}"
    return (
        truncate_left(f"{release}-{suffix}"),
        truncate_left(f"{namespace}-{suffix}"),
    )


def generate_install_identity(
    chart: str,
    build_id: str,
    namespace: str = "",
    release_label: str = "",
    suffix: str | None = None,
) -> InstallIdentity:
    """Create a fresh identity; a configured ``namespace`` is shared, not ephemeral."""
    release, generated_namespace = create_install_params(chart, build_id, suffix)
    if namespace:
        return InstallIdentity(
            namespace=namespace,
            release=release,
            selector=f"{release_label}={release}",
            ephemeral_namespace=False,
        )
    return InstallIdentity(namespace=generated_namespace, release=release)


@contextlib.contextmanager
def install_scope(
    identity: InstallIdentity,
    helm: HelmClient,
    kubectl: KubectlClient,
    collect_diagnostics: Callable[[InstallIdentity], None] | None = None,
) -> Iterator[InstallIdentity]:
    """Yield ``identity`` and release its cluster resources on every exit path.

    Diagnostics are collected first, then the release is deleted and, for a
    generated namespace, the namespace too.
    """
    try:
        yield identity
    finally:
        if collect_diagnostics is not None:
            try:
                collect_diagnostics(identity)
            except Exception:
                logger.warning("Error collecting diagnostics for '%s'", identity.release, exc_info=True)
        try:
            helm.delete_release(identity.namespace, identity.release)
        except Exception:
            logger.warning("Error deleting release '%s'", identity.release, exc_info=True)
        if identity.ephemeral_namespace:
            try:
                kubectl.delete_namespace(identity.namespace)
            except Exception:
                logger.warning("Error deleting namespace '%s'", identity.namespace, exc_info=True)
