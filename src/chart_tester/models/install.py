"""Install identity for one test attempt."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class InstallIdentity:
    """Namespace, release and label selector of one chart installation.

    ``ephemeral_namespace`` is True when the namespace was generated for this
    installation and must be deleted together with the release.
    """

    namespace: str
    release: str
    selector: str = ""
    ephemeral_namespace: bool = True
