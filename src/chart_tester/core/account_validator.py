"""Validation of maintainer names against the git hosting service."""

from __future__ import annotations

import logging
import re

import httpx

from chart_tester.errors import AccountValidationError

logger = logging.getLogger(__name__)

# Works for GitHub, GitLab and Bitbucket remotes over https or ssh.
_REPO_DOMAIN_PATTERN = re.compile(r"(?:https://(?:[^@/]+@)?|ssh://(?:[^@/]+@)?|git@)([^/:]+)")

_REQUEST_TIMEOUT = 30.0


def parse_repo_domain(repo_url: str) -> str:
    match = _REPO_DOMAIN_PATTERN.search(repo_url)
    if not match:
        raise AccountValidationError(f"Could not parse git repository domain for '{repo_url}'")
    return match.group(1)


def validation_url(domain: str, account: str) -> str:
    if domain == "github.com":
        return f"https://api.github.com/users/{account}"
    return f"https://{domain}/{account}"


class AccountValidator:
    """Checks that an account exists with a HEAD request to its profile page."""

    def __init__(self, client: httpx.Client | None = None):
        self._client = client

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=_REQUEST_TIMEOUT, follow_redirects=True)
        return self._client

    def validate(self, repo_url: str, account: str) -> None:
        domain = parse_repo_domain(repo_url)
        url = validation_url(domain, account)
        logger.debug("Validating account '%s' via %s", account, url)
        try:
            response = self.client.head(url)
        except httpx.HTTPError as e:
            raise AccountValidationError(f"Failed validating maintainer '{account}': {e}") from e
        if response.status_code != 200:
            raise AccountValidationError(
                f"Failed validating maintainer '{account}': {url} returned {response.status_code}"
            )
