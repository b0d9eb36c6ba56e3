"""Semver comparison utilities."""

from __future__ import annotations

import semver

from chart_tester.errors import VersionError


def parse_version(v: str) -> semver.Version:
    """Parse a chart version string as a semantic version.

    A leading 'v' and a missing minor or patch part are accepted, as Helm
    does. Build metadata is dropped since it carries no precedence.

    Raises:
        VersionError: if the string is not a valid version.
    """
    candidate = v.strip()
    if candidate.startswith("v"):
        candidate = candidate[1:]
    try:
        version = semver.Version.parse(candidate, optional_minor_and_patch=True)
    except (ValueError, TypeError) as e:
        raise VersionError(f"Error parsing version '{v}'") from e
    return version.replace(build=None)


def compare_versions(left: str, right: str) -> int:
    """Return -1, 0 or 1 as left is lower than, equal to or greater than right."""
    return parse_version(left).compare(parse_version(right))


def breaking_change_allowed(left: str, right: str) -> bool:
    """Return True if going from ``left`` to ``right`` is a breaking change.

    ``right`` is compatible with ``left`` when it satisfies the caret range
    ``^left``: at least ``left`` with the same major version, or, below 1.0.0,
    the same major and minor version. A prerelease only satisfies a range
    whose lower bound is itself a prerelease. Anything else is breaking.
    """
    lv = parse_version(left)
    rv = parse_version(right)

    if rv.prerelease and not lv.prerelease:
        return True
    if rv.compare(lv) < 0:
        return True
    if lv.major != rv.major:
        return True
    if lv.major == 0 and lv.minor != rv.minor:
        return True
    return False
