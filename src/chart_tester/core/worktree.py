"""Checkout of the previous chart revision used for upgrade testing."""

from __future__ import annotations

import contextlib
import logging
import posixpath
from dataclasses import dataclass
from typing import Iterator

from chart_tester.core.interfaces import GitClient

logger = logging.getLogger(__name__)

PREVIOUS_REVISION_TREE = "ct_previous_revision"


@dataclass(frozen=True)
class PreviousRevisionWorktree:
    """Handle to a git worktree checked out at the merge base.

    Old-revision chart paths must be derived through :meth:`path_for`.
    """

    path: str
    ref: str

    def path_for(self, chart: str) -> str:
        """Return the path of ``chart`` inside this worktree."""
        return posixpath.join(self.path, chart)


@contextlib.contextmanager
def previous_revision_worktree(
    git: GitClient, ref: str, path: str = PREVIOUS_REVISION_TREE,
) -> Iterator[PreviousRevisionWorktree]:
    """Check out ``ref`` into ``path`` and remove the worktree on exit.

    Only one such worktree may exist per path, so runs sharing a working
    directory must not overlap.
    """
    logger.info("Checking out previous revision %s into '%s'...", ref, path)
    git.add_working_tree(path, ref)
    try:
        yield PreviousRevisionWorktree(path=path, ref=ref)
    finally:
        logger.info("Removing previous revision worktree '%s'...", path)
        try:
            git.remove_working_tree(path)
        except Exception:
            logger.warning("Failed to remove worktree '%s'", path, exc_info=True)
