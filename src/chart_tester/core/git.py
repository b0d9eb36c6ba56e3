"""Git operations backed by the git command-line client."""

from __future__ import annotations

from chart_tester.core.process import ProcessExecutor
from chart_tester.errors import ChartTesterError, ProcessError


class Git:
    """Wraps the git calls needed to select charts and check out old revisions."""

    def __init__(self, executor: ProcessExecutor):
        self.executor = executor

    def file_exists_on_branch(self, file: str, remote: str, branch: str) -> bool:
        try:
            self.executor.run_process_and_capture_output("git", "cat-file", "-e", f"{remote}/{branch}:{file}")
        except ProcessError:
            return False
        return True

    def show(self, file: str, remote: str, branch: str) -> str:
        return self.executor.run_process_and_capture_output("git", "show", f"{remote}/{branch}:{file}")

    def add_working_tree(self, path: str, ref: str) -> None:
        self.executor.run_process_and_capture_output("git", "worktree", "add", "--detach", path, ref)

    def remove_working_tree(self, path: str) -> None:
        # Dependencies built inside the worktree are untracked, hence --force.
        self.executor.run_process_and_capture_output("git", "worktree", "remove", "--force", path)

    def merge_base(self, commit1: str, commit2: str) -> str:
        return self.executor.run_process_and_capture_output("git", "merge-base", commit1, commit2)

    def list_changed_files_in_dirs(self, commit: str, *dirs: str) -> list[str]:
        output = self.executor.run_process_and_capture_output(
            "git", "diff", "--find-renames", "--name-only", commit, "--", *dirs,
        )
        if not output:
            return []
        return [line for line in output.splitlines() if line.strip()]

    def get_url_for_remote(self, remote: str) -> str:
        return self.executor.run_process_and_capture_output("git", "ls-remote", "--get-url", remote)

    def validate_repository(self) -> None:
        try:
            self.executor.run_process_and_capture_output("git", "rev-parse", "--is-inside-work-tree")
        except ProcessError as e:
            raise ChartTesterError("Must be in a git repository") from e
