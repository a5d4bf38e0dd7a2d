"""
Git Repository

Thin wrapper around the git command line for the working tree the
action runs in: diffing a pull request against its base, fetching fork
heads, checking paths on the base commit and attempting merges.
"""

import logging
import subprocess
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Union


logger = logging.getLogger(__name__)


class GitCommandError(Exception):
    """Git command failed"""
    def __init__(self, message: str, returncode: Optional[int] = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class GitRepository:
    """
    Git working tree used for triage.

    Every command runs with ``git -C <repo_path>``; nothing depends on the
    process working directory.
    """

    def __init__(
        self,
        repo_path: Union[str, Path] = ".",
        remote: str = "origin",
        merge_user_name: str = "bot",
        merge_user_email: str = "b@o.t",
        timeout_seconds: int = 60,
    ):
        self.repo_path = Path(repo_path)
        self.remote = remote
        self.merge_user_name = merge_user_name
        self.merge_user_email = merge_user_email
        self.timeout_seconds = timeout_seconds

    def _run_git(self, args: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """
        Run a git command in the repo.

        Args:
            args: Git command arguments
            check: Whether to raise on non-zero exit

        Returns:
            Completed process result

        Raises:
            GitCommandError: If command fails and check=True
        """
        cmd = ["git", "-C", str(self.repo_path), *args]
        logger.debug(f"+ {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise GitCommandError(f"Git command timed out: {' '.join(args)}") from e
        except OSError as e:
            raise GitCommandError(f"Cannot run git: {e}") from e

        if check and result.returncode != 0:
            raise GitCommandError(
                f"Git command failed: {' '.join(args)}\n"
                f"stderr: {result.stderr}",
                returncode=result.returncode,
                stderr=result.stderr,
            )
        return result

    def rev_parse(self, ref: str) -> str:
        return self._run_git(["rev-parse", ref]).stdout.strip()

    def checkout(self, ref: str) -> None:
        """Check out ref (detached when ref is a remote branch)."""
        logger.info(f"Checking out {ref}")
        self._run_git(["checkout", "-q", ref])

    def fetch_pull_head(self, number: int) -> str:
        """
        Fetch refs/pull/<number>/head from the remote.

        Fork heads are not part of the base repository, so they have to be
        fetched explicitly.

        Returns:
            SHA the remote currently reports for the PR head
        """
        logger.info(f"Fetching refs/pull/{number}/head from {self.remote}")
        self._run_git(["fetch", self.remote, f"refs/pull/{number}/head"])
        return self.rev_parse("FETCH_HEAD")

    def changed_files(self, base: str, head: str) -> List[str]:
        """
        Files changed by head since its merge base with base.

        Returns:
            Repository-relative paths, deduplicated in git's order
        """
        result = self._run_git(["diff", "--name-only", f"{base}...{head}"])
        return list(dict.fromkeys(line for line in result.stdout.splitlines() if line))

    def file_diff(self, base: str, head: str, path: str) -> str:
        """Unified diff of one file between the merge base and head."""
        return self._run_git(["diff", f"{base}...{head}", "--", path]).stdout

    def exists_at(self, ref: str, path: str) -> bool:
        """Whether path (file or directory) exists in the tree of ref."""
        result = self._run_git(["cat-file", "-e", f"{ref}:{path.rstrip('/')}"], check=False)
        return result.returncode == 0

    @contextmanager
    def merge_attempt(self, head: str) -> Iterator[bool]:
        """
        Try merging head into the checked-out commit without committing.

        Yields True when the merge succeeded. The merge is always aborted on
        exit so the working tree is left clean.
        """
        try:
            result = self._run_git(
                [
                    "-c", f"user.name={self.merge_user_name}",
                    "-c", f"user.email={self.merge_user_email}",
                    "merge", "--no-commit", "--no-ff", head,
                ],
                check=False,
            )
            yield result.returncode == 0
        finally:
            # Fails harmlessly when there is nothing to abort
            self._run_git(["merge", "--abort"], check=False)

    def has_conflicts(self, head: str) -> bool:
        """Whether merging head into the checked-out commit fails."""
        with self.merge_attempt(head) as merged:
            if not merged:
                logger.info(f"Merging {head} into the base branch failed")
            return not merged
