"""
Git command adapter that runs the git binary and hands back its text output.
"""

from pathlib import Path
from typing import List, Optional, Sequence
from git.cmd import Git
from git.exc import GitCommandNotFound
from loguru import logger


# Prefixes git uses for the lines that report a failed invocation
FAILURE_MARKERS = ("error:", "fatal:")


def output_indicates_failure(output: str) -> bool:
    """Return True when captured git output reports an error.

    Only lines that start with a marker count, so file names and commit
    subjects that merely mention "error" do not.
    """
    return any(
        line.startswith(FAILURE_MARKERS)
        for line in output.splitlines()
    )


class GitRepository:
    """Runs git commands inside a working copy."""

    def __init__(self, repo_path: Optional[Path] = None, binary: str = "git"):
        """Bind the adapter to a directory and a git executable."""
        self.repo_path = Path(repo_path or Path.cwd())
        self.binary = binary
        self._git = Git(str(self.repo_path))

    def _execute(self, args: Sequence[str]) -> tuple[int, str]:
        command = [self.binary, *args]
        logger.debug(f"Running {' '.join(command)} in {self.repo_path}")
        try:
            status, stdout, stderr = self._git.execute(
                command,
                with_extended_output=True,
                with_exceptions=False,
            )
        except GitCommandNotFound as e:
            raise GitRepositoryError(f"Git executable not found: {self.binary}") from e

        output = "\n".join(part for part in (stdout, stderr) if part)
        logger.debug(f"git {args[0] if args else ''} exited with status {status}")
        return status, output.strip()

    def run(self, args: Sequence[str]) -> str:
        """Run git with the given arguments and return combined output.

        A non-zero exit status is not an error here; callers inspect the
        returned text for failure markers.
        """
        _, output = self._execute(args)
        return output

    def is_repository(self) -> bool:
        """Check whether the working directory is inside a git work tree."""
        try:
            status, _ = self._execute(["rev-parse", "--is-inside-work-tree"])
        except GitRepositoryError as e:
            logger.warning(str(e))
            return False
        return status == 0

    def staged_stat(self) -> str:
        return self.run(["diff", "--cached", "--stat"])

    def staged_diff(self) -> str:
        return self.run(["diff", "--cached"])

    def commit(self, message: str) -> tuple[int, str]:
        """Create a commit from the index.

        Returns the exit status with git's output; a hook that rejects the
        commit may print anything, so callers must check the status.
        """
        return self._execute(["commit", "-m", message])

    def recent_log(self, count: int = 10) -> List[str]:
        """Get one-line summaries of the most recent commits."""
        # Commit subjects may mention "error", so rely on the exit status here
        status, output = self._execute(["log", "--oneline", "-n", str(count)])
        if status != 0 or not output:
            return []
        return output.splitlines()

    def hooks_dir(self) -> Path:
        """Resolve the directory git reads hooks from."""
        status, output = self._execute(["rev-parse", "--git-path", "hooks"])
        if status != 0 or not output:
            raise GitRepositoryError(f"Could not locate hooks directory: {output}")
        path = Path(output)
        if not path.is_absolute():
            path = self.repo_path / path
        return path


class GitRepositoryError(Exception):
    """Custom exception for Git repository operations."""
    pass
