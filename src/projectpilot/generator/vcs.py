"""Git repository initialization for generated projects."""

import shutil
import subprocess
from pathlib import Path
from typing import Optional

from projectpilot.core.errors import VCSError
from projectpilot.core.logging import StructuredLogger, get_logger


class GitRepository:
    """Runs the ``git`` CLI synchronously. Nothing here retries."""

    def __init__(
        self,
        author_name: str = "ProjectPilot",
        author_email: str = "projectpilot@localhost",
        git_executable: Optional[str] = None,
        timeout: float = 60.0,
        logger: Optional[StructuredLogger] = None,
    ):
        self.author_name = author_name
        self.author_email = author_email
        self.git_executable = git_executable or "git"
        self.timeout = timeout
        self.logger = logger or get_logger()

    def _run(self, args: list[str], cwd: Path) -> str:
        command = [
            self.git_executable,
            "-c", f"user.name={self.author_name}",
            "-c", f"user.email={self.author_email}",
            *args,
        ]
        try:
            result = subprocess.run(
                command,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise VCSError(f"git {args[0]} failed: {e}") from e

        if result.returncode != 0:
            detail = (result.stderr or result.stdout).strip()
            raise VCSError(f"git {args[0]} exited with status {result.returncode}: {detail}")
        return result.stdout

    def is_available(self) -> bool:
        return shutil.which(self.git_executable) is not None

    def init_and_commit(self, path: Path, message: str) -> None:
        """
        Create a repository at ``path`` and commit everything in it.

        Raises:
            VCSError: git is missing or any git command fails
        """
        if not self.is_available():
            raise VCSError(f"git executable not found: {self.git_executable}")

        self._run(["init", "--initial-branch=main"], path)
        self._run(["add", "-A"], path)
        self._run(["commit", "--no-gpg-sign", "-m", message], path)
        self.logger.debug("Initialized git repository", context={"path": str(path)})
