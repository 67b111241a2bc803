from pathlib import Path
from typing import List, Optional

from git import Git, Repo
from git.exc import (
    GitCommandError,
    GitCommandNotFound,
    InvalidGitRepositoryError,
    NoSuchPathError,
)

from ..config.logging_config import get_logger
from ..schemas.git import GitError, GitErrorCode, GitResult

logger = get_logger(__name__)

_REF_NOT_FOUND_MARKERS = (
    "unknown revision",
    "bad revision",
    "ambiguous argument",
    "not a valid object name",
)


class GitCommandGateway:
    """Runs git subcommands through GitPython and classifies failures."""

    def __init__(self, git_binary: str = "git", timeout: Optional[int] = 30):
        self.git_binary = git_binary
        self.timeout = timeout

    def execute(self, args: List[str], cwd: str) -> GitResult[str]:
        """Run ``git <args>`` in ``cwd``, returning stdout verbatim."""
        command = " ".join(["git", *args])
        working_dir = Path(cwd).resolve()

        if not working_dir.exists():
            return self._failure(
                GitError(
                    code=GitErrorCode.NOT_A_REPOSITORY,
                    message=f"Directory does not exist: {working_dir}",
                    command=command,
                )
            )

        logger.debug("Running git command", command=command, cwd=str(working_dir))
        try:
            output = Git(working_dir).execute(
                [self.git_binary, *args],
                kill_after_timeout=self.timeout,
                strip_newline_in_stdout=False,
            )
        except GitCommandNotFound as e:
            return self._failure(
                GitError(
                    code=GitErrorCode.COMMAND_FAILED,
                    message=f"Failed to run git: {e}",
                    command=command,
                )
            )
        except GitCommandError as e:
            return self._failure(classify_command_error(e, command, working_dir))

        return GitResult.ok(output)

    def is_repository(self, cwd: str) -> bool:
        try:
            with Repo(cwd, search_parent_directories=True):
                return True
        except (InvalidGitRepositoryError, NoSuchPathError):
            return False

    def _failure(self, error: GitError) -> GitResult[str]:
        logger.warning(
            "Git command failed",
            code=error.code.value,
            command=error.command,
            stderr=error.stderr,
        )
        return GitResult.fail(error)


def classify_command_error(
    error: GitCommandError, command: str, working_dir: Path
) -> GitError:
    """Map a failed git invocation onto the error taxonomy using its stderr."""
    stderr = _clean_stderr(error.stderr)
    lowered = stderr.lower()

    if "not a git repository" in lowered:
        return GitError(
            code=GitErrorCode.NOT_A_REPOSITORY,
            message=f"Not a git repository: {working_dir}",
            command=command,
            stderr=stderr,
        )

    if any(marker in lowered for marker in _REF_NOT_FOUND_MARKERS):
        return GitError(
            code=GitErrorCode.BRANCH_NOT_FOUND,
            message="Branch or commit not found",
            command=command,
            stderr=stderr,
        )

    return GitError(
        code=GitErrorCode.COMMAND_FAILED,
        message=f"Command failed with exit status {error.status}",
        command=command,
        stderr=stderr or None,
    )


def _clean_stderr(stderr) -> str:
    # GitPython formats stderr as "\n  stderr: '<text>'"
    if isinstance(stderr, bytes):
        stderr = stderr.decode("utf-8", errors="replace")
    text = (stderr or "").strip()
    if text.startswith("stderr:"):
        text = text[len("stderr:") :].strip()
    if len(text) >= 2 and text[0] == text[-1] == "'":
        text = text[1:-1]
    return text.strip()
