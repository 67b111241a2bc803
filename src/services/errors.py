"""Exceptions raised by the git engine.

Gateway failures travel as ``GitResult`` values between components. The
``GitOperationError`` family exists so a component can short-circuit a
multi-step computation on the first failure and turn it back into a
``GitResult`` at its public boundary.
"""

from typing import Dict, Type

from ..schemas.git import GitError, GitErrorCode


class InvalidRefError(ValueError):
    """A ref descriptor that no caller should ever send."""


class GitOperationError(Exception):
    code = GitErrorCode.COMMAND_FAILED

    def __init__(self, error: GitError):
        super().__init__(error.message)
        self.error = error

    @classmethod
    def from_error(cls, error: GitError) -> "GitOperationError":
        return _ERRORS_BY_CODE.get(error.code, cls)(error)


class RepositoryNotFoundError(GitOperationError):
    code = GitErrorCode.NOT_A_REPOSITORY


class RefNotFoundError(GitOperationError):
    code = GitErrorCode.BRANCH_NOT_FOUND


class CommandExecutionError(GitOperationError):
    code = GitErrorCode.COMMAND_FAILED


class ParseError(GitOperationError):
    code = GitErrorCode.PARSE_ERROR


_ERRORS_BY_CODE: Dict[GitErrorCode, Type[GitOperationError]] = {
    GitErrorCode.NOT_A_REPOSITORY: RepositoryNotFoundError,
    GitErrorCode.BRANCH_NOT_FOUND: RefNotFoundError,
    GitErrorCode.COMMAND_FAILED: CommandExecutionError,
    GitErrorCode.PARSE_ERROR: ParseError,
}


def unwrap(result):
    """Return ``result.data`` or raise the exception matching ``result.error``."""
    if not result.success:
        raise GitOperationError.from_error(result.error)
    return result.data
