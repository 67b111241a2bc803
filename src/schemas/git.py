"""Wire-format models for diff, status and revision responses.

Field names are snake_case in Python and camelCase on the wire
(``filePath``, ``oldFilePath``, ``totalFiles``, ``isGitRepo``...).
"""

from enum import Enum
from typing import Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GitFileStatus(str, Enum):
    """Per-file change type reported in a diff."""

    ADDED = "added"
    DELETED = "deleted"
    MODIFIED = "modified"
    RENAMED = "renamed"
    COPIED = "copied"
    UNTRACKED = "untracked"


class FileStatus(str, Enum):
    """Working-tree status shown in the file explorer. Copies count as additions."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"
    UNTRACKED = "untracked"


class GitDiffFileSummary(CamelModel):
    file_path: str
    additions: int = Field(ge=0)
    deletions: int = Field(ge=0)
    status: GitFileStatus
    old_file_path: Optional[str] = None  # Only for renamed/copied files


class DiffSummary(CamelModel):
    total_files: int = 0
    total_additions: int = 0
    total_deletions: int = 0


class GitRawDiffResult(CamelModel):
    """Unified diff text plus per-file statistics for a pair of refs."""

    raw_diff: str
    files: List[GitDiffFileSummary]
    summary: DiffSummary

    @classmethod
    def empty(cls) -> "GitRawDiffResult":
        return cls(raw_diff="", files=[], summary=DiffSummary())


class FileStatusResponse(CamelModel):
    is_git_repo: bool
    files: Dict[str, FileStatus] = Field(default_factory=dict)


class GitErrorCode(str, Enum):
    NOT_A_REPOSITORY = "NOT_A_REPOSITORY"
    BRANCH_NOT_FOUND = "BRANCH_NOT_FOUND"
    COMMAND_FAILED = "COMMAND_FAILED"
    PARSE_ERROR = "PARSE_ERROR"


class GitError(CamelModel):
    code: GitErrorCode
    message: str
    command: Optional[str] = None
    stderr: Optional[str] = None


class GitResult(CamelModel, Generic[T]):
    """Success/failure envelope returned by every git operation."""

    success: bool
    data: Optional[T] = None
    error: Optional[GitError] = None

    @classmethod
    def ok(cls, data: T) -> "GitResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: GitError) -> "GitResult[T]":
        return cls(success=False, error=error)


class BaseBranchResult(CamelModel):
    branch: str
    hash: str


class GitCommit(CamelModel):
    sha: str
    message: str
    author: str
    date: str


class GitCommitDetails(GitCommit):
    body: str = ""


class CurrentRevisions(CamelModel):
    current_branch: str
    head: Optional[str] = None
    base_branch: Optional[BaseBranchResult] = None
    commits: List[GitCommit] = Field(default_factory=list)
