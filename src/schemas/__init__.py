"""Schemas for the application."""

from .git import (
    BaseBranchResult,
    CurrentRevisions,
    DiffSummary,
    FileStatus,
    FileStatusResponse,
    GitCommit,
    GitCommitDetails,
    GitDiffFileSummary,
    GitError,
    GitErrorCode,
    GitFileStatus,
    GitRawDiffResult,
    GitResult,
)

__all__ = [
    "BaseBranchResult",
    "CurrentRevisions",
    "DiffSummary",
    "FileStatus",
    "FileStatusResponse",
    "GitCommit",
    "GitCommitDetails",
    "GitDiffFileSummary",
    "GitError",
    "GitErrorCode",
    "GitFileStatus",
    "GitRawDiffResult",
    "GitResult",
]
