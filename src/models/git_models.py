"""Git-related model classes used inside the engine."""

from typing import Optional

from pydantic import BaseModel

from ..schemas.git import GitFileStatus


class FileStats(BaseModel):
    """Line counts for one file from ``git diff --numstat``."""

    additions: int = 0
    deletions: int = 0


class NameStatusEntry(BaseModel):
    """Change type for one file from ``git diff --name-status``."""

    status: GitFileStatus
    old_file_path: Optional[str] = None  # For renamed/copied files


class CommitWithParent(BaseModel):
    current: str
    parent: str


class BranchComparison(BaseModel):
    ahead: int = 0  # Commits reachable from the other branch only
    behind: int = 0  # Commits reachable from the target branch only
