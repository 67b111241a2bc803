"""Models for the application."""

from .git_models import BranchComparison, CommitWithParent, FileStats, NameStatusEntry

__all__ = ["BranchComparison", "CommitWithParent", "FileStats", "NameStatusEntry"]
