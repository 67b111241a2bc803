"""Services for the application."""

from .base_branch import BaseBranchResolver, find_base_branch_from_data
from .commit_graph import CommitGraphWalker
from .diff_computer import DiffComputer
from .file_status import FileStatusService
from .git_gateway import GitCommandGateway
from .git_gateway_factory import create_git_gateway, create_git_gateway_from_settings
from .git_service import GitService
from .ref_resolver import resolve_ref

__all__ = [
    "BaseBranchResolver",
    "CommitGraphWalker",
    "DiffComputer",
    "FileStatusService",
    "GitCommandGateway",
    "GitService",
    "create_git_gateway",
    "create_git_gateway_from_settings",
    "find_base_branch_from_data",
    "resolve_ref",
]
