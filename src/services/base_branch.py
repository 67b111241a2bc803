"""
Base branch detection.

The base branch of a feature branch is the closest branch it diverged from.
``find_base_branch_from_data`` is the pure algorithm over pre-fetched commit
history and two lookup functions; ``BaseBranchResolver`` feeds it with
memoized lookups backed by git.
"""

import asyncio
from typing import Callable, Dict, List, Optional, Tuple

from ..config.logging_config import get_logger
from ..models.git_models import BranchComparison, CommitWithParent
from ..protocols.git_gateway_protocol import GitGatewayProtocol
from ..schemas.git import BaseBranchResult, GitResult
from .commit_graph import CommitGraphWalker
from .errors import GitOperationError, unwrap
from .output_parsers import count_lines, parse_lines

logger = get_logger(__name__)


def find_base_branch_from_data(
    target_branch: str,
    commits: List[CommitWithParent],
    get_branch_names_for_commit: Callable[[str], List[str]],
    compare_branches: Callable[[str, str], BranchComparison],
) -> Optional[BaseBranchResult]:
    """
    Find the closest branch that ``target_branch`` diverged from.

    Walks ``commits`` newest to oldest. At the first commit shared by the
    target and some other branch, an other branch qualifies when the target
    has commits it lacks (``behind > 0``); whether the other branch has also
    advanced (``ahead``) does not matter. Candidates at one commit are tried
    in the order the lookup returns them.

    Returns None when no other branch shares the target's history.
    """
    for commit in commits:
        branch_names = get_branch_names_for_commit(commit.current)
        if target_branch not in branch_names:
            continue

        for branch_name in branch_names:
            if branch_name == target_branch:
                continue
            comparison = compare_branches(target_branch, branch_name)
            if comparison.behind > 0:
                return BaseBranchResult(branch=branch_name, hash=commit.current)

    return None


def get_branch_names_by_commit_hash(
    gateway: GitGatewayProtocol, cwd: str, commit_hash: str
) -> GitResult[List[str]]:
    result = gateway.execute(
        ["branch", "--contains", commit_hash, "--format=%(refname:short)"], cwd
    )
    if not result.success:
        return GitResult.fail(result.error)
    return GitResult.ok(parse_lines(result.data))


def compare_commit_hash(
    gateway: GitGatewayProtocol, cwd: str, target: str, other: str
) -> GitResult[BranchComparison]:
    """Count commits only in ``other`` (ahead) and only in ``target`` (behind)."""
    ahead = gateway.execute(["rev-list", f"{target}..{other}"], cwd)
    if not ahead.success:
        return GitResult.fail(ahead.error)

    behind = gateway.execute(["rev-list", f"{other}..{target}"], cwd)
    if not behind.success:
        return GitResult.fail(behind.error)

    return GitResult.ok(
        BranchComparison(ahead=count_lines(ahead.data), behind=count_lines(behind.data))
    )


class _ResolutionLookups:
    """Memoized git lookups for a single resolution. Never reused."""

    def __init__(self, gateway: GitGatewayProtocol, cwd: str):
        self.gateway = gateway
        self.cwd = cwd
        self.branches_by_commit: Dict[str, List[str]] = {}
        self.comparisons: Dict[Tuple[str, str], BranchComparison] = {}

    def branch_names_for_commit(self, commit_hash: str) -> List[str]:
        if commit_hash not in self.branches_by_commit:
            self.branches_by_commit[commit_hash] = unwrap(
                get_branch_names_by_commit_hash(self.gateway, self.cwd, commit_hash)
            )
        return self.branches_by_commit[commit_hash]

    def compare(self, target: str, other: str) -> BranchComparison:
        key = (target, other)
        if key not in self.comparisons:
            self.comparisons[key] = unwrap(
                compare_commit_hash(self.gateway, self.cwd, target, other)
            )
        return self.comparisons[key]


class BaseBranchResolver:
    """Resolves base branches from git history, one fresh computation per call."""

    def __init__(
        self,
        gateway: GitGatewayProtocol,
        batch_size: int = 20,
        max_commits: int = 100,
    ):
        self.gateway = gateway
        self.walker = CommitGraphWalker(
            gateway, batch_size=batch_size, max_commits=max_commits
        )

    def find_base_branch(
        self, cwd: str, target_branch: str
    ) -> GitResult[Optional[BaseBranchResult]]:
        commits = self.walker.collect(cwd)
        if not commits.success:
            return GitResult.fail(commits.error)

        lookups = _ResolutionLookups(self.gateway, cwd)
        try:
            base = find_base_branch_from_data(
                target_branch,
                commits.data,
                lookups.branch_names_for_commit,
                lookups.compare,
            )
        except GitOperationError as e:
            logger.warning(
                "Base branch resolution aborted",
                target_branch=target_branch,
                code=e.error.code.value,
            )
            return GitResult.fail(e.error)

        logger.debug(
            "Base branch resolved",
            target_branch=target_branch,
            walked_commits=len(commits.data),
            base_branch=base.branch if base else None,
        )
        return GitResult.ok(base)

    async def find_base_branch_async(
        self, cwd: str, target_branch: str
    ) -> GitResult[Optional[BaseBranchResult]]:
        return await asyncio.to_thread(self.find_base_branch, cwd, target_branch)
