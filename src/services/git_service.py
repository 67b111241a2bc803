"""Read-only revision queries: branches, commits and the current revision summary."""

import asyncio
from typing import List, Optional

from ..config.logging_config import get_logger
from ..protocols.git_gateway_protocol import GitGatewayProtocol
from ..schemas.git import (
    BaseBranchResult,
    CurrentRevisions,
    GitCommit,
    GitCommitDetails,
    GitError,
    GitErrorCode,
    GitResult,
)
from .base_branch import BaseBranchResolver
from .output_parsers import parse_lines

logger = get_logger(__name__)

COMMIT_LOG_FORMAT = "--format=%H|%s|%an|%ad"
FIELD_SEPARATOR = "\x1f"


def parse_commits_output(output: str) -> List[GitCommit]:
    """Parse ``sha|subject|author|date`` lines, skipping incomplete ones."""
    commits = []
    for line in parse_lines(output):
        parts = line.split("|")
        if len(parts) < 4:
            continue
        sha, message, author, date = parts[:4]
        if not (sha and message and author and date):
            continue
        commits.append(
            GitCommit(
                sha=sha.strip(),
                message=message.strip(),
                author=author.strip(),
                date=date.strip(),
            )
        )
    return commits


def parse_commit_details(output: str) -> Optional[GitCommitDetails]:
    parts = output.split(FIELD_SEPARATOR)
    if len(parts) < 5:
        return None
    sha, subject, body, author, date = parts[:5]
    if not (sha.strip() and subject.strip() and author.strip() and date.strip()):
        return None
    return GitCommitDetails(
        sha=sha.strip(),
        message=subject.strip(),
        body=body.strip(),
        author=author.strip(),
        date=date.strip(),
    )


class GitService:
    """Revision queries against one gateway. Holds no per-repository state."""

    def __init__(
        self,
        gateway: GitGatewayProtocol,
        recent_commits_limit: int = 20,
        batch_size: int = 20,
        max_commits: int = 100,
    ):
        self.gateway = gateway
        self.recent_commits_limit = recent_commits_limit
        self.base_branch_resolver = BaseBranchResolver(
            gateway, batch_size=batch_size, max_commits=max_commits
        )

    def get_current_branch(self, cwd: str) -> GitResult[str]:
        result = self.gateway.execute(["branch", "--show-current"], cwd)
        if not result.success:
            return result

        branch = result.data.strip()
        if not branch:
            return GitResult.fail(
                GitError(
                    code=GitErrorCode.COMMAND_FAILED,
                    message=f"HEAD is detached: {cwd}",
                    command="git branch --show-current",
                )
            )
        return GitResult.ok(branch)

    def get_branch_hash(self, cwd: str, branch_name: str) -> GitResult[Optional[str]]:
        result = self.gateway.execute(["rev-parse", branch_name], cwd)
        if not result.success:
            return result
        lines = result.data.strip().split("\n")
        return GitResult.ok(lines[0] or None)

    def get_commits(self, cwd: str) -> GitResult[List[GitCommit]]:
        result = self.gateway.execute(
            [
                "log",
                "-n",
                str(self.recent_commits_limit),
                COMMIT_LOG_FORMAT,
                "--date=iso",
            ],
            cwd,
        )
        if not result.success:
            return GitResult.fail(result.error)
        return GitResult.ok(parse_commits_output(result.data))

    def get_commits_between_branches(
        self, cwd: str, base_branch: str, target_branch: str
    ) -> GitResult[List[GitCommit]]:
        result = self.gateway.execute(
            ["log", f"{base_branch}..{target_branch}", COMMIT_LOG_FORMAT, "--date=iso"],
            cwd,
        )
        if not result.success:
            return GitResult.fail(result.error)
        return GitResult.ok(parse_commits_output(result.data))

    def get_commit_details(self, cwd: str, sha: str) -> GitResult[GitCommitDetails]:
        command = [
            "show",
            "-s",
            FIELD_SEPARATOR.join(["--format=%H", "%s", "%b", "%an", "%ad"]),
            "--date=iso",
            sha,
        ]
        result = self.gateway.execute(command, cwd)
        if not result.success:
            return GitResult.fail(result.error)

        details = parse_commit_details(result.data)
        if details is None:
            return GitResult.fail(
                GitError(
                    code=GitErrorCode.PARSE_ERROR,
                    message=f"Unexpected commit details output for {sha}",
                    command=f"git show {sha}",
                )
            )
        return GitResult.ok(details)

    def find_base_branch(
        self, cwd: str, target_branch: str
    ) -> GitResult[Optional[BaseBranchResult]]:
        return self.base_branch_resolver.find_base_branch(cwd, target_branch)

    def get_current_revisions(self, cwd: str) -> GitResult[CurrentRevisions]:
        """
        Summarize where the working tree stands.

        Reports the current branch, its head commit, its base branch and the
        commits made since the base branch. A base branch that cannot be
        determined is reported as None rather than failing the summary.
        """
        current = self.get_current_branch(cwd)
        if not current.success:
            return GitResult.fail(current.error)

        head = self.get_branch_hash(cwd, current.data)
        if not head.success:
            return GitResult.fail(head.error)

        base = self.find_base_branch(cwd, current.data)
        base_branch = base.data if base.success else None
        if not base.success:
            logger.warning(
                "Could not determine base branch",
                branch=current.data,
                code=base.error.code.value,
            )

        commits: List[GitCommit] = []
        if base_branch is not None:
            between = self.get_commits_between_branches(cwd, base_branch.hash, "HEAD")
            if between.success:
                commits = between.data

        return GitResult.ok(
            CurrentRevisions(
                current_branch=current.data,
                head=head.data,
                base_branch=base_branch,
                commits=commits,
            )
        )

    async def get_current_revisions_async(self, cwd: str) -> GitResult[CurrentRevisions]:
        return await asyncio.to_thread(self.get_current_revisions, cwd)
