"""Paginated retrieval of (commit, parent) pairs from ``git log --graph``."""

import re
from typing import List

from ..models.git_models import CommitWithParent
from ..protocols.git_gateway_protocol import GitGatewayProtocol
from ..schemas.git import GitResult
from .output_parsers import parse_lines

# Only first-column graph rows ("* <hash> <parents>") describe a commit on the
# walked line. Merge rows pad the hashes ("*   <hash> <p1> <p2>", octopus
# merges "*-.   ...") and may carry edges of other columns ("* | <hash> <p>").
_GRAPH_COMMIT_LINE = re.compile(r"^\*[-. |/\\]*(?P<hashes>[^-. |/\\].*)$")


def parse_commits_with_parent(output: str) -> List[CommitWithParent]:
    """Pair each first-column commit with its first parent. Root commits are skipped."""
    commits = []
    for line in parse_lines(output):
        match = _GRAPH_COMMIT_LINE.match(line)
        if not match:
            continue
        tokens = match.group("hashes").split()
        if len(tokens) < 2:
            continue
        commits.append(CommitWithParent(current=tokens[0], parent=tokens[1]))
    return commits


class CommitGraphWalker:
    """Walks HEAD's history newest-first in fixed-size pages."""

    def __init__(
        self,
        gateway: GitGatewayProtocol,
        batch_size: int = 20,
        max_commits: int = 100,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be positive")
        self.gateway = gateway
        self.batch_size = batch_size
        self.max_commits = max_commits

    def get_commits_with_parent(
        self, cwd: str, offset: int, limit: int
    ) -> GitResult[List[CommitWithParent]]:
        result = self.gateway.execute(
            [
                "log",
                "-n",
                str(limit),
                "--skip",
                str(offset),
                "--graph",
                "--pretty=format:%h %p",
            ],
            cwd,
        )
        if not result.success:
            return GitResult.fail(result.error)
        return GitResult.ok(parse_commits_with_parent(result.data))

    def collect(self, cwd: str) -> GitResult[List[CommitWithParent]]:
        """Fetch pages until history runs out or ``max_commits`` is reached."""
        commits: List[CommitWithParent] = []
        offset = 0
        while offset < self.max_commits:
            limit = min(self.batch_size, self.max_commits - offset)
            page = self.get_commits_with_parent(cwd, offset=offset, limit=limit)
            if not page.success:
                return page
            if not page.data:
                break
            commits.extend(page.data)
            offset += limit
        return GitResult.ok(commits)
