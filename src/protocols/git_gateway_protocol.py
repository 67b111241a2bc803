"""Git command gateway protocol interface."""

from typing import List, Protocol, runtime_checkable

from ..schemas.git import GitResult


@runtime_checkable
class GitGatewayProtocol(Protocol):
    """Protocol for running a single git subcommand against a directory."""

    def execute(self, args: List[str], cwd: str) -> GitResult[str]:
        """Run ``git <args>`` in ``cwd``. Returns captured stdout or a typed error."""
        ...

    def is_repository(self, cwd: str) -> bool:
        """Whether ``cwd`` is inside a git working tree."""
        ...
