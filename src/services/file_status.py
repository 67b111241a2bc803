"""Working-tree status for the file explorer, parsed from ``git status --porcelain``."""

import asyncio
from typing import Dict, Optional, Tuple

from ..config.logging_config import get_logger
from ..protocols.git_gateway_protocol import GitGatewayProtocol
from ..schemas.git import FileStatus, FileStatusResponse
from .output_parsers import unquote_path

logger = get_logger(__name__)

RENAME_ARROW = " -> "

_INDEX_STATUS = {
    "A": FileStatus.ADDED,
    "M": FileStatus.MODIFIED,
    "D": FileStatus.DELETED,
    "R": FileStatus.RENAMED,
    "C": FileStatus.ADDED,  # No separate copied state in the explorer
}

_WORKING_TREE_STATUS = {
    "M": FileStatus.MODIFIED,
    "D": FileStatus.DELETED,
    "A": FileStatus.ADDED,
}


def parse_status_code(status_code: str) -> Optional[FileStatus]:
    """
    Map a two-character porcelain status (index, working tree) to a FileStatus.

    Staged changes take priority over working-tree changes, so ``AM`` is
    added and ``MD`` is modified. Returns None for codes with no
    explorer-visible meaning (e.g. ignored files).
    """
    index_status, working_tree_status = status_code[0], status_code[1]

    if index_status == "?" and working_tree_status == "?":
        return FileStatus.UNTRACKED

    if index_status in _INDEX_STATUS:
        return _INDEX_STATUS[index_status]

    return _WORKING_TREE_STATUS.get(working_tree_status)


def parse_status_line(line: str) -> Optional[Tuple[str, FileStatus]]:
    """Parse ``XY PATH`` or ``XY OLD -> NEW``. The line must not be trimmed."""
    if len(line) < 4:
        return None

    status = parse_status_code(line[:2])
    if status is None:
        return None

    path = line[3:]
    if status == FileStatus.RENAMED and RENAME_ARROW in path:
        # Old names may themselves contain "->", the new name follows the last arrow
        path = path.rsplit(RENAME_ARROW, 1)[1]
    return unquote_path(path), status


def parse_porcelain_status(output: str) -> Dict[str, FileStatus]:
    files: Dict[str, FileStatus] = {}
    for line in output.split("\n"):
        line = line.rstrip("\r")
        if not line:
            continue
        parsed = parse_status_line(line)
        if parsed is not None:
            path, status = parsed
            files[path] = status
    return files


class FileStatusService:
    """Best-effort file status lookup. Failures degrade to an empty map."""

    def __init__(self, gateway: GitGatewayProtocol):
        self.gateway = gateway

    def get_file_status(self, cwd: str) -> FileStatusResponse:
        if not self.gateway.is_repository(cwd):
            return FileStatusResponse(is_git_repo=False, files={})

        result = self.gateway.execute(["status", "--porcelain"], cwd)
        if not result.success:
            logger.warning(
                "Status query failed, returning empty file status",
                cwd=cwd,
                code=result.error.code.value,
            )
            return FileStatusResponse(is_git_repo=True, files={})

        return FileStatusResponse(
            is_git_repo=True, files=parse_porcelain_status(result.data)
        )

    async def get_file_status_async(self, cwd: str) -> FileStatusResponse:
        return await asyncio.to_thread(self.get_file_status, cwd)
