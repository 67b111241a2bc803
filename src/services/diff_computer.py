"""Structured diffs between two refs, including untracked working-tree files."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, Set

from ..config.logging_config import get_logger
from ..models.git_models import FileStats, NameStatusEntry
from ..protocols.git_gateway_protocol import GitGatewayProtocol
from ..schemas.git import (
    DiffSummary,
    GitDiffFileSummary,
    GitFileStatus,
    GitRawDiffResult,
    GitResult,
)
from .errors import InvalidRefError
from .output_parsers import parse_name_status, parse_numstat, parse_untracked_files
from .ref_resolver import resolve_ref

logger = get_logger(__name__)


def merge_file_summaries(
    file_stats: Dict[str, FileStats],
    file_statuses: Dict[str, NameStatusEntry],
    untracked: Set[str],
) -> List[GitDiffFileSummary]:
    """
    Combine numstat counts with name-status change types.

    Numstat decides which files appear. Files missing from name-status are
    reported as modified, and files staged from the untracked set are always
    reported as untracked.
    """
    files = []
    for file_path, stats in file_stats.items():
        entry = file_statuses.get(file_path)
        if file_path in untracked:
            status = GitFileStatus.UNTRACKED
        elif entry is not None:
            status = entry.status
        else:
            status = GitFileStatus.MODIFIED

        files.append(
            GitDiffFileSummary(
                file_path=file_path,
                additions=stats.additions,
                deletions=stats.deletions,
                status=status,
                old_file_path=entry.old_file_path if entry is not None else None,
            )
        )
    return files


def build_diff_result(
    numstat_output: str,
    name_status_output: str,
    raw_diff: str,
    untracked: Set[str],
) -> GitRawDiffResult:
    files = merge_file_summaries(
        parse_numstat(numstat_output), parse_name_status(name_status_output), untracked
    )
    return GitRawDiffResult(
        raw_diff=raw_diff,
        files=files,
        summary=DiffSummary(
            total_files=len(files),
            total_additions=sum(f.additions for f in files),
            total_deletions=sum(f.deletions for f in files),
        ),
    )


class DiffComputer:
    """Computes diffs between refs through a git command gateway."""

    def __init__(self, gateway: GitGatewayProtocol, context_lines: int = 5):
        self.gateway = gateway
        self.context_lines = context_lines

    async def get_diff(
        self, cwd: str, from_ref_text: str, to_ref_text: str
    ) -> GitResult[GitRawDiffResult]:
        """
        Diff ``from_ref_text`` against ``to_ref_text``.

        Both arguments are ref descriptors (``"branch:main"``, ``"HEAD"``,
        ``"working"``). Comparing against ``"working"`` includes untracked
        files, which are marked intent-to-add for the duration of the call.
        Malformed descriptors raise ``InvalidRefError``.
        """
        from_ref = resolve_ref(from_ref_text)
        to_ref = resolve_ref(to_ref_text)

        if from_ref == to_ref:
            return GitResult.ok(GitRawDiffResult.empty())

        if from_ref is None:
            raise InvalidRefError(f"Invalid fromRef: {from_ref_text}")

        is_working_directory = to_ref is None
        ref_args = [from_ref] if is_working_directory else [from_ref, to_ref]

        async with self._untracked_as_intent_to_add(
            cwd, is_working_directory
        ) as untracked:
            numstat, name_status, diff = await asyncio.gather(
                self._execute(["diff", "--numstat", *ref_args], cwd),
                self._execute(["diff", "--name-status", *ref_args], cwd),
                self._execute(
                    ["diff", f"--unified={self.context_lines}", *ref_args], cwd
                ),
            )

            for result in (numstat, name_status, diff):
                if not result.success:
                    return GitResult.fail(result.error)

            return GitResult.ok(
                build_diff_result(numstat.data, name_status.data, diff.data, untracked)
            )

    async def compare_branches(
        self, cwd: str, base_branch: str, target_branch: str
    ) -> GitResult[GitRawDiffResult]:
        return await self.get_diff(cwd, base_branch, target_branch)

    async def _execute(self, args: List[str], cwd: str) -> GitResult[str]:
        return await asyncio.to_thread(self.gateway.execute, args, cwd)

    @asynccontextmanager
    async def _untracked_as_intent_to_add(
        self, cwd: str, enabled: bool
    ) -> AsyncIterator[Set[str]]:
        untracked: List[str] = []
        if enabled:
            untracked = await self._get_untracked_files(cwd)

        if untracked:
            logger.debug("Marking untracked files intent-to-add", count=len(untracked))
            added = await self._execute(["add", "-N", "--", *untracked], cwd)
            if not added.success:
                logger.warning(
                    "Failed to add intent-to-add for untracked files",
                    code=added.error.code.value,
                    stderr=added.error.stderr,
                )

        try:
            yield set(untracked)
        finally:
            if untracked:
                await self._reset_intent_to_add(cwd, untracked)

    async def _get_untracked_files(self, cwd: str) -> List[str]:
        result = await self._execute(
            ["status", "--untracked-files=all", "--short"], cwd
        )
        if not result.success:
            logger.warning(
                "Could not list untracked files", code=result.error.code.value
            )
            return []
        return parse_untracked_files(result.data)

    async def _reset_intent_to_add(self, cwd: str, files: List[str]) -> None:
        result = await self._execute(["reset", "HEAD", "--", *files], cwd)
        if not result.success:
            logger.warning(
                "Failed to reset intent-to-add files",
                count=len(files),
                code=result.error.code.value,
                stderr=result.error.stderr,
            )
