import asyncio
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from src.dependencies import (
    get_base_branch_resolver,
    get_diff_computer,
    get_file_status_service,
    get_git_service,
)
from src.schemas.git import (
    BaseBranchResult,
    CurrentRevisions,
    FileStatusResponse,
    GitCommit,
    GitCommitDetails,
    GitRawDiffResult,
    GitResult,
)
from src.services import BaseBranchResolver, DiffComputer, FileStatusService, GitService
from src.services.errors import InvalidRefError

router = APIRouter(prefix="/git", tags=["git"])


@router.get("/diff", response_model=GitResult[GitRawDiffResult])
async def get_git_diff(
    cwd: str,
    from_ref: str = Query(..., alias="fromRef"),
    to_ref: str = Query(..., alias="toRef"),
    computer: DiffComputer = Depends(get_diff_computer),
):
    """Diff two ref descriptors ("branch:main", "HEAD", "working")."""
    try:
        return await computer.get_diff(cwd, from_ref, to_ref)
    except InvalidRefError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/compare", response_model=GitResult[GitRawDiffResult])
async def compare_branches(
    cwd: str,
    base: str,
    target: str,
    computer: DiffComputer = Depends(get_diff_computer),
):
    try:
        return await computer.compare_branches(cwd, base, target)
    except InvalidRefError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/status", response_model=FileStatusResponse)
async def get_file_status(
    cwd: str, service: FileStatusService = Depends(get_file_status_service)
):
    """Per-file working tree status for the file explorer."""
    return await service.get_file_status_async(cwd)


@router.get("/base-branch", response_model=GitResult[Optional[BaseBranchResult]])
async def get_base_branch(
    cwd: str,
    branch: str,
    resolver: BaseBranchResolver = Depends(get_base_branch_resolver),
):
    return await resolver.find_base_branch_async(cwd, branch)


@router.get("/revisions", response_model=GitResult[CurrentRevisions])
async def get_current_revisions(
    cwd: str, service: GitService = Depends(get_git_service)
):
    """Current branch, its base branch and the commits made since."""
    return await service.get_current_revisions_async(cwd)


@router.get("/commits", response_model=GitResult[List[GitCommit]])
async def get_commits(cwd: str, service: GitService = Depends(get_git_service)):
    return await asyncio.to_thread(service.get_commits, cwd)


@router.get("/commits/{sha}", response_model=GitResult[GitCommitDetails])
async def get_commit_details(
    sha: str, cwd: str, service: GitService = Depends(get_git_service)
):
    return await asyncio.to_thread(service.get_commit_details, cwd, sha)
