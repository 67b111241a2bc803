from fastapi import Depends

from src.config.settings import Settings, get_settings
from src.protocols.git_gateway_protocol import GitGatewayProtocol
from src.services import (
    BaseBranchResolver,
    DiffComputer,
    FileStatusService,
    GitService,
    create_git_gateway_from_settings,
)


def get_git_gateway(settings: Settings = Depends(get_settings)) -> GitGatewayProtocol:
    return create_git_gateway_from_settings(settings)


# Service層は、先行するGateway層のDI（Getter）に依存する
def get_diff_computer(
    gateway: GitGatewayProtocol = Depends(get_git_gateway),
    settings: Settings = Depends(get_settings),
) -> DiffComputer:
    return DiffComputer(gateway, context_lines=settings.DIFF_CONTEXT_LINES)


def get_file_status_service(
    gateway: GitGatewayProtocol = Depends(get_git_gateway),
) -> FileStatusService:
    return FileStatusService(gateway)


def get_base_branch_resolver(
    gateway: GitGatewayProtocol = Depends(get_git_gateway),
    settings: Settings = Depends(get_settings),
) -> BaseBranchResolver:
    return BaseBranchResolver(
        gateway,
        batch_size=settings.BASE_BRANCH_BATCH_SIZE,
        max_commits=settings.BASE_BRANCH_MAX_COMMITS,
    )


def get_git_service(
    gateway: GitGatewayProtocol = Depends(get_git_gateway),
    settings: Settings = Depends(get_settings),
) -> GitService:
    return GitService(
        gateway,
        recent_commits_limit=settings.RECENT_COMMITS_LIMIT,
        batch_size=settings.BASE_BRANCH_BATCH_SIZE,
        max_commits=settings.BASE_BRANCH_MAX_COMMITS,
    )
