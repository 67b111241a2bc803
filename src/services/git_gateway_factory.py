"""Factory for creating git command gateways."""

from ..config.settings import Settings
from ..protocols.git_gateway_protocol import GitGatewayProtocol
from .git_gateway import GitCommandGateway


def create_git_gateway(
    git_binary: str = "git",
    timeout: int = 30,
) -> GitGatewayProtocol:
    """
    Create a GitCommandGateway instance.

    Args:
        git_binary: Git executable to invoke
        timeout: Seconds before a running git command is killed

    Returns:
        GitGatewayProtocol implementation
    """
    return GitCommandGateway(git_binary=git_binary, timeout=timeout)


def create_git_gateway_from_settings(settings: Settings) -> GitGatewayProtocol:
    """
    Create a gateway using application settings.

    Args:
        settings: Application settings

    Returns:
        GitGatewayProtocol implementation
    """
    return create_git_gateway(
        git_binary=settings.GIT_BINARY,
        timeout=settings.GIT_COMMAND_TIMEOUT,
    )
