from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every value has a working default, so the service runs against a local
    checkout without any .env file. The engine classes receive these values
    through their constructors rather than reading settings themselves.
    """

    # Git command gateway
    GIT_BINARY: str = "git"
    GIT_COMMAND_TIMEOUT: int = 30  # Seconds per git invocation

    # Diff and lineage tuning
    DIFF_CONTEXT_LINES: int = 5
    BASE_BRANCH_BATCH_SIZE: int = 20
    BASE_BRANCH_MAX_COMMITS: int = 100
    RECENT_COMMITS_LIMIT: int = 20

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "pretty"  # "pretty" or "json"

    # Development and debugging
    DEBUG: bool = False


@lru_cache
def get_settings() -> Settings:
    return Settings()
