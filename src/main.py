from fastapi import FastAPI

from src.apps.api import router
from src.config.logging_config import configure_logging
from src.config.settings import get_settings

settings = get_settings()
configure_logging(settings)

# --- アプリケーション初期化 ---

app = FastAPI(
    title="Git Diff Lineage API",
    version="0.1.0",
    description="Structured git diffs, file status and base branch detection for a working tree",
)

app.include_router(router.router, prefix="/api")


@app.get("/health")
async def health_check():
    """
    Simple health check endpoint to confirm the API is running.
    """
    return {"status": "ok"}
