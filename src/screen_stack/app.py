"""FastAPI application factory and server entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING

import uvicorn
from fastapi import FastAPI
from fastapi.templating import Jinja2Templates

from screen_stack.config import load_settings
from screen_stack.history.log import HistoryLog
from screen_stack.logging import configure_logging
from screen_stack.routes import history, quality, screens, status
from screen_stack.services.screens import ScreenRegistry

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the history log and screen registry from settings."""
    settings = load_settings()
    configure_logging(settings.app.log_level)

    history_log = HistoryLog(
        settings.history.workspace_path,
        retention_days=settings.history.retention_days,
        enabled=settings.history.enabled,
    )
    app.state.settings = settings
    app.state.history = history_log
    app.state.screens = ScreenRegistry(history=history_log, config=settings.screen)
    logger.info(
        "Screen service started — env=%s history=%s retention_days=%d",
        settings.app.env,
        history_log.history_root if history_log.enabled else "disabled",
        history_log.retention_days,
    )

    yield

    await history_log.sweeper.wait()
    logger.info("Screen service stopped")


def create_app() -> FastAPI:
    app = FastAPI(title="screen-stack", lifespan=lifespan)
    app.state.templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
    app.include_router(status.router)
    app.include_router(screens.router)
    app.include_router(quality.router)
    app.include_router(history.router)
    return app


def main() -> None:
    """Entry point for the screen service."""
    settings = load_settings()
    uvicorn.run(
        "screen_stack.app:create_app",
        factory=True,
        host=settings.app.host,
        port=settings.app.port,
        reload=settings.app.is_development,
    )


if __name__ == "__main__":
    main()
