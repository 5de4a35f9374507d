"""Main FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tracker.api.routes import router
from tracker.config import Settings, configure_logging, get_settings
from tracker.database import Database
from tracker.services.core import build_core
from tracker.services.notifications import NotificationSink

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    sink: Optional[NotificationSink] = None,
) -> FastAPI:
    """Build the application around one store and one scheduling loop."""
    settings = settings or get_settings()
    core = build_core(settings, database=database, sink=sink)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.SCHEDULER_ENABLED:
            core.loop.start()
            logger.info("Background scheduler started")
        try:
            yield
        finally:
            core.loop.stop(timeout=settings.TICK_INTERVAL_SECONDS)

    app = FastAPI(
        title="Tracker - Reminders and Summaries",
        description="Event reminders and periodic activity summaries for a personal project/contact tracker.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.core = core

    # Enable CORS for the local desktop UI
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include API routes
    app.include_router(router, prefix="/api", tags=["Tracker"])

    # Health check
    @app.get("/health")
    def health_check():
        return {"status": "healthy", "service": "Tracker", "scheduler_running": core.loop.running}

    return app


def main():
    import uvicorn

    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    uvicorn.run(create_app(settings), host="127.0.0.1", port=8000)


if __name__ == "__main__":
    main()
