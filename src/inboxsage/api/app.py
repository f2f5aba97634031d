"""FastAPI application for InboxSage's manual control surface."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from inboxsage.__version__ import __version__
from inboxsage.api.routes import content_router, digest_router, health_router, scheduler_router
from inboxsage.core.config import Config
from inboxsage.database.connection import init_database
from inboxsage.pipeline.orchestrator import PipelineOrchestrator
from inboxsage.pipeline.scheduler import JobScheduler
from inboxsage.utils.exceptions import (
    CollectorError,
    ConfigurationError,
    DigestDeliveryError,
    InboxSageError,
    NoContentError,
    NotFoundError,
)
from inboxsage.utils.logging import get_logger

logger = get_logger(__name__)

# Most specific first
_ERROR_STATUS = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (NoContentError, status.HTTP_404_NOT_FOUND),
    (DigestDeliveryError, status.HTTP_502_BAD_GATEWAY),
    (CollectorError, status.HTTP_502_BAD_GATEWAY),
    (ConfigurationError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def status_for_error(exc: InboxSageError) -> int:
    for error_type, status_code in _ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def create_app(
    config: Optional[Config] = None,
    orchestrator: Optional[PipelineOrchestrator] = None,
    scheduler: Optional[JobScheduler] = None,
) -> FastAPI:
    """Build the application with its pipeline and job coordinator.

    Args:
        config: Configuration (read from the environment when omitted).
        orchestrator: Pre-built pipeline (tests inject one over a temp database).
        scheduler: Pre-built job coordinator.

    Returns:
        FastAPI app; recurring jobs start with the app lifespan.
    """
    owns_db = orchestrator is None
    if orchestrator is None:
        config = config or Config()
        config.validate_paths()
        orchestrator = PipelineOrchestrator(config, init_database(config.db_path))

    if scheduler is None:
        scheduler = orchestrator.build_scheduler()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        scheduler.init()
        try:
            yield
        finally:
            scheduler.stop_all()
            await scheduler.wait_for_runs()
            if owns_db:
                orchestrator.db.close()

    app = FastAPI(title="InboxSage API", version=__version__, lifespan=lifespan)
    app.state.orchestrator = orchestrator
    app.state.scheduler = scheduler

    @app.exception_handler(InboxSageError)
    async def inboxsage_error_handler(request: Request, exc: InboxSageError) -> JSONResponse:
        status_code = status_for_error(exc)
        logger.warning(
            "request_failed",
            path=request.url.path,
            error_type=type(exc).__name__,
            error=str(exc),
            status_code=status_code,
        )
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    app.include_router(health_router)
    app.include_router(scheduler_router)
    app.include_router(content_router)
    app.include_router(digest_router)

    return app
