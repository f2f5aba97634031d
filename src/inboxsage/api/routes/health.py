"""Health check endpoint."""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from inboxsage.__version__ import __version__
from inboxsage.api.dependencies import get_orchestrator
from inboxsage.pipeline.orchestrator import PipelineOrchestrator
from inboxsage.utils.date_utils import now_utc

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(
    orchestrator: PipelineOrchestrator = Depends(get_orchestrator),
) -> Dict[str, Any]:
    """Liveness plus which external capabilities are configured."""
    return {
        "status": "healthy",
        "service": "InboxSage API",
        "version": __version__,
        "environment": orchestrator.config.environment,
        "timestamp": now_utc().isoformat(),
        "summarization": orchestrator.summarizer is not None,
        "email": orchestrator.email_service is not None,
    }
