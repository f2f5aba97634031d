"""Scheduler status and manual control endpoints."""

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from inboxsage.api.dependencies import get_current_user_id, get_orchestrator, get_scheduler
from inboxsage.pipeline.orchestrator import PipelineOrchestrator
from inboxsage.pipeline.scheduler import JobScheduler
from inboxsage.utils.logging import get_logger

router = APIRouter(prefix="/scheduler", tags=["scheduler"])
logger = get_logger(__name__)


class SchedulerActionRequest(BaseModel):
    """Manual scheduler action."""

    action: str


@router.get("")
async def scheduler_status(
    scheduler: JobScheduler = Depends(get_scheduler),
) -> Dict[str, Any]:
    """Registered jobs and whether recurring jobs are enabled."""
    return {"status": scheduler.get_status(), "enabled": scheduler.enabled}


@router.post("")
async def scheduler_action(
    request: SchedulerActionRequest,
    user_id: str = Depends(get_current_user_id),
    scheduler: JobScheduler = Depends(get_scheduler),
    orchestrator: PipelineOrchestrator = Depends(get_orchestrator),
) -> Dict[str, Any]:
    """Run a manual action: trigger-content, trigger-ai or stop-all."""
    logger.info("scheduler_action_requested", action=request.action, user_id=user_id)

    if request.action == "trigger-content":
        stats = await scheduler.trigger_content_aggregation()
        return {"message": "Content aggregation triggered", "stats": stats}

    if request.action == "trigger-ai":
        orchestrator.require_summarizer()
        stats = await scheduler.trigger_ai_processing()
        return {"message": "AI processing triggered", "stats": stats}

    if request.action == "stop-all":
        scheduler.stop_all()
        return {"message": "All tasks stopped"}

    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid action")
