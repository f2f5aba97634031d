"""Digest preview, send and test-email endpoints."""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from inboxsage.api.dependencies import get_current_user_id, get_orchestrator
from inboxsage.pipeline.orchestrator import PipelineOrchestrator

router = APIRouter(prefix="/digest", tags=["digest"])


@router.get("")
async def preview_digest(
    user_id: str = Depends(get_current_user_id),
    orchestrator: PipelineOrchestrator = Depends(get_orchestrator),
) -> Dict[str, Any]:
    """Compose the caller's digest without saving or sending it."""
    preview = await orchestrator.digest_generator.get_digest_preview(user_id)
    return {"preview": preview.model_dump(mode="json")}


@router.post("")
async def send_digest(
    user_id: str = Depends(get_current_user_id),
    orchestrator: PipelineOrchestrator = Depends(get_orchestrator),
) -> Dict[str, Any]:
    """Compose, save and email the caller's digest."""
    digest = await orchestrator.digest_generator.create_and_send_digest(user_id)
    return {"message": "Digest sent successfully", "digestId": digest.id}


@router.post("/test")
async def send_test_email(
    user_id: str = Depends(get_current_user_id),
    orchestrator: PipelineOrchestrator = Depends(get_orchestrator),
) -> Dict[str, Any]:
    """Send a connectivity test email to the caller's account address."""
    await orchestrator.digest_generator.send_test_digest(user_id)
    return {"message": "Test email sent successfully"}
