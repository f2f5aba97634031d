"""Manual content fetch and summarization endpoints."""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel, ConfigDict, Field

from inboxsage.api.dependencies import get_current_user_id, get_orchestrator
from inboxsage.pipeline.orchestrator import PipelineOrchestrator

router = APIRouter(prefix="/content", tags=["content"])


class FetchRequest(BaseModel):
    """Fetch one source, or all of the caller's sources when omitted."""

    model_config = ConfigDict(populate_by_name=True)

    source_id: Optional[str] = Field(default=None, alias="sourceId")


class ProcessRequest(BaseModel):
    """Summarize up to max_articles unprocessed articles."""

    model_config = ConfigDict(populate_by_name=True)

    max_articles: Optional[int] = Field(default=None, alias="maxArticles", gt=0, le=100)


@router.post("/fetch")
async def fetch_content(
    request: Optional[FetchRequest] = Body(default=None),
    user_id: str = Depends(get_current_user_id),
    orchestrator: PipelineOrchestrator = Depends(get_orchestrator),
) -> Dict[str, Any]:
    """Fetch the caller's sources now."""
    aggregator = orchestrator.aggregator

    if request is not None and request.source_id:
        new_articles = await aggregator.trigger_manual_fetch(request.source_id, user_id)
    else:
        new_articles = await aggregator.fetch_all_user_content(user_id)

    return {"message": "Content fetched successfully", "newArticles": new_articles}


@router.post("/process")
async def process_content(
    request: Optional[ProcessRequest] = Body(default=None),
    user_id: str = Depends(get_current_user_id),
    orchestrator: PipelineOrchestrator = Depends(get_orchestrator),
) -> Dict[str, Any]:
    """Summarize the caller's unprocessed articles now."""
    summarizer = orchestrator.require_summarizer()

    max_articles = orchestrator.config.default_max_articles
    if request is not None and request.max_articles:
        max_articles = request.max_articles

    stats = await summarizer.process_articles(user_id, max_articles)
    return {"message": "Articles processed successfully", **stats}
