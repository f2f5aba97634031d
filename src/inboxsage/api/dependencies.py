"""Request dependencies: caller identity and application components."""

from typing import Optional

from fastapi import Header, HTTPException, Request, status

from inboxsage.pipeline.orchestrator import PipelineOrchestrator
from inboxsage.pipeline.scheduler import JobScheduler

USER_ID_HEADER = "X-User-Id"


async def get_current_user_id(
    x_user_id: Optional[str] = Header(default=None, alias=USER_ID_HEADER),
) -> str:
    """Authenticated user id set by the upstream auth layer.

    Raises:
        HTTPException: 401 if the header is missing or blank.
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
    return x_user_id.strip()


def get_orchestrator(request: Request) -> PipelineOrchestrator:
    return request.app.state.orchestrator


def get_scheduler(request: Request) -> JobScheduler:
    return request.app.state.scheduler
