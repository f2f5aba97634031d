"""API routers."""

from inboxsage.api.routes.content import router as content_router
from inboxsage.api.routes.digest import router as digest_router
from inboxsage.api.routes.health import router as health_router
from inboxsage.api.routes.scheduler import router as scheduler_router

__all__ = ["content_router", "digest_router", "health_router", "scheduler_router"]
