"""Global FastAPI dependencies for retention components.

The application lifespan builds one RetentionService and one
RetentionScheduler and stores them on ``app.state``. Endpoints receive them
through these dependencies, which tests override with in-memory stores.
"""

from fastapi import HTTPException, Request, status

from .retention.scheduler import RetentionScheduler
from .retention.service import RetentionService


def get_retention_scheduler(request: Request) -> RetentionScheduler:
    """Return the application's retention scheduler.

    Raises:
        HTTPException 503: If the application started without one
    """
    scheduler = getattr(request.app.state, "retention_scheduler", None)
    if scheduler is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Retention scheduler is not configured",
        )
    return scheduler


def get_retention_service(request: Request) -> RetentionService:
    """Return the retention service owned by the application's scheduler."""
    return get_retention_scheduler(request).service
