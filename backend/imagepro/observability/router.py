"""Observability API endpoints.

Provides metrics and health checks for monitoring.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from .logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["Observability"])


@router.get(
    "/metrics",
    summary="Prometheus metrics endpoint",
    include_in_schema=False,
)
def metrics():
    """Expose Prometheus metrics in exposition format."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


@router.get("/health", summary="Health check endpoint")
def health_check(request: Request):
    """Report process health and retention scheduler state.

    Always 200 while the process serves requests; the scheduler block lets
    monitoring spot a stopped cleanup job.
    """
    scheduler = getattr(request.app.state, "retention_scheduler", None)
    settings = getattr(request.app.state, "settings", None)

    scheduler_data = {"configured": scheduler is not None}
    if scheduler is not None:
        next_run = scheduler.next_run_time
        scheduler_data.update({
            "running": scheduler.is_running,
            "passInProgress": scheduler.pass_in_progress,
            "nextRunTime": next_run.isoformat() if next_run else None,
        })

    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.ENVIRONMENT if settings else "development",
        "retentionScheduler": scheduler_data,
    }
