"""FastAPI router for retention administration endpoints.

Provides admin APIs for:
- Manually triggering a retention pass
- Previewing what a pass would delete
- Inspecting the processed-image bucket

Mounted under /api/image next to the (external) upload routes.
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ..dependencies import get_retention_scheduler, get_retention_service
from .scheduler import RetentionScheduler
from .schemas import CleanupResponse, RetentionFailure
from .service import RetentionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/image", tags=["retention"])


@router.post("/cleanup-now")
async def cleanup_now(
    scheduler: RetentionScheduler = Depends(get_retention_scheduler),
):
    """Run a retention pass immediately.

    Returns:
        200 with deletedCount/errorCount (plus orphan sweep counts), or
        500 with the enumeration error if the pass could not run
    """
    result = await scheduler.run_now()

    if isinstance(result, RetentionFailure):
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Cleanup failed", "error": result.error},
        )

    response = CleanupResponse(
        deleted_count=result.deleted_count,
        error_count=result.error_count,
        orphans_deleted=result.orphans_deleted,
        orphan_errors=result.orphan_errors,
    )
    return response.model_dump(by_alias=True)


@router.get("/retention-report")
async def retention_report(
    service: RetentionService = Depends(get_retention_service),
):
    """Preview how many records and blobs a pass would delete now."""
    try:
        report = await service.generate_retention_report()
    except Exception as e:
        logger.error("Retention report failed", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Retention report failed", "error": str(e)},
        )

    data = report.model_dump(by_alias=True, mode="json")
    data["totalEligibleForDeletion"] = report.total_eligible_for_deletion
    return data


@router.get("/check-cloud-files")
async def check_cloud_files(
    service: RetentionService = Depends(get_retention_service),
):
    """List the bucket: total files plus the first 20 with their age in hours."""
    try:
        inventory = await service.list_cloud_files()
    except Exception as e:
        logger.error("Cloud file listing failed", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(e)},
        )

    return inventory.model_dump(by_alias=True, mode="json")
