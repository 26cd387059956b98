"""Retention service for upload cleanup operations.

This service enforces the upload retention window across two independent
stores:
- Metadata-driven deletion: expired upload records and the blobs they point to
- Orphan sweep: expired blobs in the bucket, whether or not a record exists

The two stores are not transactional. A pass never rolls back; a crash
mid-pass leaves leftovers that the next pass removes once they are past the
cutoff. All deletions are idempotent, so passes can be safely retried.
"""

import asyncio
import logging
import time
from datetime import datetime, timedelta
from typing import Awaitable, Callable, Optional, Tuple, TypeVar

from ..domain.uploads.models import (
    DEFAULT_RETENTION_WINDOW,
    UploadFilter,
    UploadRecord,
    utcnow,
)
from ..domain.uploads.ports import ObjectStorePort, UploadMetadataPort
from ..observability import metrics
from ..observability.pass_context import generate_pass_id, pass_id_var
from .schemas import (
    CloudFile,
    CloudFileInventory,
    PassOutcome,
    RetentionFailure,
    RetentionReport,
    RetentionResult,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Store calls that hang longer than this count as failed
DEFAULT_CALL_TIMEOUT_SECONDS = 30.0

CLOUD_FILES_LISTING_LIMIT = 20


def _error_message(exc: BaseException) -> str:
    return str(exc) or exc.__class__.__name__


class RetentionService:
    """Service for executing retention passes over uploads and blobs.

    Records are processed sequentially; each store call is awaited before the
    next one starts. Per-item failures are counted and never abort the pass.
    Only a failure to enumerate upload records aborts a pass.
    """

    def __init__(
        self,
        metadata_store: UploadMetadataPort,
        object_store: ObjectStorePort,
        retention_window: timedelta = DEFAULT_RETENTION_WINDOW,
        call_timeout: Optional[float] = DEFAULT_CALL_TIMEOUT_SECONDS,
        clock: Callable[[], datetime] = utcnow,
    ):
        """Initialize retention service.

        Args:
            metadata_store: Upload record store
            object_store: Processed-image blob store
            retention_window: Maximum age before uploads are deleted
            call_timeout: Per store call timeout in seconds (None disables)
            clock: Returns the current timezone-aware UTC time
        """
        if retention_window <= timedelta(0):
            raise ValueError("Retention window must be positive")

        self.metadata_store = metadata_store
        self.object_store = object_store
        self.retention_window = retention_window
        self.call_timeout = call_timeout
        self.clock = clock

    def calculate_cutoff(self) -> datetime:
        """Items created strictly before the returned time are expired."""
        return self.clock() - self.retention_window

    async def _call(self, awaitable: Awaitable[T]) -> T:
        if self.call_timeout is None:
            return await awaitable
        return await asyncio.wait_for(awaitable, timeout=self.call_timeout)

    async def delete_expired_record(self, record: UploadRecord) -> bool:
        """Delete one expired record and its blob.

        The blob and record deletions are attempted independently: a blob
        failure does not stop the record deletion.

        Returns:
            True if every attempted step succeeded
        """
        success = True
        blob_name = record.blob_name

        if not blob_name:
            logger.warning(
                f"Upload record has no blob name in file URL: {record.file_url}",
                extra={"record_id": record.id}
            )
        else:
            try:
                if await self._call(self.object_store.blob_exists(blob_name)):
                    await self._call(self.object_store.delete_blob(blob_name))
            except Exception as e:
                logger.error(
                    f"Blob deletion failed for expired record {record.id}: {_error_message(e)}",
                    exc_info=True,
                    extra={"record_id": record.id, "blob_name": blob_name}
                )
                success = False

        try:
            await self._call(self.metadata_store.delete_by_id(record.id))
        except Exception as e:
            logger.error(
                f"Record deletion failed for expired record {record.id}: {_error_message(e)}",
                exc_info=True,
                extra={"record_id": record.id, "blob_name": blob_name}
            )
            success = False

        return success

    async def purge_expired_records(self, cutoff: datetime) -> Tuple[int, int]:
        """Delete every upload record created before cutoff, with its blob.

        Returns:
            (deleted_count, error_count)

        Raises:
            Exception: If the expired records cannot be enumerated
        """
        records = await self._call(
            self.metadata_store.find(UploadFilter(created_before=cutoff))
        )
        logger.debug(f"Found {len(records)} expired upload records")

        deleted_count = 0
        error_count = 0
        for record in records:
            if await self.delete_expired_record(record):
                deleted_count += 1
            else:
                error_count += 1

        return deleted_count, error_count

    async def sweep_orphan_blobs(self, cutoff: datetime) -> Tuple[int, int]:
        """Delete every blob created before cutoff, referenced or not.

        Best effort: errors are logged and counted but never raised.

        Returns:
            (orphans_deleted, orphan_errors)
        """
        try:
            blobs = await self._call(self.object_store.list_blobs())
        except Exception as e:
            logger.warning(f"Orphan sweep skipped, blob listing failed: {_error_message(e)}")
            return 0, 0

        orphans_deleted = 0
        orphan_errors = 0
        for blob in blobs:
            if not blob.is_expired(cutoff):
                continue
            try:
                await self._call(self.object_store.delete_blob(blob.name))
                orphans_deleted += 1
            except Exception as e:
                logger.warning(
                    f"Orphan blob deletion failed: {_error_message(e)}",
                    extra={"blob_name": blob.name}
                )
                orphan_errors += 1

        return orphans_deleted, orphan_errors

    async def run_retention_pass(self, trigger: str = "manual") -> PassOutcome:
        """Run one full retention pass (metadata phase, then orphan sweep).

        Args:
            trigger: Label for logs and metrics (scheduled|manual)

        Returns:
            RetentionResult with per-phase counts, or RetentionFailure if the
            expired records could not be enumerated (the orphan sweep is then
            skipped).
        """
        token = pass_id_var.set(generate_pass_id())
        timer_start = time.monotonic()
        started_at = self.clock()
        cutoff = started_at - self.retention_window

        try:
            try:
                deleted_count, error_count = await self.purge_expired_records(cutoff)
            except Exception as e:
                logger.error(
                    f"Retention pass failed: {_error_message(e)}",
                    exc_info=True,
                    extra={"trigger": trigger, "cutoff": cutoff.isoformat()}
                )
                metrics.retention_passes_total.labels(trigger=trigger, status="failed").inc()
                return RetentionFailure(error=_error_message(e), started_at=started_at)

            orphans_deleted, orphan_errors = await self.sweep_orphan_blobs(cutoff)

            result = RetentionResult(
                deleted_count=deleted_count,
                error_count=error_count,
                orphans_deleted=orphans_deleted,
                orphan_errors=orphan_errors,
                cutoff=cutoff,
                started_at=started_at,
                completed_at=self.clock(),
            )

            metrics.retention_passes_total.labels(trigger=trigger, status="success").inc()
            metrics.retention_records_deleted_total.inc(deleted_count)
            metrics.retention_record_errors_total.inc(error_count)
            metrics.retention_orphans_deleted_total.inc(orphans_deleted)
            metrics.retention_orphan_errors_total.inc(orphan_errors)

            # Quiet when there was nothing to do
            if result.total_deleted or result.has_errors:
                logger.info(
                    f"Cleanup: deleted {deleted_count} files, {orphans_deleted} orphaned blobs",
                    extra={
                        "trigger": trigger,
                        "deleted_count": deleted_count,
                        "error_count": error_count,
                        "orphans_deleted": orphans_deleted,
                        "orphan_errors": orphan_errors,
                        "cutoff": cutoff.isoformat(),
                    }
                )
            return result

        finally:
            metrics.retention_pass_duration_seconds.observe(time.monotonic() - timer_start)
            pass_id_var.reset(token)

    async def generate_retention_report(self) -> RetentionReport:
        """Report what a pass would delete right now, without deleting.

        Raises:
            Exception: If either store cannot be read
        """
        cutoff = self.calculate_cutoff()

        records_eligible = await self._call(
            self.metadata_store.count(UploadFilter(created_before=cutoff))
        )
        blobs = await self._call(self.object_store.list_blobs())
        expired_blobs = [blob for blob in blobs if blob.is_expired(cutoff)]

        report = RetentionReport(
            cutoff=cutoff,
            retention_window_hours=self.retention_window.total_seconds() / 3600,
            records_eligible=records_eligible,
            blobs_eligible=len(expired_blobs),
            estimated_storage_freed_bytes=sum(blob.size for blob in expired_blobs),
        )

        logger.info(
            f"Generated retention report: {report.total_eligible_for_deletion} items eligible",
            extra={"cutoff": cutoff.isoformat()}
        )
        return report

    async def list_cloud_files(self, limit: int = CLOUD_FILES_LISTING_LIMIT) -> CloudFileInventory:
        """List the bucket: total count plus the first ``limit`` blobs with their age.

        Raises:
            Exception: If the bucket cannot be listed
        """
        blobs = await self._call(self.object_store.list_blobs())
        now = self.clock()

        return CloudFileInventory(
            total_files=len(blobs),
            files=[
                CloudFile(
                    name=blob.name,
                    size=blob.size,
                    created=blob.time_created,
                    age_hours=blob.age_hours(now),
                )
                for blob in blobs[:limit]
            ],
        )
