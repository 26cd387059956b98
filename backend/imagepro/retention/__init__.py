"""Upload retention and cleanup module.

Deletes uploads older than the retention window (6 hours by default) from
both the metadata store and the object store.

This module provides:
- Metadata-driven deletion of expired upload records and their blobs
- Orphan sweep of expired blobs without a record
- Hourly in-process scheduler with a manual trigger
- Admin APIs for manual cleanup, dry-run reports and bucket inventory
"""

from .schemas import (
    RetentionFailure,
    RetentionReport,
    RetentionResult,
)

# Service, scheduler and router are imported lazily to avoid circular dependencies
# Use: from imagepro.retention.service import RetentionService
# Use: from imagepro.retention.scheduler import RetentionScheduler

__all__ = [
    "RetentionFailure",
    "RetentionReport",
    "RetentionResult",
]
