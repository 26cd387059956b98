"""Pydantic schemas for retention results and reports.

This module defines retention-related schemas:
- RetentionResult: Counts from a completed retention pass
- RetentionFailure: A pass that could not enumerate upload records
- RetentionReport: Dry-run summary of what a pass would delete
- CloudFileInventory: Listing of the processed-image bucket

Responses use the camelCase keys the front-end and admin tools expect
(deletedCount, errorCount, ...).
"""

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RetentionResult(CamelModel):
    """Outcome of a retention pass that ran to completion.

    Record counts come from the metadata-driven phase only; the orphan sweep
    keeps its own counters so advisory cleanup never inflates errorCount.
    """

    deleted_count: int = Field(
        default=0,
        ge=0,
        description="Expired records removed (blob absent or deleted, record deleted)"
    )

    error_count: int = Field(
        default=0,
        ge=0,
        description="Expired records where a blob or record deletion failed"
    )

    orphans_deleted: int = Field(
        default=0,
        ge=0,
        description="Expired blobs removed by the orphan sweep"
    )

    orphan_errors: int = Field(
        default=0,
        ge=0,
        description="Orphan sweep deletions that failed"
    )

    cutoff: datetime = Field(
        description="Items created strictly before this time were eligible"
    )

    started_at: datetime = Field(
        description="When the pass started"
    )

    completed_at: datetime = Field(
        description="When the pass completed"
    )

    @property
    def duration_seconds(self) -> float:
        return (self.completed_at - self.started_at).total_seconds()

    @property
    def has_errors(self) -> bool:
        """Whether any deletion failed in either phase."""
        return self.error_count > 0 or self.orphan_errors > 0

    @property
    def total_deleted(self) -> int:
        return self.deleted_count + self.orphans_deleted


class RetentionFailure(CamelModel):
    """A pass aborted because upload records could not be enumerated.

    No partial counts are reported; the next scheduled pass retries from
    scratch.
    """

    error: str = Field(
        description="Error message from the failed enumeration"
    )

    started_at: Optional[datetime] = Field(
        default=None,
        description="When the failed pass started"
    )


PassOutcome = Union[RetentionResult, RetentionFailure]


class RetentionReport(CamelModel):
    """Preview of what a retention pass would delete right now."""

    cutoff: datetime = Field(
        description="Eligibility cutoff used for the preview"
    )

    retention_window_hours: float = Field(
        gt=0,
        description="Configured retention window in hours"
    )

    records_eligible: int = Field(
        default=0,
        ge=0,
        description="Upload records older than the retention window"
    )

    blobs_eligible: int = Field(
        default=0,
        ge=0,
        description="Blobs older than the retention window"
    )

    estimated_storage_freed_bytes: int = Field(
        default=0,
        ge=0,
        description="Total size of eligible blobs"
    )

    @property
    def total_eligible_for_deletion(self) -> int:
        return self.records_eligible + self.blobs_eligible


class CloudFile(CamelModel):
    """One entry of the bucket inventory."""

    name: str
    size: int = Field(ge=0)
    created: datetime
    age_hours: int


class CloudFileInventory(CamelModel):
    """Bucket inventory: total blob count plus the first few blobs."""

    total_files: int = Field(ge=0)
    files: List[CloudFile] = Field(default_factory=list)


class CleanupResponse(CamelModel):
    """Response body of the manual cleanup trigger."""

    message: str = "Cleanup completed successfully"
    deleted_count: int = 0
    error_count: int = 0
    orphans_deleted: int = 0
    orphan_errors: int = 0
