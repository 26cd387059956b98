"""Unit tests for retention response schemas."""

from datetime import timedelta

from imagepro.retention.schemas import (
    CleanupResponse,
    CloudFile,
    CloudFileInventory,
    RetentionFailure,
    RetentionReport,
    RetentionResult,
)

from fixtures.stores import NOW


def _result(**counts) -> RetentionResult:
    return RetentionResult(
        cutoff=NOW - timedelta(hours=6),
        started_at=NOW,
        completed_at=NOW + timedelta(seconds=2.5),
        **counts,
    )


class TestRetentionResult:

    def test_camel_case_dump(self):
        dumped = _result(deleted_count=3, error_count=1).model_dump(by_alias=True)

        assert dumped["deletedCount"] == 3
        assert dumped["errorCount"] == 1
        assert dumped["orphansDeleted"] == 0
        assert dumped["orphanErrors"] == 0

    def test_duration(self):
        assert _result().duration_seconds == 2.5

    def test_has_errors_covers_both_phases(self):
        assert not _result(deleted_count=5).has_errors
        assert _result(error_count=1).has_errors
        assert _result(orphan_errors=1).has_errors

    def test_total_deleted(self):
        assert _result(deleted_count=2, orphans_deleted=3).total_deleted == 5

    def test_populate_by_alias(self):
        result = RetentionResult(
            deletedCount=1,
            cutoff=NOW,
            startedAt=NOW,
            completedAt=NOW,
        )
        assert result.deleted_count == 1


class TestRetentionFailure:

    def test_error_only(self):
        failure = RetentionFailure(error="database connection lost")
        assert failure.model_dump(by_alias=True, exclude_none=True) == {
            "error": "database connection lost"
        }


class TestRetentionReport:

    def test_total_eligible(self):
        report = RetentionReport(
            cutoff=NOW,
            retention_window_hours=6,
            records_eligible=4,
            blobs_eligible=2,
        )
        assert report.total_eligible_for_deletion == 6
        assert report.model_dump(by_alias=True)["estimatedStorageFreedBytes"] == 0


class TestCloudFileInventory:

    def test_dump(self):
        inventory = CloudFileInventory(
            total_files=1,
            files=[CloudFile(name="a.png", size=10, created=NOW, age_hours=3)],
        )

        dumped = inventory.model_dump(by_alias=True, mode="json")

        assert dumped["totalFiles"] == 1
        assert dumped["files"][0]["ageHours"] == 3
        assert dumped["files"][0]["name"] == "a.png"


class TestCleanupResponse:

    def test_default_message(self):
        dumped = CleanupResponse(deleted_count=2).model_dump(by_alias=True)
        assert dumped == {
            "message": "Cleanup completed successfully",
            "deletedCount": 2,
            "errorCount": 0,
            "orphansDeleted": 0,
            "orphanErrors": 0,
        }
