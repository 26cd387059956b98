"""Integration tests for the retention HTTP endpoints.

Runs the real FastAPI application (lifespan included) with a scheduler wired
to in-memory stores.
"""

import pytest
from fastapi.testclient import TestClient
from prometheus_client.parser import text_string_to_metric_families

from imagepro.config import Settings
from imagepro.main import create_app
from imagepro.retention.scheduler import RetentionScheduler
from imagepro.retention.service import RetentionService

from fixtures.stores import make_blob, make_record


def _client(scheduler, **settings) -> TestClient:
    settings.setdefault("RETENTION_SCHEDULER_ENABLED", False)
    app = create_app(settings=Settings(**settings), scheduler=scheduler)
    return TestClient(app)


@pytest.fixture
def scheduler(metadata_store, object_store, now):
    service = RetentionService(metadata_store, object_store, clock=lambda: now)
    return RetentionScheduler(service)


@pytest.fixture
def client(scheduler):
    with _client(scheduler) as client:
        yield client


class TestCleanupNow:
    """POST /api/image/cleanup-now"""

    def test_cleanup_deletes_expired(self, client, metadata_store, object_store):
        metadata_store.add(make_record("1", "https://store/bucket/img123.png?sig=x", hours_old=7))
        metadata_store.add(make_record("2", "https://store/bucket/fresh.png", hours_old=1))
        object_store.add(make_blob("img123.png", hours_old=7))
        object_store.add(make_blob("fresh.png", hours_old=1))
        object_store.add(make_blob("orphan.jpg", hours_old=8))

        response = client.post("/api/image/cleanup-now")

        assert response.status_code == 200
        assert response.json() == {
            "message": "Cleanup completed successfully",
            "deletedCount": 1,
            "errorCount": 0,
            "orphansDeleted": 1,
            "orphanErrors": 0,
        }
        assert list(metadata_store.records) == ["2"]
        assert list(object_store.blobs) == ["fresh.png"]

    def test_cleanup_with_item_errors_still_200(self, client, metadata_store, object_store):
        metadata_store.add(make_record("A", "https://store/bucket/a.png", hours_old=7))
        object_store.add(make_blob("a.png", hours_old=1))
        object_store.delete_errors["a.png"] = RuntimeError("permission denied")

        response = client.post("/api/image/cleanup-now")

        assert response.status_code == 200
        assert response.json()["errorCount"] == 1
        assert response.json()["deletedCount"] == 0

    def test_cleanup_enumeration_failure_500(self, client, metadata_store):
        metadata_store.find_error = ConnectionError("database connection lost")

        response = client.post("/api/image/cleanup-now")

        assert response.status_code == 500
        assert response.json() == {
            "message": "Cleanup failed",
            "error": "database connection lost",
        }

    def test_repeated_cleanup_is_idempotent(self, client, metadata_store, object_store):
        metadata_store.add(make_record("1", "https://store/bucket/a.png", hours_old=7))
        object_store.add(make_blob("a.png", hours_old=7))

        first = client.post("/api/image/cleanup-now").json()
        second = client.post("/api/image/cleanup-now").json()

        assert first["deletedCount"] == 1
        assert second["deletedCount"] == 0
        assert second["errorCount"] == 0


class TestRetentionReport:
    """GET /api/image/retention-report"""

    def test_report(self, client, metadata_store, object_store):
        metadata_store.add(make_record("1", "https://store/bucket/a.png", hours_old=7))
        object_store.add(make_blob("a.png", hours_old=7, size=1000))

        response = client.get("/api/image/retention-report")

        assert response.status_code == 200
        data = response.json()
        assert data["recordsEligible"] == 1
        assert data["blobsEligible"] == 1
        assert data["estimatedStorageFreedBytes"] == 1000
        assert data["totalEligibleForDeletion"] == 2
        assert data["retentionWindowHours"] == 6
        assert "1" in metadata_store.records

    def test_report_failure(self, client, object_store):
        object_store.list_error = RuntimeError("listing unavailable")

        response = client.get("/api/image/retention-report")

        assert response.status_code == 500
        assert response.json()["error"] == "listing unavailable"


class TestCheckCloudFiles:
    """GET /api/image/check-cloud-files"""

    def test_lists_first_twenty(self, client, object_store):
        for i in range(22):
            object_store.add(make_blob(f"f{i}.png", hours_old=i))

        response = client.get("/api/image/check-cloud-files")

        assert response.status_code == 200
        data = response.json()
        assert data["totalFiles"] == 22
        assert len(data["files"]) == 20
        assert data["files"][5]["name"] == "f5.png"
        assert data["files"][5]["ageHours"] == 5

    def test_listing_failure(self, client, object_store):
        object_store.list_error = RuntimeError("bucket not found")

        response = client.get("/api/image/check-cloud-files")

        assert response.status_code == 500
        assert response.json() == {"error": "bucket not found"}


class TestHealthAndMetrics:

    def test_health_with_scheduler_stopped(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["retentionScheduler"]["configured"] is True
        assert data["retentionScheduler"]["running"] is False
        assert data["retentionScheduler"]["nextRunTime"] is None

    def test_scheduler_started_by_lifespan(self, scheduler):
        with _client(scheduler, RETENTION_SCHEDULER_ENABLED=True) as client:
            data = client.get("/health").json()

            assert data["retentionScheduler"]["running"] is True
            assert data["retentionScheduler"]["nextRunTime"] is not None

        assert not scheduler.is_running

    def test_root(self, client):
        assert client.get("/").status_code == 200


def _sample(client, name, **labels) -> float:
    """Read one sample from the /metrics exposition (0.0 if absent)."""
    response = client.get("/metrics")
    assert response.status_code == 200
    for family in text_string_to_metric_families(response.text):
        for sample in family.samples:
            if sample.name == name and sample.labels == labels:
                return sample.value
    return 0.0


class TestPassMetrics:
    """GET /metrics reflects retention passes."""

    def test_successful_pass_updates_counters(self, client, metadata_store, object_store):
        metadata_store.add(make_record("1", "https://store/bucket/img123.png", hours_old=7))
        object_store.add(make_blob("img123.png", hours_old=7))
        object_store.add(make_blob("orphan.jpg", hours_old=8))

        passes = _sample(client, "imagepro_retention_passes_total", trigger="manual", status="success")
        records = _sample(client, "imagepro_retention_records_deleted_total")
        orphans = _sample(client, "imagepro_retention_orphans_deleted_total")
        durations = _sample(client, "imagepro_retention_pass_duration_seconds_count")

        assert client.post("/api/image/cleanup-now").status_code == 200

        assert _sample(
            client, "imagepro_retention_passes_total", trigger="manual", status="success"
        ) == passes + 1
        assert _sample(client, "imagepro_retention_records_deleted_total") == records + 1
        assert _sample(client, "imagepro_retention_orphans_deleted_total") == orphans + 1
        assert _sample(client, "imagepro_retention_pass_duration_seconds_count") == durations + 1

    def test_failed_pass_counted_as_failed(self, client, metadata_store):
        metadata_store.find_error = ConnectionError("database connection lost")

        failed = _sample(client, "imagepro_retention_passes_total", trigger="manual", status="failed")
        succeeded = _sample(client, "imagepro_retention_passes_total", trigger="manual", status="success")

        assert client.post("/api/image/cleanup-now").status_code == 500

        assert _sample(
            client, "imagepro_retention_passes_total", trigger="manual", status="failed"
        ) == failed + 1
        assert _sample(
            client, "imagepro_retention_passes_total", trigger="manual", status="success"
        ) == succeeded
