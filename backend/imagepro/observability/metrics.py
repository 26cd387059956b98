"""Prometheus metrics for the retention service.

Defines and exposes operational metrics for monitoring and alerting.
"""

from prometheus_client import Counter, Histogram

retention_passes_total = Counter(
    "imagepro_retention_passes_total",
    "Total retention passes executed",
    ["trigger", "status"]  # trigger: scheduled|manual, status: success|failed
)

retention_records_deleted_total = Counter(
    "imagepro_retention_records_deleted_total",
    "Expired upload records removed together with their blobs"
)

retention_record_errors_total = Counter(
    "imagepro_retention_record_errors_total",
    "Expired upload records whose cleanup failed"
)

retention_orphans_deleted_total = Counter(
    "imagepro_retention_orphans_deleted_total",
    "Expired blobs removed by the orphan sweep"
)

retention_orphan_errors_total = Counter(
    "imagepro_retention_orphan_errors_total",
    "Orphan sweep deletions that failed"
)

retention_pass_duration_seconds = Histogram(
    "imagepro_retention_pass_duration_seconds",
    "Time spent on one retention pass in seconds",
    buckets=[0.1, 0.5, 1.0, 5.0, 10.0, 30.0, 60.0, 300.0, 900.0, 3600.0]
)
