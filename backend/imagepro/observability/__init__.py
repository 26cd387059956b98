"""Observability module for the retention service.

Provides structured logging with pass correlation, metrics and health checks.
"""

from .logging_config import configure_logging, get_logger
from .metrics import (
    retention_orphan_errors_total,
    retention_orphans_deleted_total,
    retention_pass_duration_seconds,
    retention_passes_total,
    retention_record_errors_total,
    retention_records_deleted_total,
)
from .pass_context import generate_pass_id, get_pass_id, pass_id_var, set_pass_id

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    # Metrics
    "retention_orphan_errors_total",
    "retention_orphans_deleted_total",
    "retention_pass_duration_seconds",
    "retention_passes_total",
    "retention_record_errors_total",
    "retention_records_deleted_total",
    # Pass ID
    "generate_pass_id",
    "get_pass_id",
    "pass_id_var",
    "set_pass_id",
]
