"""Uploads domain module - upload records, blob metadata, storage ports."""

from .models import (
    DEFAULT_RETENTION_WINDOW,
    BlobInfo,
    ProcessingType,
    UploadFilter,
    UploadRecord,
    blob_name_from_url,
    ensure_utc,
    utcnow,
)

__all__ = [
    "DEFAULT_RETENTION_WINDOW",
    "BlobInfo",
    "ProcessingType",
    "UploadFilter",
    "UploadRecord",
    "blob_name_from_url",
    "ensure_utc",
    "utcnow",
]
