"""Upload domain models - upload records, blob metadata, blob naming.

An UploadRecord (metadata store) and a blob (object store) are linked only by
the blob name embedded in the record's file URL. The two stores are not
transactionally linked: either side may exist without the other.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional


DEFAULT_RETENTION_WINDOW = timedelta(hours=6)


class ProcessingType(str, Enum):
    """Kind of processing that produced an upload."""
    COMPRESSION = "compression"
    CONVERSION = "conversion"
    BG_REMOVAL = "bg-removal"


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC (MongoDB returns naive UTC by default)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def blob_name_from_url(file_url: str) -> str:
    """Derive the object-store blob name from an upload's file URL.

    Takes the last path segment and strips any query string, so signed URLs
    resolve to the same name as plain ones.

    Example:
        >>> blob_name_from_url("https://store/bucket/img123.png?sig=x")
        'img123.png'
    """
    return file_url.split("/")[-1].split("?")[0]


@dataclass
class UploadRecord:
    """Metadata for one processed upload.

    Attributes:
        id: Store-generated identifier (string form)
        user_email: Owner email, or an anonymous sentinel for public uploads
        file_url: Public or signed URL of the processed blob
        created_at: Creation time (UTC)
        original_name: Client-side filename
        processing_type: compression | conversion | bg-removal
        file_size: Processed size in bytes
        format: Output image format (e.g. 'png', 'webp')
    """
    id: str
    user_email: str
    file_url: str
    created_at: datetime = field(default_factory=utcnow)
    original_name: Optional[str] = None
    processing_type: Optional[ProcessingType] = None
    file_size: Optional[int] = None
    format: Optional[str] = None

    @property
    def blob_name(self) -> str:
        return blob_name_from_url(self.file_url)

    def is_expired(self, cutoff: datetime) -> bool:
        return ensure_utc(self.created_at) < cutoff


@dataclass
class BlobInfo:
    """Object-store listing entry.

    Attributes:
        name: Blob name within the bucket
        time_created: Creation time reported by the store (UTC)
        size: Size in bytes
    """
    name: str
    time_created: datetime
    size: int = 0

    def is_expired(self, cutoff: datetime) -> bool:
        return ensure_utc(self.time_created) < cutoff

    def age_hours(self, now: Optional[datetime] = None) -> int:
        """Age in whole hours, rounded to the nearest hour."""
        now = now or utcnow()
        age = now - ensure_utc(self.time_created)
        return round(age.total_seconds() / 3600)


@dataclass
class UploadFilter:
    """Selection criteria for upload records.

    ``created_before`` is strict (``createdAt < created_before``); an empty
    filter matches every record.
    """
    created_before: Optional[datetime] = None

    def matches(self, record: UploadRecord) -> bool:
        if self.created_before is None:
            return True
        return ensure_utc(record.created_at) < ensure_utc(self.created_before)
