"""Upload Metadata Port - Domain interface for the upload record collection.

Architecture: Hexagonal - Port interface in domain layer
"""

from abc import ABC, abstractmethod
from typing import List

from ..models import UploadFilter, UploadRecord


class UploadMetadataPort(ABC):
    """Port interface for upload record persistence.

    Records are created by the upload handlers and only ever read or deleted
    here; they are never updated in place.
    """

    @abstractmethod
    async def find(self, upload_filter: UploadFilter) -> List[UploadRecord]:
        """Return all records matching the filter.

        Args:
            upload_filter: Selection criteria

        Returns:
            List[UploadRecord]: Matching records (order unspecified)

        Raises:
            MetadataStoreError: If the collection cannot be queried
        """
        pass

    @abstractmethod
    async def delete_by_id(self, record_id: str) -> None:
        """Delete a single record. Deleting a missing record is a no-op.

        Raises:
            MetadataStoreError: If the delete fails
        """
        pass

    @abstractmethod
    async def delete_many(self, upload_filter: UploadFilter) -> int:
        """Delete all records matching the filter.

        Returns:
            int: Number of records deleted
        """
        pass

    @abstractmethod
    async def count(self, upload_filter: UploadFilter) -> int:
        """Count records matching the filter."""
        pass
