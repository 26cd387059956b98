"""Object Store Port - Domain interface for the blob store holding processed images.

Adapters must implement this interface to provide Google Cloud Storage or
another blob backend to the retention service.

Architecture: Hexagonal - Port interface in domain layer
"""

from abc import ABC, abstractmethod
from typing import List

from ..models import BlobInfo


class ObjectStorePort(ABC):
    """Port interface for blob storage operations used by retention.

    Key Design Principles:
    - Blobs are addressed by name only (flat bucket namespace)
    - Every operation is awaitable; blocking clients run off the event loop
    - Deleting a missing blob is not an error

    Example Usage:
        store = GCSStorageAdapter(...)

        for blob in await store.list_blobs():
            if blob.is_expired(cutoff):
                await store.delete_blob(blob.name)
    """

    @abstractmethod
    async def list_blobs(self) -> List[BlobInfo]:
        """List every blob in the bucket with its creation time and size.

        Returns:
            List[BlobInfo]: All blobs currently stored

        Raises:
            StorageError: If the listing cannot be retrieved
        """
        pass

    @abstractmethod
    async def blob_exists(self, name: str) -> bool:
        """Check whether a blob exists.

        Args:
            name: Blob name

        Returns:
            bool: True if the blob exists

        Raises:
            StorageError: If the store cannot be reached
        """
        pass

    @abstractmethod
    async def delete_blob(self, name: str) -> None:
        """Delete a blob.

        Args:
            name: Blob name

        Raises:
            StorageError: If deletion fails for a reason other than the blob
                already being gone
        """
        pass
