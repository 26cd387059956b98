"""GCS Storage Adapter - Implementation of ObjectStorePort using google-cloud-storage.

The google-cloud-storage client is blocking, so every call is pushed to a
worker thread with asyncio.to_thread to keep the event loop responsive.

Architecture: Hexagonal - Adapter implementation in infrastructure layer
"""

import asyncio
import logging
from typing import List, Optional

from google.api_core.exceptions import GoogleAPIError, NotFound
from google.cloud import storage
from google.oauth2 import service_account

from ...domain.uploads.models import BlobInfo, ensure_utc
from ...domain.uploads.ports.object_store_port import ObjectStorePort
from .storage_config import StorageConfig

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class GCSStorageAdapter(ObjectStorePort):
    """Google Cloud Storage adapter for the processed-image bucket.

    Example:
        config = load_storage_config(get_settings())
        store = GCSStorageAdapter.from_config(config)

        exists = await store.blob_exists("img123.png")
    """

    def __init__(
        self,
        bucket_name: str,
        client: Optional[storage.Client] = None,
    ):
        """Initialize GCS storage adapter.

        Args:
            bucket_name: Bucket holding processed images
            client: Pre-built storage client (default: client from
                application default credentials)

        Raises:
            StorageError: If client initialization fails
        """
        try:
            self.client = client if client is not None else storage.Client()
            self.bucket_name = bucket_name
            self.bucket = self.client.bucket(bucket_name)

            logger.info(f"Initialized GCS storage adapter: bucket={bucket_name}")
        except GoogleAPIError as e:
            raise StorageError(f"Failed to initialize GCS client: {e}")

    @classmethod
    def from_config(cls, config: StorageConfig) -> "GCSStorageAdapter":
        """Build an adapter from service-account credentials.

        Raises:
            StorageError: If the credentials are rejected
        """
        try:
            credentials = service_account.Credentials.from_service_account_info(
                config.service_account_info()
            )
        except ValueError as e:
            raise StorageError(f"Invalid GCS credentials: {e}")

        client = storage.Client(project=config.project_id, credentials=credentials)
        return cls(bucket_name=config.bucket_name, client=client)

    async def list_blobs(self) -> List[BlobInfo]:
        """List every blob in the bucket.

        Returns:
            List[BlobInfo]: name, creation time and size of each blob

        Raises:
            StorageError: If the listing fails
        """
        def _list() -> List[BlobInfo]:
            return [
                BlobInfo(
                    name=blob.name,
                    time_created=ensure_utc(blob.time_created),
                    size=int(blob.size or 0),
                )
                for blob in self.bucket.list_blobs()
            ]

        try:
            blobs = await asyncio.to_thread(_list)
        except GoogleAPIError as e:
            logger.error(f"GCS listing failed: bucket={self.bucket_name}, error={e}")
            raise StorageError(f"Failed to list blobs: {e}")

        logger.debug(f"Listed {len(blobs)} blobs: bucket={self.bucket_name}")
        return blobs

    async def blob_exists(self, name: str) -> bool:
        """Check if a blob exists.

        Raises:
            StorageError: If the existence check fails
        """
        try:
            return await asyncio.to_thread(self.bucket.blob(name).exists)
        except GoogleAPIError as e:
            logger.warning(
                f"Error checking blob existence: blob={name}, error={e}"
            )
            raise StorageError(f"Failed to check blob {name}: {e}")

    async def delete_blob(self, name: str) -> None:
        """Delete a blob. A blob that is already gone counts as deleted.

        Raises:
            StorageError: If deletion fails
        """
        try:
            await asyncio.to_thread(self.bucket.blob(name).delete)
            logger.info(f"Deleted blob: blob={name}")
        except NotFound:
            logger.debug(f"Blob not found for deletion (already deleted): blob={name}")
        except GoogleAPIError as e:
            logger.error(f"GCS deletion failed: blob={name}, error={e}")
            raise StorageError(f"Failed to delete blob {name}: {e}")
