"""Upload repository for MongoDB operations"""

import logging
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from ...domain.uploads.models import ProcessingType, UploadFilter, UploadRecord, ensure_utc
from ...domain.uploads.ports.upload_metadata_port import UploadMetadataPort

logger = logging.getLogger(__name__)


class MetadataStoreError(Exception):
    """Base exception for metadata store operations."""
    pass


def build_query(upload_filter: UploadFilter) -> Dict[str, Any]:
    """Translate an UploadFilter into a MongoDB query document."""
    if upload_filter.created_before is None:
        return {}
    return {"createdAt": {"$lt": upload_filter.created_before}}


def _object_id(record_id: str) -> Any:
    # Records inserted by other tools may carry non-ObjectId ids
    return ObjectId(record_id) if ObjectId.is_valid(record_id) else record_id


def record_from_document(doc: Dict[str, Any]) -> UploadRecord:
    """Map a stored document (camelCase fields) to an UploadRecord."""
    processing_type: Optional[ProcessingType] = None
    raw_type = doc.get("processingType")
    if raw_type:
        try:
            processing_type = ProcessingType(raw_type)
        except ValueError:
            logger.warning(
                f"Unknown processing type on upload record: {raw_type}",
                extra={"record_id": str(doc.get("_id"))}
            )

    return UploadRecord(
        id=str(doc["_id"]),
        user_email=doc.get("userEmail", ""),
        file_url=doc.get("fileUrl", ""),
        created_at=ensure_utc(doc["createdAt"]),
        original_name=doc.get("originalName"),
        processing_type=processing_type,
        file_size=doc.get("fileSize"),
        format=doc.get("format"),
    )


class MongoUploadRepository(UploadMetadataPort):
    """Repository for the upload record collection.

    Uses PyMongo's native asyncio client. Field names follow the collection's
    existing camelCase layout (userEmail, fileUrl, createdAt, ...).
    """

    def __init__(self, collection, client: Optional[AsyncMongoClient] = None):
        """Initialize repository with a collection handle.

        Args:
            collection: AsyncCollection holding upload records
            client: Owning client, closed by close() when given
        """
        self.collection = collection
        self.client = client

    @classmethod
    def from_uri(
        cls,
        uri: str,
        database: str,
        collection: str = "images",
    ) -> "MongoUploadRepository":
        """Connect to MongoDB and bind to the upload collection."""
        client = AsyncMongoClient(uri, tz_aware=True)
        logger.info(f"Initialized Mongo upload repository: db={database}, collection={collection}")
        return cls(client[database][collection], client=client)

    async def find(self, upload_filter: UploadFilter) -> List[UploadRecord]:
        """Return records matching the filter."""
        query = build_query(upload_filter)
        try:
            records = []
            async for doc in self.collection.find(query):
                records.append(record_from_document(doc))
        except PyMongoError as e:
            logger.error(f"Upload record query failed: {e}", extra={"query": str(query)})
            raise MetadataStoreError(f"Failed to query upload records: {e}")
        return records

    async def delete_by_id(self, record_id: str) -> None:
        try:
            result = await self.collection.delete_one({"_id": _object_id(record_id)})
        except PyMongoError as e:
            logger.error(f"Upload record deletion failed: id={record_id}, error={e}")
            raise MetadataStoreError(f"Failed to delete upload record {record_id}: {e}")

        if result.deleted_count == 0:
            logger.debug(f"Upload record not found for deletion: id={record_id}")

    async def delete_many(self, upload_filter: UploadFilter) -> int:
        query = build_query(upload_filter)
        try:
            result = await self.collection.delete_many(query)
        except PyMongoError as e:
            raise MetadataStoreError(f"Failed to delete upload records: {e}")
        return result.deleted_count

    async def count(self, upload_filter: UploadFilter) -> int:
        try:
            return await self.collection.count_documents(build_query(upload_filter))
        except PyMongoError as e:
            raise MetadataStoreError(f"Failed to count upload records: {e}")

    async def close(self) -> None:
        if self.client is not None:
            await self.client.close()
