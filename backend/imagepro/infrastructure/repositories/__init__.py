from .mongo_upload_repository import MetadataStoreError, MongoUploadRepository

__all__ = ["MetadataStoreError", "MongoUploadRepository"]
