from .object_store_port import ObjectStorePort
from .upload_metadata_port import UploadMetadataPort

__all__ = ["ObjectStorePort", "UploadMetadataPort"]
