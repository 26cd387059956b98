from .gcs_storage_adapter import GCSStorageAdapter, StorageError
from .storage_config import StorageConfig, load_storage_config, validate_storage_config

__all__ = [
    "GCSStorageAdapter",
    "StorageError",
    "StorageConfig",
    "load_storage_config",
    "validate_storage_config",
]
