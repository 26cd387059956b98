"""Pytest fixtures for retention testing.

Provides reusable test fixtures for:
- A fixed clock so ages are exact
- In-memory metadata and object stores
- A RetentionService wired to the in-memory stores

Usage:
    @pytest.mark.asyncio
    async def test_pass(metadata_store, object_store, retention_service):
        metadata_store.add(make_record("1", "https://store/bucket/a.png", hours_old=7))
        result = await retention_service.run_retention_pass()
        assert result.deleted_count == 1
"""

import os

# Set environment variables BEFORE any imports to ensure they take effect
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("RETENTION_SCHEDULER_ENABLED", "false")

import pytest

from imagepro.config import get_settings
from imagepro.retention.service import RetentionService

from fixtures.stores import NOW, InMemoryMetadataStore, InMemoryObjectStore


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Reload settings for every test so monkeypatched env vars apply."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def metadata_store() -> InMemoryMetadataStore:
    return InMemoryMetadataStore()


@pytest.fixture
def object_store() -> InMemoryObjectStore:
    return InMemoryObjectStore()


@pytest.fixture
def retention_service(metadata_store, object_store, now) -> RetentionService:
    return RetentionService(
        metadata_store=metadata_store,
        object_store=object_store,
        clock=lambda: now,
    )
