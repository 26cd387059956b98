"""ImagePro Retention - Main FastAPI Application

This module creates and configures the FastAPI application, including:
- Retention administration router
- Health and Prometheus metrics endpoints
- Lifespan wiring of the metadata store, object store and the hourly
  retention scheduler

Run with: uvicorn imagepro.main:app --host 0.0.0.0 --port 5000
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from .config import Settings, get_settings
from .infrastructure.repositories.mongo_upload_repository import MongoUploadRepository
from .infrastructure.storage.gcs_storage_adapter import GCSStorageAdapter
from .infrastructure.storage.storage_config import load_storage_config
from .observability.logging_config import configure_logging
from .observability.router import router as observability_router
from .retention.router import router as retention_router
from .retention.scheduler import RetentionScheduler
from .retention.service import RetentionService

logger = logging.getLogger(__name__)


def build_retention_scheduler(settings: Settings) -> RetentionScheduler:
    """Wire production adapters into a retention scheduler.

    Raises:
        ValueError: If storage credentials are missing or invalid
    """
    object_store = GCSStorageAdapter.from_config(load_storage_config(settings))
    metadata_store = MongoUploadRepository.from_uri(
        settings.MONGO_URI,
        database=settings.MONGO_DB_NAME,
        collection=settings.MONGO_COLLECTION,
    )
    service = RetentionService(
        metadata_store=metadata_store,
        object_store=object_store,
        retention_window=settings.retention_window,
        call_timeout=settings.STORE_CALL_TIMEOUT_SECONDS,
    )
    return RetentionScheduler(service, cron=settings.RETENTION_SCHEDULE_CRON)


def create_app(
    settings: Optional[Settings] = None,
    scheduler: Optional[RetentionScheduler] = None,
) -> FastAPI:
    """Create the application.

    Args:
        settings: Application settings (default: cached environment settings)
        scheduler: Pre-built scheduler; when omitted one is wired from
            settings at startup
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Start the retention scheduler on startup and stop it on shutdown."""
        logger.info("ImagePro retention API starting up...")
        logger.info(f"Environment: {settings.ENVIRONMENT}")

        owned_scheduler = app.state.retention_scheduler is None
        if owned_scheduler:
            app.state.retention_scheduler = build_retention_scheduler(settings)

        retention_scheduler: RetentionScheduler = app.state.retention_scheduler
        if settings.RETENTION_SCHEDULER_ENABLED:
            retention_scheduler.start()

        yield

        logger.info("ImagePro retention API shutting down...")
        retention_scheduler.stop()
        if owned_scheduler:
            metadata_store = retention_scheduler.service.metadata_store
            if isinstance(metadata_store, MongoUploadRepository):
                await metadata_store.close()

    app = FastAPI(
        title="ImagePro Retention API",
        description="Scheduled cleanup of expired image uploads",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.retention_scheduler = scheduler

    app.include_router(observability_router)
    app.include_router(retention_router)

    @app.get("/")
    def root():
        return {"message": "ImagePro retention service is running"}

    return app


_settings = get_settings()
configure_logging(level=_settings.LOG_LEVEL, json_format=_settings.LOG_JSON)

app = create_app(_settings)
