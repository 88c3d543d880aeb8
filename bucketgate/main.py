"""
FastAPI application entry point.

This module creates and configures the FastAPI application.
Using an application factory pattern (create_app function) because:
- Easier to test with fake backends
- Explicit about initialization order: config, then backends, then routes
- A broken config fails before the server binds

For local development:
    BUCKETGATE_CONFIG=config.toml uvicorn bucketgate.main:create_app --factory --reload

For production:
    bucketgate
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from . import __version__
from .api.routes import health, objects
from .config.settings import Settings, get_settings
from .core.resolution.models import BucketList
from .infrastructure.storage.client import StorageConfig, build_bucket_list

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)

logger = logging.getLogger(__name__)


def storage_configs(settings: Settings) -> list[StorageConfig]:
    """Translate configured buckets into storage configs, keeping order."""
    return [
        StorageConfig(
            bucket_name=bucket.bucket,
            region=bucket.region,
            endpoint_url=bucket.endpoint,
            access_key_id=bucket.access_key,
            secret_access_key=bucket.secret_key,
        )
        for bucket in settings.bucket
    ]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Backends are already built by the time this runs, so startup only
    reports where we're listening. boto3 clients need no explicit close.
    """
    settings: Settings = app.state.settings

    logger.info(
        "Start: %s",
        settings.host,
        extra={
            "version": __version__,
            "buckets": app.state.bucket_list.names,
        }
    )

    yield

    logger.info("bucketgate shutting down")


def create_app(
    settings: Optional[Settings] = None,
    bucket_list: Optional[BucketList] = None,
) -> FastAPI:
    """
    Application factory.

    Args:
        settings: Loaded settings. Read from the config file when omitted.
        bucket_list: Prebuilt backends. Built from settings when omitted;
            tests pass in-memory backends here.

    Raises:
        ConfigError: The config file is missing or invalid
        StorageError: A backend client could not be created
    """
    if settings is None:
        settings = get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())

    if bucket_list is None:
        bucket_list = build_bucket_list(storage_configs(settings))

    app = FastAPI(
        title="bucketgate",
        version=__version__,
        description="Serves objects from an ordered list of S3-compatible buckets.",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )

    # Shared read-only state for every request
    app.state.settings = settings
    app.state.bucket_list = bucket_list

    # Health first: the object route below matches every path, "/" included
    app.include_router(health.router, tags=["Health"])
    app.include_router(objects.router, tags=["Objects"])

    logger.info(
        "FastAPI application created",
        extra={"buckets": len(bucket_list)}
    )

    return app


def run() -> None:
    """Console entry point: load config, build backends, serve."""
    import uvicorn

    settings = get_settings()
    app = create_app(settings)

    uvicorn.run(
        app,
        host=settings.bind_host,
        port=settings.bind_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
